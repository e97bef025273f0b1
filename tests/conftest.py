"""Shared test fixtures for the scribe_transcriber test suite.

WHY: Grouper, client and pipeline tests all need the same realistic
Scribe response: word, spacing and audio-event tokens from two speakers.
Centralizing it here keeps every test on one authoritative sample.

HOW: Pytest fixtures provide the raw response dict, the parsed token
list, and a default TranscriptionConfig. FakeScribeClient stands in for
ScribeClient and returns canned token lists per uploaded file.

RULES:
- Token data mirrors the shape of POST /v1/speech-to-text responses
- Token times are seconds relative to the uploaded file
- No test touches the network or real ffmpeg
"""

from typing import Any, Dict, List

import pytest

from scribe_transcriber.api.models import WordToken
from scribe_transcriber.config import TranscriptionConfig


SAMPLE_WORDS: List[Dict[str, Any]] = [
    {"text": "Hi",        "start": 0.12, "end": 0.30, "type": "word",        "speaker_id": "speaker_0"},
    {"text": " ",         "start": 0.30, "end": 0.35, "type": "spacing",     "speaker_id": "speaker_0"},
    {"text": "there.",    "start": 0.35, "end": 0.70, "type": "word",        "speaker_id": "speaker_0"},
    {"text": " ",         "start": 0.70, "end": 1.10, "type": "spacing",     "speaker_id": "speaker_0"},
    {"text": "(laughs)",  "start": 1.10, "end": 1.40, "type": "audio_event", "speaker_id": "speaker_1"},
    {"text": " ",         "start": 1.40, "end": 1.45, "type": "spacing",     "speaker_id": "speaker_1"},
    {"text": "Hello",     "start": 1.45, "end": 1.80, "type": "word",        "speaker_id": "speaker_1"},
    {"text": " ",         "start": 1.80, "end": 1.85, "type": "spacing",     "speaker_id": "speaker_1"},
    {"text": "back!",     "start": 1.85, "end": 2.20, "type": "word",        "speaker_id": "speaker_1"},
]


def tokens(*entries):
    """Build WordTokens from (text, start, speaker_id) tuples."""
    return [WordToken(text=text, start=start, speaker_id=speaker) for text, start, speaker in entries]


class FakeScribeClient:
    """Drop-in for an entered ScribeClient that records calls.

    ``responses`` maps a file name to the token list returned for it;
    ``errors`` maps a file name to an exception to raise instead.
    """

    def __init__(self, responses=None, errors=None):
        self.responses = responses or {}
        self.errors = errors or {}
        self.calls = []

    async def transcribe_file(self, file_path, config, on_status=None):
        self.calls.append(file_path.name)
        if file_path.name in self.errors:
            raise self.errors[file_path.name]
        return list(self.responses.get(file_path.name, []))


@pytest.fixture
def sample_scribe_response():
    """Full Scribe response dict with the sample tokens."""
    return {
        "language_code": "en",
        "language_probability": 0.98,
        "text": "Hi there. (laughs) Hello back!",
        "words": [dict(w) for w in SAMPLE_WORDS],
    }


@pytest.fixture
def sample_tokens():
    """The sample tokens parsed into WordToken objects."""
    return [WordToken.from_dict(w) for w in SAMPLE_WORDS]


@pytest.fixture
def default_config():
    return TranscriptionConfig.create(
        diarize=True,
        tag_audio_events=True,
        output_format="text",
        num_speakers=2,
    )
