"""ElevenLabs Scribe response dataclasses.

WHY: The speech-to-text endpoint returns plain JSON. Typed dataclasses
make the fields the pipeline relies on explicit and catch shape changes
at the parsing boundary instead of deep inside the grouper.

HOW: Each dataclass maps to one JSON object of the response. from_dict
factories parse raw dicts; optional fields default to None.

RULES:
- WordToken.start/end are float seconds relative to the uploaded file
- speaker_id is None when diarization is disabled
- type is "word", "spacing" or "audio_event"; spacing tokens carry the
  whitespace between words and are kept so texts can be concatenated
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class WordToken:
    """One recognized word, space or audio event.

    RULES:
    - text: raw token text, including spaces for spacing tokens
    - start: seconds from the start of the transcribed file
    - end: seconds, None if the service omitted it
    - speaker_id: e.g. "speaker_0", None without diarization
    """

    text: str
    start: float
    end: Optional[float] = None
    type: str = "word"
    speaker_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> WordToken:
        return cls(
            text=data.get("text") or "",
            start=float(data.get("start") or 0.0),
            end=float(data["end"]) if data.get("end") is not None else None,
            type=data.get("type", "word"),
            speaker_id=data.get("speaker_id"),
        )


@dataclass
class TranscriptResponse:
    """Full response of POST /v1/speech-to-text.

    RULES:
    - text is the service's plaintext rendering (not used for assembly)
    - words is the ordered token list the grouper consumes
    """

    language_code: Optional[str]
    text: str
    words: List[WordToken] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> TranscriptResponse:
        return cls(
            language_code=data.get("language_code"),
            text=data.get("text", ""),
            words=[WordToken.from_dict(w) for w in data.get("words") or []],
        )
