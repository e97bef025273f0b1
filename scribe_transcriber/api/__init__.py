"""ElevenLabs Scribe API package — async HTTP interface to the speech-to-text service.

WHY: The pipeline needs to send one audio file at a time and get back
timestamped, speaker-tagged word tokens. This package hides the HTTP
details behind a single client class.

HOW: ScribeClient wraps httpx.AsyncClient. Responses are parsed into
the dataclasses in models.py.

RULES:
- All HTTP calls go through ScribeClient (no direct httpx usage elsewhere)
- Authentication is via the xi-api-key header from config
"""

from scribe_transcriber.api.client import ScribeAPIError, ScribeClient
from scribe_transcriber.api.models import TranscriptResponse, WordToken

__all__ = ["ScribeAPIError", "ScribeClient", "TranscriptResponse", "WordToken"]
