"""Async HTTP client for the ElevenLabs Scribe speech-to-text API.

WHY: Every segment of a recording is sent to Scribe and comes back as a
list of word tokens. This module encapsulates the request shape, auth
and error wrapping so the pipeline only deals with typed tokens.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. ScribeClient is an
async context manager — enter it to get an authenticated client, exit to
close the connection pool. transcribe_file() uploads one file as
multipart/form-data and parses the JSON response.

RULES:
- Always use the async context manager (async with ScribeClient() as client:)
- Default model is scribe_v1, timestamps are requested at word granularity
- Non-2xx responses raise ScribeAPIError; network errors propagate as httpx.HTTPError
- No retries: a failed call fails the run
- Status callback (on_status) is optional; when provided, called with status strings
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from scribe_transcriber.api.models import TranscriptResponse, WordToken
from scribe_transcriber.config import (
    ELEVENLABS_BASE_URL,
    SCRIBE_CONNECT_TIMEOUT_S,
    SCRIBE_MODEL,
    SCRIBE_TIMEOUT_S,
    TranscriptionConfig,
    load_api_key,
)

_SPEECH_TO_TEXT_PATH = "/v1/speech-to-text"


class ScribeAPIError(Exception):
    """Raised when the Scribe API returns an error response.

    WHY: Callers need a typed exception to tell upstream failures (quota,
    malformed audio, auth) apart from local file errors.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Scribe API error {status_code}: {message}")


def _form_bool(value: bool) -> str:
    return "true" if value else "false"


def build_form_data(config: TranscriptionConfig, model: str) -> Dict[str, str]:
    """Build the multipart form fields for one speech-to-text request.

    RULES:
    - diarize and tag_audio_events are always sent
    - num_speakers and language_code are sent only when set
    """
    data = {
        "model_id": model,
        "diarize": _form_bool(config.diarize),
        "tag_audio_events": _form_bool(config.tag_audio_events),
        "timestamps_granularity": "word",
    }
    if config.num_speakers is not None:
        data["num_speakers"] = str(config.num_speakers)
    if config.language_code:
        data["language_code"] = config.language_code
    return data


class ScribeClient:
    """Async client for the ElevenLabs Scribe transcription API.

    HOW: Wraps httpx.AsyncClient with xi-api-key auth. Use as an async
    context manager so the connection pool is always closed.

    RULES:
    - api_key defaults to load_api_key() from .env
    - base_url and model default to the config values
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or ELEVENLABS_BASE_URL).rstrip("/")
        self._model = model or SCRIBE_MODEL
        self._timeout_s = timeout_s if timeout_s is not None else SCRIBE_TIMEOUT_S
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> ScribeClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"xi-api-key": self._api_key},
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def timeout(self) -> httpx.Timeout:
        """Connect timeout always applies; the rest only when configured."""
        return httpx.Timeout(self._timeout_s, connect=SCRIBE_CONNECT_TIMEOUT_S)

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "ScribeClient must be used as an async context manager: "
                "async with ScribeClient() as client: ..."
            )
        return self._client

    async def transcribe_file(
        self,
        file_path: Path,
        config: TranscriptionConfig,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> List[WordToken]:
        """Transcribe one audio file and return its word tokens.

        WHY: The pipeline calls this once per segment, in order. Token
        times in the result are relative to the uploaded file.

        HOW: POSTs the file with the form fields from build_form_data()
        and parses the JSON body into a TranscriptResponse.

        Args:
            file_path: Path to the audio file (a segment or a short source).
            config: The run's transcription options.
            on_status: Optional callback for status updates.

        Returns:
            Ordered list of WordToken objects.
        """
        client = self._ensure_client()
        file_path = Path(file_path)
        if on_status:
            on_status("Uploading {} to Scribe...".format(file_path.name))

        with open(file_path, "rb") as f:
            resp = await client.post(
                _SPEECH_TO_TEXT_PATH,
                data=build_form_data(config, self._model),
                files={"file": (file_path.name, f)},
            )

        if resp.status_code != 200:
            raise ScribeAPIError(resp.status_code, resp.text)

        transcript = TranscriptResponse.from_dict(resp.json())
        if on_status:
            on_status("  Received {} tokens (language: {})".format(
                len(transcript.words), transcript.language_code or "unknown",
            ))
        return transcript.words
