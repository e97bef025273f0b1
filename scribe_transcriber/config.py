"""Configuration constants, .env loading, and the per-run config snapshot.

WHY: Centralizes every tunable value (API endpoint, model, directories,
segment length, ffmpeg binaries, transcription defaults) so they are easy
to find and override without touching pipeline code.

HOW: python-dotenv loads the .env file on import. Constants are plain
module-level values read from the environment with sensible defaults.
TranscriptionConfig is a frozen dataclass built once per invocation by
TranscriptionConfig.create(); later changes produce a new snapshot.

RULES:
- API key is loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
- Directories are relative to PROJECT_ROOT (empty = current directory)
- TranscriptionConfig is immutable once created
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name, "").strip()
    return float(value) if value else None


# ---------------------------------------------------------------------------
# ElevenLabs Scribe API
# ---------------------------------------------------------------------------

ELEVENLABS_BASE_URL = os.getenv("ELEVENLABS_BASE_URL", "https://api.elevenlabs.io")
SCRIBE_MODEL = os.getenv("SCRIBE_MODEL", "scribe_v1")
SCRIBE_TIMEOUT_S = _env_float("SCRIBE_TIMEOUT_S")
"""Read/write/pool timeout for Scribe requests; unset means wait indefinitely."""
SCRIBE_CONNECT_TIMEOUT_S = 30.0
SCRIBE_MAX_SPEAKERS = 32
"""Upper bound the service accepts for the num_speakers hint."""

# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------

PROJECT_ROOT = os.getenv("PROJECT_ROOT", "")
DEFAULT_OUTPUT_DIR = os.getenv("DEFAULT_OUTPUT_DIR", "transcripts")
SEGMENT_DIR = os.getenv("SEGMENT_DIR", "temp_audio_segments")
DOWNLOAD_DIR = os.getenv("DOWNLOAD_DIR", "youtube_downloads")


def project_path(*parts: str) -> Path:
    """Join parts onto PROJECT_ROOT (or the current directory when unset)."""
    return Path(PROJECT_ROOT or ".").joinpath(*parts)


# ---------------------------------------------------------------------------
# Media processing
# ---------------------------------------------------------------------------

FFMPEG_BINARY = os.getenv("FFMPEG_BINARY", "ffmpeg")
FFPROBE_BINARY = os.getenv("FFPROBE_BINARY", "ffprobe")
DEFAULT_SEGMENT_LENGTH_MS = int(os.getenv("DEFAULT_SEGMENT_LENGTH_MS", str(45 * 60 * 1000)))
SEGMENT_AUDIO_BITRATE = os.getenv("SEGMENT_AUDIO_BITRATE", "128k")
DOWNLOAD_AUDIO_QUALITY = "192"
"""MP3 bitrate (kbps) used when converting YouTube downloads."""

# ---------------------------------------------------------------------------
# Transcription defaults
# ---------------------------------------------------------------------------

OUTPUT_FORMATS = frozenset({"text", "json"})
DEFAULT_OUTPUT_FORMAT = os.getenv("DEFAULT_OUTPUT_FORMAT", "text")
DEFAULT_DIARIZE = _env_bool("DEFAULT_DIARIZE", True)
DEFAULT_TAG_AUDIO_EVENTS = _env_bool("DEFAULT_TAG_AUDIO_EVENTS", True)
DEFAULT_NUM_SPEAKERS = _env_int("DEFAULT_NUM_SPEAKERS")


def load_api_key() -> str:
    """Load the ElevenLabs API key from the environment.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("ELEVENLABS_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "ElevenLabs API key not configured. "
            "Add ELEVENLABS_API_KEY to the .env file in the project root."
        )
    return key


@dataclass(frozen=True)
class YoutubeMetadata:
    """Title and link of a downloaded video, written into the header."""

    title: str
    url: str


@dataclass(frozen=True)
class TranscriptionConfig:
    """Immutable snapshot of the options for one transcription run.

    WHY: The pipeline, the API client and the transcript writer all read
    the same options. Freezing them once per invocation guarantees no
    stage changes what another stage sees.

    HOW: Build with TranscriptionConfig.create(), which fills unspecified
    options from the environment defaults and validates the rest. Use
    with_youtube_metadata() to attach download metadata.

    RULES:
    - output_format is one of OUTPUT_FORMATS
    - num_speakers is None (service decides) or 1..SCRIBE_MAX_SPEAKERS
    - segment_length_ms must be positive
    """

    diarize: bool = DEFAULT_DIARIZE
    tag_audio_events: bool = DEFAULT_TAG_AUDIO_EVENTS
    output_format: str = DEFAULT_OUTPUT_FORMAT
    num_speakers: Optional[int] = DEFAULT_NUM_SPEAKERS
    youtube_metadata: Optional[YoutubeMetadata] = None
    language_code: Optional[str] = None
    segment_length_ms: int = DEFAULT_SEGMENT_LENGTH_MS
    output_path: Optional[Path] = None
    keep_segments: bool = False

    @classmethod
    def create(cls, **options) -> TranscriptionConfig:
        """Build a validated snapshot from user options.

        Options left out or passed as None fall back to the defaults.
        Raises ValueError for an unknown option or an invalid value.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise ValueError("Unknown transcription option(s): {}".format(
                ", ".join(sorted(unknown))
            ))

        values = {k: v for k, v in options.items() if v is not None}
        if "output_path" in values:
            values["output_path"] = Path(values["output_path"])
        config = cls(**values)
        config._validate()
        return config

    def _validate(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError("Unknown output format '{}'. Available formats: {}".format(
                self.output_format, ", ".join(sorted(OUTPUT_FORMATS))
            ))
        if self.num_speakers is not None and not 1 <= self.num_speakers <= SCRIBE_MAX_SPEAKERS:
            raise ValueError("num_speakers must be between 1 and {}, got {}".format(
                SCRIBE_MAX_SPEAKERS, self.num_speakers
            ))
        if self.segment_length_ms <= 0:
            raise ValueError("segment_length_ms must be positive, got {}".format(
                self.segment_length_ms
            ))

    def with_youtube_metadata(self, metadata: Optional[YoutubeMetadata]) -> TranscriptionConfig:
        return dataclasses.replace(self, youtube_metadata=metadata)
