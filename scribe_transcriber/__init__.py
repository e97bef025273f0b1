"""Scribe Transcriber — speaker-attributed transcripts from audio, video and YouTube.

WHY: Long recordings exceed what the ElevenLabs Scribe speech-to-text
service accepts in one request, and its output is a flat list of
timestamped word tokens. This package turns a file path or a YouTube
URL into a single readable transcript with one line per speaker turn.

HOW: Four-stage pipeline — resolve (download if needed), segment
(ffmpeg, fixed-length slices), transcribe (async API client, one
segment at a time), assemble (speaker grouping, append-only writer).

RULES:
- transcribe() is the public entry point and returns 0 or 1
- Segments are always processed strictly in index order
- The transcript file is appended to, never rewritten
"""

__version__ = "0.2.1"

from scribe_transcriber.pipeline import transcribe, transcribe_audio

__all__ = ["transcribe", "transcribe_audio", "__version__"]
