"""Typed errors for local file and media failures.

WHY: Callers need to log which directory or which segment failed without
parsing message strings. Upstream service failures live next to the API
client (ScribeAPIError) so the two families never get confused.

RULES:
- Every FileError carries the offending path
- MediaProbeError and SegmentExtractionError are FileError subclasses
"""

from __future__ import annotations

from pathlib import Path


class FileError(Exception):
    """Raised when a local file or directory operation fails."""

    def __init__(self, message: str, path: str | Path) -> None:
        self.message = message
        self.path = str(path)
        super().__init__(f"{message}: {self.path}")


class MediaProbeError(FileError):
    """Raised when the duration of a media file cannot be determined."""


class SegmentExtractionError(FileError):
    """Raised when ffmpeg fails to write one segment of a split.

    ``path`` is the source audio file, ``index`` the failed segment.
    """

    def __init__(self, index: int, path: str | Path, detail: str = "") -> None:
        self.index = index
        self.detail = detail
        super().__init__(f"Failed to create segment {index}", path)
