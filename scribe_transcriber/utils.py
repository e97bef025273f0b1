"""Small pure helpers: timestamps, run identifiers, filenames, URL matching.

WHY: These are used by every stage (segmenter file names, transcript
lines, downloader output names, input routing) and are easiest to trust
when they have no I/O and no dependencies on the rest of the package.

RULES:
- format_timestamp truncates fractions and clamps negatives to zero
- sanitize_filename hashes any non-ASCII input instead of transliterating
- is_youtube_url only recognizes watch, shorts and youtu.be links
"""

from __future__ import annotations

import hashlib
import math
import os
import re
from datetime import datetime, timezone
from typing import Optional

_ASCII_RE = re.compile(r"^[\x00-\x7F]*$")
_UNSAFE_FILENAME_CHARS_RE = re.compile(r"[^a-zA-Z0-9\s\-_.]")

_YOUTUBE_PATTERNS = (
    re.compile(r"^https?://(?:www\.)?youtube\.com/watch\?v=[\w-]+"),
    re.compile(r"^https?://(?:www\.)?youtube\.com/shorts/[\w-]+"),
    re.compile(r"^https?://youtu\.be/[\w-]+"),
)


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``H:MM:SS`` when there are hours, else ``M:SS``.

    Hours are never zero-padded; minutes and seconds always are.
    """
    total_seconds = max(0, math.floor(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return "{}:{:02d}:{:02d}".format(hours, minutes, secs)
    return "{}:{:02d}".format(minutes, secs)


def run_timestamp(now: Optional[datetime] = None) -> str:
    """Return a filesystem-safe timestamp shared by all files of one run.

    Microseconds are included so concurrent runs do not collide.
    """
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%d_%H%M%S_%f")


def sanitize_filename(filename: str) -> str:
    """Convert an arbitrary title into a filesystem-safe filename.

    WHY: Video titles routinely contain emoji, CJK text, slashes and
    quotes. Non-ASCII titles produce unpredictable lengths and encodings
    on disk, so they are replaced by a short stable hash.

    HOW: If any character is outside 7-bit ASCII, the name becomes
    ``video_<first 8 hex chars of md5(original)><extension>``. The result
    (hashed or not) then loses every character that is not alphanumeric,
    whitespace, hyphen, underscore or period, and is stripped.

    RULES:
    - Same input always yields the same output
    - The extension of the original name is preserved when hashing
    """
    if not _ASCII_RE.match(filename):
        digest = hashlib.md5(filename.encode("utf-8")).hexdigest()[:8]
        ext = os.path.splitext(filename)[1]
        filename = "video_{}{}".format(digest, ext)

    return _UNSAFE_FILENAME_CHARS_RE.sub("", filename).strip()


def is_youtube_url(url: str) -> bool:
    return any(pattern.match(url) for pattern in _YOUTUBE_PATTERNS)
