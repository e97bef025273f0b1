"""Audio segmentation with ffprobe and ffmpeg.

WHY: Scribe rejects very long uploads, so recordings longer than the
segment length are cut into fixed-length MP3 slices that are sent one by
one. Each slice keeps its offset in the original timeline so the word
times it produces can be shifted back.

HOW: probe_duration_ms() asks ffprobe for the container duration.
plan_segments() turns that into (index, start) pairs with ceil division.
split_audio() runs one ffmpeg process per segment, strictly one after
another, each seeking to ``index * length`` and cutting ``length``
seconds; ffmpeg stops at end of stream so the last slice needs no
special case.

RULES:
- Segment files: segment_<NNN>_<run timestamp>.mp3 in SEGMENT_DIR
- Segments are extracted sequentially in index order
- The first failure aborts with SegmentExtractionError naming the index
- Already written segments are left on disk after a failure
- A source shorter than one segment length yields exactly one segment
- An exact multiple of the segment length yields no zero-length tail
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from scribe_transcriber.config import (
    DEFAULT_SEGMENT_LENGTH_MS,
    FFMPEG_BINARY,
    FFPROBE_BINARY,
    SEGMENT_AUDIO_BITRATE,
    SEGMENT_DIR,
    project_path,
)
from scribe_transcriber.core.ir import Segment
from scribe_transcriber.errors import FileError, MediaProbeError, SegmentExtractionError
from scribe_transcriber.utils import run_timestamp

logger = logging.getLogger(__name__)


async def _run_command(cmd: Sequence[str]) -> Tuple[int, str, str]:
    """Run a subprocess and return (returncode, stdout, stderr)."""
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        return 127, "", "{}: command not found".format(cmd[0])
    except OSError as e:
        return 126, "", "{}: {}".format(cmd[0], e)
    stdout, stderr = await process.communicate()
    return (
        process.returncode,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


async def probe_duration_ms(audio_path: str | Path) -> float:
    """Return the total duration of a media file in milliseconds.

    Raises:
        MediaProbeError: ffprobe failed, printed something unparseable,
            or reported no positive duration.
    """
    cmd = [
        FFPROBE_BINARY,
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "json",
        str(audio_path),
    ]
    returncode, stdout, stderr = await _run_command(cmd)
    if returncode != 0:
        logger.error("ffprobe failed for %s: %s", audio_path, stderr.strip())
        raise MediaProbeError("Could not retrieve audio file duration", audio_path)

    try:
        duration_s = float(json.loads(stdout)["format"]["duration"])
    except (ValueError, KeyError, TypeError):
        logger.error("Could not parse ffprobe output for %s: %r", audio_path, stdout)
        raise MediaProbeError("Could not retrieve audio file duration", audio_path)

    if not math.isfinite(duration_s) or duration_s <= 0:
        raise MediaProbeError("Audio file has no playable duration", audio_path)

    return duration_s * 1000


def plan_segments(total_duration_ms: float, segment_length_ms: int) -> List[Tuple[int, int]]:
    """Return the (index, start_offset_ms) pairs covering the whole duration.

    RULES:
    - Number of segments is ceil(total / length)
    - Offsets are index * length, so segments are contiguous
    """
    if segment_length_ms <= 0:
        raise ValueError("segment_length_ms must be positive, got {}".format(segment_length_ms))
    if total_duration_ms <= 0:
        return []
    num_segments = math.ceil(total_duration_ms / segment_length_ms)
    return [(i, i * segment_length_ms) for i in range(num_segments)]


def segment_filename(index: int, timestamp: str) -> str:
    return "segment_{:03d}_{}.mp3".format(index, timestamp)


def _build_extract_command(
    audio_path: Path,
    output_path: Path,
    start_s: float,
    duration_s: float,
) -> List[str]:
    return [
        FFMPEG_BINARY,
        "-hide_banner",
        "-loglevel", "error",
        "-y",
        "-ss", "{:.3f}".format(start_s),
        "-t", "{:.3f}".format(duration_s),
        "-i", str(audio_path),
        "-vn",
        "-acodec", "libmp3lame",
        "-b:a", SEGMENT_AUDIO_BITRATE,
        str(output_path),
    ]


async def split_audio(
    audio_path: str | Path,
    segment_length_ms: int = DEFAULT_SEGMENT_LENGTH_MS,
    *,
    output_dir: Optional[Path] = None,
    timestamp: Optional[str] = None,
    total_duration_ms: Optional[float] = None,
) -> List[Segment]:
    """Split an audio file into fixed-length segment files.

    WHY: Keeps every upload under the service's duration ceiling while
    the segment offsets preserve the original timeline.

    HOW: Probes the duration (unless given), plans the segments, then
    awaits one ffmpeg extraction at a time. A failing extraction aborts
    the loop immediately.

    Args:
        audio_path: Source audio/video file.
        segment_length_ms: Length of each segment (default 45 minutes).
        output_dir: Directory for segment files (default SEGMENT_DIR
            under PROJECT_ROOT).
        timestamp: Run timestamp shared by all segment names.
        total_duration_ms: Already probed duration, skips ffprobe.

    Returns:
        Segments in index order.

    Raises:
        MediaProbeError: The duration could not be determined.
        FileError: The segment directory could not be created.
        SegmentExtractionError: ffmpeg failed for one segment.
    """
    audio_path = Path(audio_path)
    output_dir = Path(output_dir) if output_dir is not None else project_path(SEGMENT_DIR)
    timestamp = timestamp or run_timestamp()

    logger.info(
        "Splitting audio file into %g-minute segments...", segment_length_ms / 60 / 1000
    )

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileError("Failed to create directory", output_dir) from e

    if total_duration_ms is None:
        total_duration_ms = await probe_duration_ms(audio_path)

    segment_length_s = segment_length_ms / 1000
    segments: List[Segment] = []

    for index, start_offset_ms in plan_segments(total_duration_ms, segment_length_ms):
        output_path = output_dir / segment_filename(index, timestamp)
        cmd = _build_extract_command(
            audio_path, output_path, start_offset_ms / 1000, segment_length_s
        )
        returncode, _, stderr = await _run_command(cmd)
        if returncode != 0:
            error = SegmentExtractionError(index, audio_path, stderr.strip())
            logger.error("%s (ffmpeg exit %s): %s", error, returncode, stderr.strip())
            raise error

        logger.debug("Wrote segment %d to %s", index, output_path)
        segments.append(Segment(index=index, file_path=output_path, start_offset_ms=start_offset_ms))

    logger.info("Audio split into %d segments", len(segments))
    return segments
