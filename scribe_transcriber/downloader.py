"""YouTube audio downloader using yt-dlp.

WHY: YouTube inputs must become a local audio file before they can be
probed and segmented. The title and link are kept for the transcript
header.

HOW: yt-dlp first reads the video info to learn the title, then
downloads the best audio stream and converts it to MP3 at a fixed
bitrate with its FFmpegExtractAudio post-processor. The blocking yt-dlp
calls run in a worker thread so the event loop stays free.

RULES:
- Output file: sanitize_filename("<title>.mp3") in DOWNLOAD_DIR, or
  video.mp3 when the title sanitizes to no name at all
- Returns a DownloadResult on success and None on any failure
- Failures are logged here; callers only see the None sentinel
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yt_dlp

from scribe_transcriber.config import DOWNLOAD_AUDIO_QUALITY, DOWNLOAD_DIR, FFMPEG_BINARY, project_path
from scribe_transcriber.utils import sanitize_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DownloadResult:
    """A finished download: local MP3 path plus video title and URL."""

    file_path: Path
    title: str
    url: str


def _ydl_options(output_template: str) -> dict:
    return {
        "format": "bestaudio/best",
        "outtmpl": output_template,
        "quiet": True,
        "no_warnings": True,
        "noplaylist": True,
        "ffmpeg_location": FFMPEG_BINARY if FFMPEG_BINARY != "ffmpeg" else None,
        "postprocessors": [
            {
                "key": "FFmpegExtractAudio",
                "preferredcodec": "mp3",
                "preferredquality": DOWNLOAD_AUDIO_QUALITY,
            }
        ],
    }


def _download_sync(url: str, output_dir: Path) -> DownloadResult:
    with yt_dlp.YoutubeDL({"quiet": True, "no_warnings": True, "noplaylist": True}) as ydl:
        info = ydl.extract_info(url, download=False)
    title = (info or {}).get("title") or "untitled"
    logger.info("Video title: %s", title)

    filename = sanitize_filename("{}.mp3".format(title))
    if filename.startswith(".") or not Path(filename).stem:
        # Punctuation-only titles sanitize to a bare ".mp3"
        filename = "video.mp3"
    output_path = output_dir / filename
    # yt-dlp fills in the pre-conversion extension; the post-processor
    # then writes <stem>.mp3 next to it.
    template = str(output_path.with_suffix("")) + ".%(ext)s"

    options = {k: v for k, v in _ydl_options(template).items() if v is not None}
    with yt_dlp.YoutubeDL(options) as ydl:
        ydl.download([url])

    if not output_path.is_file():
        raise FileNotFoundError("yt-dlp finished but {} was not created".format(output_path))

    return DownloadResult(file_path=output_path, title=title, url=url)


async def download_from_youtube(
    url: str,
    output_dir: Optional[Path] = None,
) -> Optional[DownloadResult]:
    """Download a YouTube video's audio track as MP3.

    Args:
        url: A YouTube watch, shorts or youtu.be URL.
        output_dir: Target directory (default DOWNLOAD_DIR under PROJECT_ROOT).

    Returns:
        DownloadResult, or None if anything went wrong (no partial results).
    """
    output_dir = Path(output_dir) if output_dir is not None else project_path(DOWNLOAD_DIR)
    try:
        output_dir = output_dir.resolve()
        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Output directory: %s", output_dir)

        result = await asyncio.to_thread(_download_sync, url, output_dir)
    except (yt_dlp.utils.YoutubeDLError, OSError) as e:
        logger.error("Error occurred during YouTube download: %s", e)
        return None

    logger.info("Download completed: %s", result.file_path)
    return result
