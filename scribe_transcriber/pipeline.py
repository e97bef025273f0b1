"""Transcription orchestrator: input resolution, segmentation, transcription, assembly.

WHY: The tool's contract is a single call that takes a path or a YouTube
URL and returns 0 or 1. This module wires the downloader, segmenter, API
client, speaker grouper and transcript writer together behind that call.

HOW: transcribe() resolves the input (downloading YouTube URLs), builds
the config snapshot and calls transcribe_audio(). transcribe_audio()
probes the source, splits it when it is longer than one segment, writes
the header, then sends segments to Scribe one at a time. Each segment's
tokens go through one shared SpeakerGrouper with the segment's offset,
and the utterances it closes are appended to the transcript right away.

RULES:
- Segments are transcribed strictly in index order, one request at a time
- Token times are shifted by the segment's start offset
- Grouper state is carried across segments; the pending utterance is
  flushed after the last segment
- Any failure aborts the run; partial output stays on disk
- transcribe() never raises: failures are logged and returned as 1
- Downloader failure (None) returns 1 without contacting Scribe
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from scribe_transcriber.api.client import ScribeClient
from scribe_transcriber.config import TranscriptionConfig, YoutubeMetadata
from scribe_transcriber.core.grouper import SpeakerGrouper
from scribe_transcriber.core.ir import AudioSource, Segment
from scribe_transcriber.core.segmenter import probe_duration_ms, split_audio
from scribe_transcriber.core.transcript import TranscriptWriter, generate_output_filename
from scribe_transcriber.downloader import DownloadResult, download_from_youtube
from scribe_transcriber.utils import is_youtube_url, run_timestamp

logger = logging.getLogger(__name__)

Downloader = Callable[[str], Awaitable[Optional[DownloadResult]]]


async def _plan_audio(source: AudioSource, config: TranscriptionConfig) -> List[Segment]:
    """Return the segments to transcribe; the source itself if it is short enough."""
    total_duration_ms = await probe_duration_ms(source.file_path)
    logger.info("Audio duration: %.1f minutes", total_duration_ms / 60000)

    if total_duration_ms <= config.segment_length_ms:
        return [Segment(index=0, file_path=source.file_path, start_offset_ms=0)]

    return await split_audio(
        source.file_path,
        config.segment_length_ms,
        timestamp=run_timestamp(),
        total_duration_ms=total_duration_ms,
    )


def _remove_segments(segments: List[Segment]) -> None:
    for segment in segments:
        try:
            segment.file_path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("Could not remove segment file %s: %s", segment.file_path, e)


async def transcribe_audio(
    source: AudioSource,
    config: TranscriptionConfig,
    client: ScribeClient,
) -> Path:
    """Transcribe a local audio file into an append-only transcript.

    Args:
        source: The resolved local audio file.
        config: The run's configuration snapshot.
        client: An entered ScribeClient.

    Returns:
        Path of the written transcript.

    Raises:
        FileError: Probing, splitting or writing failed.
        ScribeAPIError: The service rejected a segment.
        httpx.HTTPError: A request failed at the network level.
    """
    segments = await _plan_audio(source, config)
    is_split = segments[0].file_path != source.file_path

    output_path = config.output_path or generate_output_filename()
    writer = TranscriptWriter(output_path, config.output_format)
    writer.write_header(source.file_path, config)
    logger.info("Writing transcript to %s", output_path)

    grouper = SpeakerGrouper()
    for segment in segments:
        logger.info("Transcribing segment %d/%d...", segment.index + 1, len(segments))
        tokens = await client.transcribe_file(segment.file_path, config, on_status=logger.info)
        closed = grouper.feed(tokens, offset_s=segment.start_offset_s)
        writer.write_utterances(closed)

    writer.write_utterances(grouper.flush())
    logger.info("Transcription complete: %d utterances written", writer.utterance_count)

    if is_split and not config.keep_segments:
        _remove_segments(segments)

    return output_path


async def transcribe(
    input_ref: str,
    config: Optional[TranscriptionConfig] = None,
    *,
    client: Optional[ScribeClient] = None,
    downloader: Downloader = download_from_youtube,
) -> int:
    """Transcribe a local audio/video file or a YouTube URL.

    Args:
        input_ref: Path to an audio/video file, or a YouTube URL.
        config: Options snapshot (defaults from the environment when None).
        client: An entered ScribeClient to reuse; a new one is opened
            (and closed) when None.
        downloader: Coroutine resolving a URL to a DownloadResult or None.

    Returns:
        0 on success, 1 on any failure.
    """
    try:
        config = config or TranscriptionConfig.create()
        source = AudioSource(file_path=Path(input_ref))

        if is_youtube_url(input_ref):
            logger.info("YouTube URL detected. Starting download...")
            download = await downloader(input_ref)
            if download is None:
                logger.error("Failed to download from YouTube. Stopping process.")
                return 1
            source = AudioSource(
                file_path=download.file_path,
                title=download.title,
                source_url=download.url,
            )
            config = config.with_youtube_metadata(
                YoutubeMetadata(title=download.title, url=download.url)
            )

        if client is not None:
            await transcribe_audio(source, config, client)
        else:
            async with ScribeClient() as scribe:
                await transcribe_audio(source, config, scribe)
        return 0
    except Exception as e:
        logger.exception("Error occurred: %s", e)
        return 1
