"""Command-line interface for the Scribe transcriber.

WHY: Users transcribe a file or a YouTube link from the terminal and
need the process exit code to reflect success or failure.

HOW: argparse builds the options, logging is configured on stderr, the
options become a TranscriptionConfig snapshot, and transcribe() runs
under asyncio.run(). Its 0/1 result becomes the exit code.

RULES:
- Positional argument: input file path or YouTube URL
- Log output goes to stderr (stdout stays clean)
- Invalid option values exit with status 2 (argparse convention)
- Exit status is 0 on success, 1 on any transcription failure
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from scribe_transcriber import __version__
from scribe_transcriber.config import (
    DEFAULT_DIARIZE,
    DEFAULT_NUM_SPEAKERS,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_SEGMENT_LENGTH_MS,
    DEFAULT_TAG_AUDIO_EVENTS,
    OUTPUT_FORMATS,
    TranscriptionConfig,
)
from scribe_transcriber.pipeline import transcribe

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="scribe_transcriber",
        description="Transcribe audio/video files or YouTube videos with "
                    "ElevenLabs Scribe into speaker-attributed text.",
    )

    parser.add_argument(
        "input",
        help="Path to an audio/video file, or a YouTube URL.",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Transcript file to append to (default: transcripts/transcript_<timestamp>.txt).",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=sorted(OUTPUT_FORMATS),
        default=DEFAULT_OUTPUT_FORMAT,
        help="Utterance line format (default: %(default)s).",
    )
    parser.add_argument(
        "--diarize",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_DIARIZE,
        help="Enable speaker diarization (default: %(default)s).",
    )
    parser.add_argument(
        "--tag-audio-events",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_TAG_AUDIO_EVENTS,
        help="Tag non-speech audio events such as (laughter) (default: %(default)s).",
    )
    parser.add_argument(
        "--num-speakers",
        type=int,
        default=DEFAULT_NUM_SPEAKERS,
        help="Expected number of speakers (default: let the service decide).",
    )
    parser.add_argument(
        "--language",
        dest="language_code",
        default=None,
        help="Language code of the audio, e.g. 'en' or 'ja' (default: auto-detect).",
    )
    parser.add_argument(
        "--segment-minutes",
        type=float,
        default=DEFAULT_SEGMENT_LENGTH_MS / 60000,
        help="Split audio longer than this into segments of this length (default: %(default)g).",
    )
    parser.add_argument(
        "--keep-segments",
        action="store_true",
        help="Keep temporary segment files after a successful run.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def config_from_args(args: argparse.Namespace) -> TranscriptionConfig:
    return TranscriptionConfig.create(
        diarize=args.diarize,
        tag_audio_events=args.tag_audio_events,
        output_format=args.output_format,
        num_speakers=args.num_speakers,
        language_code=args.language_code,
        segment_length_ms=int(args.segment_minutes * 60 * 1000),
        output_path=args.output,
        keep_segments=args.keep_segments,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``scribe-transcriber`` and ``python -m scribe_transcriber``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    sys.exit(asyncio.run(transcribe(args.input, config)))


if __name__ == "__main__":
    main()
