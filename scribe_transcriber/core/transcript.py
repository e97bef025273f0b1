"""Transcript file assembly: header, utterance lines, append-only writes.

WHY: A multi-hour recording is transcribed segment by segment. Writing
each segment's utterances as soon as they are known keeps memory bounded
and leaves a readable partial transcript if a later segment fails.

HOW: create_transcription_header() renders the fixed header block.
format_utterance() renders one utterance in the configured output
format. append_to_file() creates the parent directory and appends.
TranscriptWriter binds a path and format for the pipeline.

RULES:
- Header: "Original filename: <basename>", optional YouTube title/link
  lines, blank line, "# Transcription Result", blank line
- Text lines: "[<timestamp>] <speaker>: <text>"
- JSON format: same header, then one JSON object per utterance line
  (speaker, start, timestamp, text)
- Files are opened in append mode, never read-modify-write
- Directory creation failures raise FileError naming the directory
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from scribe_transcriber.config import DEFAULT_OUTPUT_DIR, TranscriptionConfig, project_path
from scribe_transcriber.core.ir import Utterance
from scribe_transcriber.errors import FileError
from scribe_transcriber.utils import format_timestamp, run_timestamp

logger = logging.getLogger(__name__)

def generate_output_filename(
    output_dir: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Return a timestamped transcript path, e.g. transcripts/transcript_<ts>.txt.

    The directory is not created here; append_to_file() does that.
    """
    directory = Path(output_dir) if output_dir is not None else project_path(DEFAULT_OUTPUT_DIR)
    return directory / "transcript_{}.txt".format(run_timestamp(now))


def create_transcription_header(file_path: str | Path, config: TranscriptionConfig) -> str:
    header = "Original filename: {}".format(Path(file_path).name)

    if config.youtube_metadata:
        header += "\nYouTube title: {}\nYouTube link: {}".format(
            config.youtube_metadata.title, config.youtube_metadata.url,
        )

    header += "\n\n# Transcription Result\n\n"
    return header


def format_utterance(utterance: Utterance, output_format: str = "text") -> str:
    """Render one utterance as a line of the transcript.

    Whitespace at the edges of the text is stripped; spacing tokens from
    the service usually leave a trailing space.
    """
    text = utterance.text.strip()
    timestamp = format_timestamp(utterance.start)

    if output_format == "json":
        return json.dumps(
            {
                "speaker": utterance.speaker,
                "start": round(utterance.start, 3),
                "timestamp": timestamp,
                "text": text,
            },
            ensure_ascii=False,
        ) + "\n"

    return "[{}] {}: {}\n".format(timestamp, utterance.speaker, text)


def append_to_file(file_path: str | Path, content: str) -> None:
    """Append content to a UTF-8 file, creating its directory first.

    Raises:
        FileError: The parent directory could not be created.
    """
    file_path = Path(file_path)
    directory = file_path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileError("Failed to create directory", directory) from e

    with open(file_path, "a", encoding="utf-8") as f:
        f.write(content)


class TranscriptWriter:
    """Append-only writer for one transcript file."""

    def __init__(self, output_path: Path, output_format: str = "text") -> None:
        self.output_path = Path(output_path)
        self.output_format = output_format
        self.utterance_count = 0

    def write_header(self, source_path: str | Path, config: TranscriptionConfig) -> None:
        append_to_file(self.output_path, create_transcription_header(source_path, config))
        logger.debug("Wrote transcript header to %s", self.output_path)

    def write_utterances(self, utterances: Iterable[Utterance]) -> int:
        """Append utterances and return how many were written."""
        lines = [format_utterance(u, self.output_format) for u in utterances]
        if not lines:
            return 0
        append_to_file(self.output_path, "".join(lines))
        self.utterance_count += len(lines)
        return len(lines)
