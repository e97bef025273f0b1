"""Intermediate representation dataclasses shared by the pipeline stages.

WHY: The segmenter, the speaker grouper and the transcript writer pass
sources, segments and utterances between each other. Typed dataclasses
make those hand-offs explicit and keep the stages independently testable.

HOW: Three dataclasses:
  AudioSource — the resolved local file plus optional YouTube provenance
  Segment     — one fixed-length slice of the source on disk
  Utterance   — a run of consecutive same-speaker text with a start time

RULES:
- All times on Utterance are float seconds on the original timeline
- Segment offsets are integer milliseconds on the original timeline
- AudioSource and Segment are immutable once created
- UNKNOWN_SPEAKER is used whenever the service returns no speaker id
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

UNKNOWN_SPEAKER = "unknown_speaker"


@dataclass(frozen=True)
class AudioSource:
    """A local audio/video file ready to be transcribed.

    RULES:
    - file_path points to a local file (downloads are already resolved)
    - title and source_url are set only for YouTube inputs
    """

    file_path: Path
    title: Optional[str] = None
    source_url: Optional[str] = None


@dataclass(frozen=True)
class Segment:
    """One slice of the source audio written to its own file.

    WHY: The remote service has a duration/size ceiling, so long inputs
    are cut into fixed-length slices. Each slice remembers where it
    starts in the original recording so word times can be shifted back.

    RULES:
    - index is 0-based and contiguous across the segment list
    - start_offset_ms(i + 1) == start_offset_ms(i) + segment_length_ms
    - Only the last segment may be shorter than the segment length
    """

    index: int
    file_path: Path
    start_offset_ms: int

    @property
    def start_offset_s(self) -> float:
        return self.start_offset_ms / 1000.0


@dataclass
class Utterance:
    """A maximal run of consecutive same-speaker text.

    speaker is the service's speaker id or UNKNOWN_SPEAKER, text is the
    concatenation of the constituent token texts, start is the start of
    the first token in seconds.
    """

    speaker: str
    text: str
    start: float
