"""Speaker grouping: merge word tokens into speaker utterances.

WHY: Scribe returns one token per word, space or audio event, each with
its own speaker id. A readable transcript needs one line per speaker
turn, and long recordings arrive in several segments whose token times
restart at zero.

HOW: Walk tokens in order, keeping the current speaker, accumulated text
and start time. Same speaker → append the text. Different speaker → emit
the current utterance and open a new one. SpeakerGrouper keeps the open
utterance between calls so a speaker who keeps talking across a segment
boundary stays one utterance; group_by_speaker is the one-shot version.

RULES:
- Missing speaker id → UNKNOWN_SPEAKER before comparison
- Texts are concatenated with no separator (tokens carry their own spaces)
- An utterance starts at the start of its first token
- Tokens with empty text are skipped; no empty utterance is ever emitted
- Adjacent emitted utterances never share a speaker
- feed() offsets token starts by offset_s (the segment's position)
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from scribe_transcriber.api.models import WordToken
from scribe_transcriber.core.ir import UNKNOWN_SPEAKER, Utterance


class SpeakerGrouper:
    """Incremental speaker grouper that carries state across segments.

    Usage::

        grouper = SpeakerGrouper()
        for segment, tokens in results:
            write(grouper.feed(tokens, offset_s=segment.start_offset_s))
        write(grouper.flush())
    """

    def __init__(self) -> None:
        self._pending: Optional[Utterance] = None

    @property
    def pending(self) -> Optional[Utterance]:
        """The utterance still open after the last feed(), if any."""
        return self._pending

    def feed(self, tokens: Iterable[WordToken], offset_s: float = 0.0) -> List[Utterance]:
        """Group a batch of tokens and return the utterances it closed.

        The last utterance of the batch stays pending, because the next
        batch may continue it.
        """
        closed: List[Utterance] = []

        for token in tokens:
            if not token.text:
                continue
            speaker = token.speaker_id if token.speaker_id is not None else UNKNOWN_SPEAKER

            if self._pending is None:
                self._pending = Utterance(speaker=speaker, text=token.text, start=token.start + offset_s)
            elif self._pending.speaker == speaker:
                self._pending.text += token.text
            else:
                closed.append(self._pending)
                self._pending = Utterance(speaker=speaker, text=token.text, start=token.start + offset_s)

        return closed

    def flush(self) -> List[Utterance]:
        """Close and return the pending utterance (empty list if none)."""
        pending, self._pending = self._pending, None
        if pending is not None and pending.text:
            return [pending]
        return []


def group_by_speaker(tokens: Iterable[WordToken], offset_s: float = 0.0) -> List[Utterance]:
    """Group a complete token sequence into speaker utterances.

    Args:
        tokens: Word tokens in chronological order.
        offset_s: Seconds added to every token start.

    Returns:
        Utterances in the same relative order as the input tokens.
    """
    grouper = SpeakerGrouper()
    utterances = grouper.feed(tokens, offset_s=offset_s)
    utterances.extend(grouper.flush())
    return utterances
