"""Unit tests for the speaker grouper.

WHY: Grouping is the semantic core of the transcript — a wrong merge or
split puts words in the wrong speaker's mouth, and a wrong offset puts
them at the wrong time.

HOW: Tests cover each grouping rule (merge, split, sentinel, empty
tokens, start times), the ordering/coverage properties over varied
inputs, and the stateful grouper across segment boundaries.
"""

import pytest

from conftest import tokens

from scribe_transcriber.api.models import WordToken
from scribe_transcriber.core.grouper import SpeakerGrouper, group_by_speaker
from scribe_transcriber.core.ir import UNKNOWN_SPEAKER, Utterance


class TestGroupBySpeaker:
    """One-shot grouping of a complete token sequence."""

    def test_merges_same_speaker_and_splits_on_change(self):
        result = group_by_speaker(tokens(
            ("Hi ", 0, "A"),
            ("there", 1, "A"),
            ("Hello", 2, "B"),
        ))
        assert result == [
            Utterance(speaker="A", text="Hi there", start=0),
            Utterance(speaker="B", text="Hello", start=2),
        ]

    def test_missing_speaker_uses_sentinel_and_merges(self):
        result = group_by_speaker([
            WordToken(text="one ", start=0.0),
            WordToken(text="two ", start=0.5),
            WordToken(text="three", start=1.0),
        ])
        assert len(result) == 1
        assert result[0].speaker == UNKNOWN_SPEAKER
        assert result[0].text == "one two three"

    def test_sentinel_splits_from_real_speaker(self):
        result = group_by_speaker(tokens(
            ("a", 0, None),
            ("b", 1, "speaker_0"),
            ("c", 2, None),
        ))
        assert [u.speaker for u in result] == [UNKNOWN_SPEAKER, "speaker_0", UNKNOWN_SPEAKER]

    def test_empty_input_yields_nothing(self):
        assert group_by_speaker([]) == []

    def test_single_token(self):
        result = group_by_speaker(tokens(("Solo", 3.5, "A")))
        assert result == [Utterance(speaker="A", text="Solo", start=3.5)]

    def test_start_is_first_token_of_run(self):
        result = group_by_speaker(tokens(
            ("x", 0.2, "A"),
            ("y", 0.9, "B"),
            ("z", 1.7, "B"),
            ("w", 2.4, "A"),
        ))
        assert [u.start for u in result] == [0.2, 0.9, 2.4]

    def test_no_separator_is_inserted(self):
        result = group_by_speaker(tokens(("fan", 0, "A"), ("tastic", 1, "A")))
        assert result[0].text == "fantastic"

    def test_empty_tokens_never_produce_utterances(self):
        result = group_by_speaker(tokens(
            ("", 0, "B"),
            ("Hi", 1, "A"),
            ("", 2, "B"),
            (" again", 3, "A"),
        ))
        assert result == [Utterance(speaker="A", text="Hi again", start=1)]

    def test_offset_shifts_start_times(self):
        result = group_by_speaker(tokens(("a", 1.5, "A"), ("b", 2.0, "B")), offset_s=2700.0)
        assert [u.start for u in result] == [2701.5, 2702.0]

    def test_sample_response(self, sample_tokens):
        result = group_by_speaker(sample_tokens)
        assert result == [
            Utterance(speaker="speaker_0", text="Hi there. ", start=0.12),
            Utterance(speaker="speaker_1", text="(laughs) Hello back!", start=1.10),
        ]


@pytest.mark.parametrize("speakers", [
    "AAAA",
    "ABAB",
    "AABBBA",
    "A-B--A",   # "-" means no speaker id
    "------",
    "ABCCBA",
])
class TestGroupingProperties:
    """Ordering and coverage invariants over varied speaker patterns."""

    def _tokens(self, speakers):
        return [
            WordToken(
                text="w{} ".format(i),
                start=float(i),
                speaker_id=None if s == "-" else s,
            )
            for i, s in enumerate(speakers)
        ]

    def test_adjacent_utterances_differ_in_speaker(self, speakers):
        result = group_by_speaker(self._tokens(speakers))
        for prev, nxt in zip(result, result[1:]):
            assert prev.speaker != nxt.speaker

    def test_text_is_preserved_in_order(self, speakers):
        toks = self._tokens(speakers)
        result = group_by_speaker(toks)
        assert "".join(u.text for u in result) == "".join(t.text for t in toks)

    def test_starts_are_non_decreasing(self, speakers):
        result = group_by_speaker(self._tokens(speakers))
        starts = [u.start for u in result]
        assert starts == sorted(starts)


class TestSpeakerGrouperAcrossSegments:
    """The stateful grouper carries the open utterance between batches."""

    def test_same_speaker_continues_across_boundary(self):
        grouper = SpeakerGrouper()
        first = grouper.feed(tokens(("Hello ", 0, "A"), ("and ", 1, "A")), offset_s=0.0)
        second = grouper.feed(tokens(("welcome", 0.5, "A"), ("Thanks", 2, "B")), offset_s=2700.0)
        last = grouper.flush()

        assert first == []
        assert second == [Utterance(speaker="A", text="Hello and welcome", start=0)]
        assert last == [Utterance(speaker="B", text="Thanks", start=2702.0)]

    def test_speaker_change_at_boundary_closes_pending(self):
        grouper = SpeakerGrouper()
        grouper.feed(tokens(("Question?", 10, "A")))
        closed = grouper.feed(tokens(("Answer.", 0.3, "B")), offset_s=60.0)

        assert closed == [Utterance(speaker="A", text="Question?", start=10)]
        assert grouper.pending == Utterance(speaker="B", text="Answer.", start=60.3)

    def test_empty_segment_keeps_pending(self):
        grouper = SpeakerGrouper()
        grouper.feed(tokens(("Still talking", 5, "A")))
        assert grouper.feed([], offset_s=60.0) == []
        assert grouper.pending is not None

    def test_flush_clears_state(self):
        grouper = SpeakerGrouper()
        grouper.feed(tokens(("x", 0, "A")))
        assert len(grouper.flush()) == 1
        assert grouper.flush() == []
        assert grouper.pending is None

    def test_feed_plus_flush_matches_one_shot(self, sample_tokens):
        grouper = SpeakerGrouper()
        incremental = grouper.feed(sample_tokens[:5]) + grouper.feed(sample_tokens[5:]) + grouper.flush()
        assert incremental == group_by_speaker(sample_tokens)
