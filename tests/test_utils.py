"""Tests for the pure helpers in scribe_transcriber.utils."""

import hashlib
import re
from datetime import datetime, timezone

import pytest

from scribe_transcriber.utils import (
    format_timestamp,
    is_youtube_url,
    run_timestamp,
    sanitize_filename,
)


class TestFormatTimestamp:
    """M:SS below one hour, H:MM:SS from one hour, hours never padded."""

    @pytest.mark.parametrize("seconds, expected", [
        (0, "0:00"),
        (5, "0:05"),
        (59.999, "0:59"),
        (60, "1:00"),
        (754, "12:34"),
        (3599, "59:59"),
        (3600, "1:00:00"),
        (3661.9, "1:01:01"),
        (36000 + 62, "10:01:02"),
    ])
    def test_format(self, seconds, expected):
        assert format_timestamp(seconds) == expected

    def test_negative_is_clamped_to_zero(self):
        assert format_timestamp(-5) == format_timestamp(0) == "0:00"

    def test_negative_fraction_is_clamped(self):
        assert format_timestamp(-0.4) == "0:00"

    @pytest.mark.parametrize("seconds", [0, 1.5, 61, 599, 3599.9, 3600, 7322, 86399])
    def test_shape(self, seconds):
        result = format_timestamp(seconds)
        if seconds >= 3600:
            assert re.fullmatch(r"[1-9]\d*:\d{2}:\d{2}", result)
        else:
            assert re.fullmatch(r"\d{1,2}:\d{2}", result)


class TestSanitizeFilename:

    def test_plain_name_is_unchanged(self):
        assert sanitize_filename("plain-name_1.mp3") == "plain-name_1.mp3"

    def test_special_characters_are_removed(self):
        assert sanitize_filename('What? "Really" / no: way!.mp3') == "What Really  no way.mp3"

    def test_surrounding_whitespace_is_trimmed(self):
        assert sanitize_filename("  spaced out.mp3  ") == "spaced out.mp3"

    def test_non_ascii_title_is_hashed(self):
        title = "日本語のタイトル.mp3"
        expected_hash = hashlib.md5(title.encode("utf-8")).hexdigest()[:8]
        assert sanitize_filename(title) == "video_{}.mp3".format(expected_hash)

    def test_non_ascii_is_deterministic(self):
        title = "Café révolution.mp3"
        first = sanitize_filename(title)
        assert first == sanitize_filename(title)
        assert re.fullmatch(r"video_[0-9a-f]{8}\.mp3", first)

    def test_different_titles_hash_differently(self):
        assert sanitize_filename("ÄÖÜ one.mp3") != sanitize_filename("ÄÖÜ two.mp3")


class TestIsYoutubeUrl:

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=abc123",
        "https://youtube.com/watch?v=abc-_12&t=30",
        "http://www.youtube.com/shorts/abc123",
        "https://youtube.com/shorts/abc123",
        "https://youtu.be/abc123",
    ])
    def test_recognized(self, url):
        assert is_youtube_url(url)

    @pytest.mark.parametrize("url", [
        "https://example.com/watch?v=abc123",
        "https://vimeo.com/12345",
        "recordings/meeting.mp3",
        "https://www.youtube.com/",
        "ftp://youtu.be/abc123",
    ])
    def test_rejected(self, url):
        assert not is_youtube_url(url)


class TestRunTimestamp:

    def test_fixed_time(self):
        now = datetime(2024, 11, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)
        assert run_timestamp(now) == "20241101_123045_123456"

    def test_is_filesystem_safe(self):
        assert re.fullmatch(r"\d{8}_\d{6}_\d{6}", run_timestamp())
