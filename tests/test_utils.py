"""Tests for the text and formatting helpers in utils.py."""

import pytest

from utils import calculate_delay, calculate_orp_index, format_time_remaining, split_words


class TestSplitWords:

    def test_collapses_whitespace_runs(self):
        assert split_words("a  b\n\nc\t d ") == ["a", "b", "c", "d"]

    def test_keeps_punctuation_attached(self):
        assert split_words("Hello, world. Again!") == ["Hello,", "world.", "Again!"]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None, 42])
    def test_no_words(self, text):
        assert split_words(text) == []


class TestCalculateDelay:

    def test_seconds_per_word(self):
        assert calculate_delay(60) == pytest.approx(1.0)
        assert calculate_delay(240) == pytest.approx(0.25)

    def test_non_positive_rate_is_infinite(self):
        assert calculate_delay(0) == float('inf')


class TestOrpIndex:

    @pytest.mark.parametrize("word, expected", [
        ("", 0), ("a", 0), ("ab", 1), ("quick", 1), ("jumping", 2), ("something", 2),
        ("comprehension", 3), ("extraordinarily", 4),
    ])
    def test_orp_moves_right_with_length(self, word, expected):
        assert calculate_orp_index(word) == expected


class TestFormatTimeRemaining:

    @pytest.mark.parametrize("seconds, expected", [
        (0, "0s"), (0.2, "1s"), (24.0, "24s"), (59.0, "59s"), (59.5, "1m 00s"),
        (60, "1m 00s"), (107.5, "1m 48s"), (3599, "59m 59s"),
        (3600, "1h 00m"), (5025, "1h 23m"), (-3, "0s"),
    ])
    def test_labels(self, seconds, expected):
        assert format_time_remaining(seconds) == expected
