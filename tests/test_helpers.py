"""Tests for subenum.utils.helpers."""

from __future__ import annotations

import pytest

from subenum.utils.helpers import format_duration, parse_duration


# --- format_duration ---

@pytest.mark.parametrize("seconds, expected", [
    (0, "0s"),
    (-3, "0s"),
    (0.0000005, "500ns"),
    (0.000001, "1µs"),
    (0.0000015, "1.5µs"),
    (0.0015, "1.5ms"),
    (0.25, "250ms"),
    (1, "1s"),
    (1.5, "1.5s"),
    (59.125, "59.125s"),
    (120, "2m0s"),
    (90.5, "1m30.5s"),
    (3600, "1h0m0s"),
    (3603.25, "1h0m3.25s"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


# --- parse_duration ---

@pytest.mark.parametrize("text, expected", [
    ("0s", 0.0),
    ("0", 0.0),
    ("500ns", 0.0000005),
    ("1.5µs", 0.0000015),
    ("2us", 0.000002),
    ("1.5ms", 0.0015),
    ("1m30.5s", 90.5),
    ("1h0m3.25s", 3603.25),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == pytest.approx(expected)


@pytest.mark.parametrize("seconds", [0.000123, 0.042, 2.75, 754.5, 7322.125])
def test_parse_inverts_format(seconds):
    assert parse_duration(format_duration(seconds)) == pytest.approx(seconds)


@pytest.mark.parametrize("text", ["", "abc", "5", "1.5", "1x", "s1", "1s junk"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)
