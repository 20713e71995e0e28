"""Tests for formatting and validation helpers."""

from datetime import datetime, timezone

import pytest

from utils.formatting import (
    format_progress,
    format_rating,
    format_timestamp,
    join_focus_areas,
    parse_timestamp,
    split_focus_areas,
)
from utils.validation import redact_sensitive, validate_user_id


@pytest.mark.parametrize("value,expected", [
    (3, "3.0"),
    (3.5, "3.5"),
    (None, "N/A"),
])
def test_format_rating(value, expected):
    assert format_rating(value) == expected


def test_format_progress():
    assert format_progress(6) == "6%"
    assert format_progress(None) == "0%"


def test_focus_areas_round_trip():
    areas = ["Hand speed", "Lobs", "Positioning"]
    assert split_focus_areas(join_focus_areas(areas)) == areas


def test_split_empty_focus_areas():
    assert split_focus_areas("") == []
    assert split_focus_areas(None) == []


def test_parse_timestamp_with_z_suffix():
    parsed = parse_timestamp("2024-05-01T08:30:00Z")
    assert parsed == datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)


def test_format_timestamp_in_manila_time():
    assert format_timestamp("2024-05-01T08:30:00+00:00") == "01.05.2024 16:30"


def test_format_naive_timestamp_as_utc():
    assert format_timestamp("2024-05-01T08:30:00", tz_name="UTC") == "01.05.2024 08:30"


def test_format_missing_timestamp():
    assert format_timestamp(None) == "never"


class TestValidateUserId:

    def test_valid(self):
        assert validate_user_id("player-1") == (True, None)

    @pytest.mark.parametrize("value", [None, "", 42])
    def test_missing_or_wrong_type(self, value):
        is_valid, message = validate_user_id(value)
        assert not is_valid
        assert message == "userId is required"

    def test_too_long(self):
        is_valid, message = validate_user_id("x" * 65)
        assert not is_valid
        assert message == "userId is too long"


def test_redact_sensitive():
    details = {"Authorization": "Bearer abc", "apikey": "xyz", "userId": "player-1"}
    safe = redact_sensitive(details)
    assert safe["Authorization"] == "[REDACTED]"
    assert safe["apikey"] == "[REDACTED]"
    assert safe["userId"] == "player-1"
    assert details["Authorization"] == "Bearer abc"
