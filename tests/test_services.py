from datetime import date

import pytest

from repladder.services.metrics import reps_per_minute, summarize_sets
from repladder.services.record_parser import parse_int, parse_sets_payload, to_int, to_optional_int
from repladder.services.streak import next_streak


class TestStreak:
    today = date(2024, 3, 10)

    def test_first_workout(self):
        assert next_streak(None, self.today, 0) == 1

    def test_same_day(self):
        assert next_streak(date(2024, 3, 10), self.today, 4) == 4

    def test_consecutive_day(self):
        assert next_streak(date(2024, 3, 9), self.today, 4) == 5

    def test_gap_resets(self):
        assert next_streak(date(2024, 3, 7), self.today, 4) == 1

    def test_across_month_boundary(self):
        assert next_streak(date(2024, 2, 29), date(2024, 3, 1), 2) == 3


def test_reps_per_minute():
    assert reps_per_minute(40, 120) == 20
    assert reps_per_minute(40, 0) == 0.0


def test_summarize_sets():
    summary = summarize_sets(
        [
            {"reps": 20, "duration_seconds": 60, "rest_after_seconds": 30},
            {"reps": 10, "duration_seconds": 30, "rest_after_seconds": 0},
        ]
    )
    assert summary == {
        "total_reps": 30,
        "active_time_seconds": 90,
        "rest_time_seconds": 30,
        "reps_per_minute": 20.0,
    }


@pytest.mark.parametrize(
    "value, expected",
    [("12", 12), (12.7, 12), (" 7 ", 7), ("3,5", 3), (None, 0), ("", 0), ("abc", 0), (-4, 0), (True, 0)],
)
def test_to_int(value, expected):
    assert to_int(value) == expected


def test_to_optional_int():
    assert to_optional_int(None) is None
    assert to_optional_int("8") == 8
    assert to_optional_int("-3") is None


def test_parse_sets_payload_drops_empty_sets_and_renumbers():
    parsed = parse_sets_payload(
        [
            {"reps": 10, "duration_seconds": 30, "rest_after_seconds": 60, "set_number": 4},
            {"reps": 0, "duration_seconds": 5},
            "garbage",
            {"reps": "8", "duration_seconds": "25"},
        ]
    )
    assert parsed == [
        {"set_number": 1, "reps": 10, "duration_seconds": 30, "rest_after_seconds": 60},
        {"set_number": 2, "reps": 8, "duration_seconds": 25, "rest_after_seconds": 0},
    ]


def test_parse_sets_payload_rejects_non_list():
    assert parse_sets_payload({"reps": 5}) == []
    assert parse_sets_payload(None) == []


def test_parse_int_is_strict():
    assert parse_int("12") == 12
    assert parse_int(-5) == -5
    for bad in ("lots", "inf", "nan", [10], {"n": 1}, None, True):
        with pytest.raises(ValueError):
            parse_int(bad)


def test_to_int_falls_back_on_infinite_values():
    assert to_int("inf", default=3) == 3
