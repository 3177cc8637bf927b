"""Tests for roster CSV helpers."""

import pytest

from duty_core.io.schemas import parse_day_rules, pipe_split, to_float, to_limit


def test_pipe_split():
    assert pipe_split("a| b |") == ["a", "b"]
    assert pipe_split(None) == []
    assert pipe_split("  ") == []


def test_parse_day_rules_groups_by_day():
    rules = parse_day_rules("1@06:00-09:00|3@18:00-20:00|1@12:00-13:00")
    assert rules == [
        {"day_of_week": 1, "time_slots": [{"start": "06:00", "end": "09:00"}, {"start": "12:00", "end": "13:00"}]},
        {"day_of_week": 3, "time_slots": [{"start": "18:00", "end": "20:00"}]},
    ]


def test_parse_day_rules_empty():
    assert parse_day_rules("") == []


@pytest.mark.parametrize("bad", ["monday", "1@0600", "x@06:00-07:00"])
def test_parse_day_rules_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_day_rules(bad)


def test_coercion():
    assert to_float("2.5") == 2.5
    assert to_float("") == 0.0
    assert to_float("n/a", default=1.0) == 1.0
    assert to_limit("3.0") == 3
    assert to_limit(" 2 ") == 2
    assert to_limit("") is None
    assert to_limit(None) is None


@pytest.mark.parametrize("bad", ["lots", "one", "-1", "1.5"])
def test_to_limit_rejects_malformed_caps(bad):
    with pytest.raises(ValueError, match="invalid shift limit"):
        to_limit(bad)
