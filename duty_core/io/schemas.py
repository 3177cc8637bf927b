"""Column constants, pipe helpers, and type coercion for roster CSV input."""

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Input CSV column names
# ---------------------------------------------------------------------------

ROSTER_COLS = [
    "member_id",
    "name",
    "email",
    "historical_points",
    "max_shifts_per_week",
    "max_shifts_per_month",
    "min_shifts_per_week",
    "min_shifts_per_month",
    "never_available",
    "preferred_times",
]

# ---------------------------------------------------------------------------
# Pipe-separated field helpers
# ---------------------------------------------------------------------------

PIPE = "|"


def pipe_split(value: str | None) -> list[str]:
    """Split a pipe-separated string into a list. Empty/None -> empty list."""
    if not value or not str(value).strip():
        return []
    return [v.strip() for v in str(value).split(PIPE) if v.strip()]


def parse_day_rules(value: str | None) -> list[dict[str, Any]]:
    """Parse ``"1@06:00-09:00|3@18:00-20:00"`` into day-rule dicts.

    Slots for the same ISO weekday are grouped into one rule, in order of
    first appearance.
    """
    rules: dict[int, list[dict[str, str]]] = {}
    for item in pipe_split(value):
        if "@" not in item or "-" not in item:
            raise ValueError(f"invalid day rule {item!r}, expected D@HH:MM-HH:MM")
        day, span = item.split("@", 1)
        start, end = span.split("-", 1)
        rules.setdefault(int(day), []).append({"start": start.strip(), "end": end.strip()})
    return [{"day_of_week": day, "time_slots": slots} for day, slots in rules.items()]


# ---------------------------------------------------------------------------
# Type coercion helpers for reading CSV values
# ---------------------------------------------------------------------------


def to_float(value: str | None, default: float = 0.0) -> float:
    """Coerce a CSV string to float. Empty/None -> default."""
    if value is None or str(value).strip() == "":
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def to_limit(value: str | None) -> int | None:
    """Coerce a CSV shift limit to int. Empty/None -> None (= no cap).

    Unlike the soft coercers above, a non-empty value that is not a whole
    non-negative number raises ValueError so a cap is never dropped.
    """
    if value is None or str(value).strip() == "":
        return None
    text = str(value).strip()
    try:
        number = float(text)
    except ValueError as exc:
        raise ValueError(f"invalid shift limit {text!r}") from exc
    if number < 0 or not number.is_integer():
        raise ValueError(f"invalid shift limit {text!r}")
    return int(number)
