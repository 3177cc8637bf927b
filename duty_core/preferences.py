"""Time-of-day preference matching used as a scoring bonus."""

from __future__ import annotations

from collections.abc import Iterable

from .calendar_utils import DateLike, day_of_week, is_time_in_range
from .models import DayRule, MemberForAssignment

DEFAULT_PREFERENCE_BONUS = -2.0


def coerce_preference_bonus(value: object) -> float:
    """Validate a configured bonus; ``None`` selects the default."""
    if value is None:
        return DEFAULT_PREFERENCE_BONUS
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"preference_bonus must be a number, got {type(value).__name__}")
    return float(value)


def matches_day_rules(rules: Iterable[DayRule], on_date: DateLike, start_time: str) -> bool:
    """True if any rule for the date's ISO weekday has a slot containing ``start_time``."""
    weekday = day_of_week(on_date)
    for rule in rules:
        if rule.day_of_week != weekday:
            continue
        for slot in rule.time_slots:
            if is_time_in_range(start_time, slot.start, slot.end):
                return True
    return False


def preference_bonus_for(
    member: MemberForAssignment,
    on_date: DateLike,
    start_time: str,
    bonus_amount: float = DEFAULT_PREFERENCE_BONUS,
) -> float:
    """Return ``bonus_amount`` when the slot is one of the member's preferred times, else 0.

    The bonus is negative by convention: a lower score means higher priority.
    """
    preferred = member.availability.preferred_times
    if not preferred:
        return 0.0
    if matches_day_rules(preferred, on_date, start_time):
        return float(bonus_amount)
    return 0.0
