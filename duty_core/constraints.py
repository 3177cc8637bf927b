"""Hard eligibility checks: availability exclusions and per-period caps.

Both filters are shared by the greedy scheduler and manual-assignment
validation.
"""

from __future__ import annotations

from .calendar_utils import DateLike, format_date_key
from .models import MemberForAssignment, TrackingState
from .preferences import matches_day_rules


def is_member_available(member: MemberForAssignment, on_date: DateLike, start_time: str) -> bool:
    never = member.availability.never_available
    if not never:
        return True
    return not matches_day_rules(never, on_date, start_time)


def has_reached_limits(member: MemberForAssignment, tracking: TrackingState) -> bool:
    limits = member.limits
    if limits.max_shifts_per_week is not None and tracking.shifts_this_week >= limits.max_shifts_per_week:
        return True
    if limits.max_shifts_per_month is not None and tracking.shifts_this_month >= limits.max_shifts_per_month:
        return True
    return False


def is_eligible(
    member: MemberForAssignment,
    tracking: TrackingState,
    on_date: DateLike,
    start_time: str,
) -> bool:
    return is_member_available(member, on_date, start_time) and not has_reached_limits(member, tracking)


def validate_manual_assignment(
    member: MemberForAssignment,
    on_date: DateLike,
    start_time: str,
    tracking: TrackingState | None = None,
) -> str | None:
    """Check a hand-picked assignment against the same hard constraints.

    Returns a readable reason when the assignment is not allowed, ``None``
    otherwise. Limits are only checked when current counters are supplied.
    """
    if not is_member_available(member, on_date, start_time):
        return f"{member.label} is not available on {format_date_key(on_date)} at {start_time}"

    if tracking is not None:
        limits = member.limits
        if limits.max_shifts_per_week is not None and tracking.shifts_this_week >= limits.max_shifts_per_week:
            return f"{member.label} has reached their maximum shifts per week ({limits.max_shifts_per_week})"
        if limits.max_shifts_per_month is not None and tracking.shifts_this_month >= limits.max_shifts_per_month:
            return f"{member.label} has reached their maximum shifts per month ({limits.max_shifts_per_month})"

    return None
