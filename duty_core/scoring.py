"""Fairness score for one candidate on one date. Lower score wins."""

from __future__ import annotations

from .calendar_utils import DateLike
from .models import MemberForAssignment, TrackingState
from .preferences import DEFAULT_PREFERENCE_BONUS, preference_bonus_for


def member_score(
    member: MemberForAssignment,
    tracking: TrackingState,
    on_date: DateLike,
    start_time: str,
    preference_bonus: float = DEFAULT_PREFERENCE_BONUS,
) -> float:
    score = float(member.historical_points) + float(tracking.session_points)
    score += preference_bonus_for(member, on_date, start_time, preference_bonus)
    return score
