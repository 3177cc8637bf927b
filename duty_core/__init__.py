"""Fairness-based duty assignment engine."""

from .allocator import assign_greedy, explain_date, run_greedy
from .calendar_utils import day_of_week, format_date_key, is_same_month, is_same_week, is_time_in_range
from .constraints import has_reached_limits, is_member_available, validate_manual_assignment
from .mechanisms import LegacyScoring, RankedRoundRobin, assign_dates, resolve_config
from .models import MemberAvailability, MemberForAssignment, MemberLimits, TrackingState
from .round_robin import distribute_round_robin
from .scoring import member_score
from .summary import summarize_assignments
from .turn_order import ComputedTurnOrder, LocalTurnOrderProvider, OrderProvider, Turn, TurnOrderRequest

__all__ = [
    "ComputedTurnOrder",
    "LegacyScoring",
    "LocalTurnOrderProvider",
    "MemberAvailability",
    "MemberForAssignment",
    "MemberLimits",
    "OrderProvider",
    "RankedRoundRobin",
    "TrackingState",
    "Turn",
    "TurnOrderRequest",
    "assign_dates",
    "assign_greedy",
    "day_of_week",
    "distribute_round_robin",
    "explain_date",
    "format_date_key",
    "has_reached_limits",
    "is_member_available",
    "is_same_month",
    "is_same_week",
    "is_time_in_range",
    "member_score",
    "resolve_config",
    "run_greedy",
    "summarize_assignments",
    "validate_manual_assignment",
]
