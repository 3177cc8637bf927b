"""Greedy fairness scheduler.

Dates are processed chronologically. For each date the eligible members
(available at the start time and under their weekly/monthly caps) are
scored with ``historical + session + preference bonus`` and the lowest
score wins, first candidate on ties. There is no lookahead and no
backtracking: a date with no eligible member is left out of the result
and never forced onto someone.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from .calendar_utils import DateLike, format_date_key, is_same_month, is_same_week, parse_date, require_hhmm
from .constraints import has_reached_limits, is_member_available
from .models import MemberForAssignment, TrackingState
from .preferences import DEFAULT_PREFERENCE_BONUS, coerce_preference_bonus
from .scoring import member_score

logger = logging.getLogger(__name__)

SKIP_NO_MEMBERS = "no_members"
SKIP_ALL_BLOCKED = "all_candidates_blocked"


@dataclass(frozen=True)
class CandidateScore:
    member_id: str
    score: float


@dataclass
class DateDecision:
    date: str
    candidates: list[CandidateScore] = field(default_factory=list)
    blocked: dict[str, str] = field(default_factory=dict)
    selected: str | None = None
    skip_reason: str | None = None


@dataclass
class GreedyRun:
    assignments: dict[str, str]
    tracking: dict[str, TrackingState]
    decisions: list[DateDecision]

    @property
    def skipped_dates(self) -> list[str]:
        return [d.date for d in self.decisions if d.selected is None]


def initial_tracking(members: Iterable[MemberForAssignment]) -> dict[str, TrackingState]:
    return {m.member_id: TrackingState() for m in members}


def ordered_roster(members: Sequence[MemberForAssignment], *, sort_by_id: bool = False) -> list[MemberForAssignment]:
    if sort_by_id:
        return sorted(members, key=lambda m: m.member_id)
    return list(members)


def chronological_dates(dates: Iterable[DateLike]) -> list[date]:
    """Parse, de-duplicate and sort the requested dates."""
    seen: set[date] = set()
    out: list[date] = []
    for value in dates:
        d = parse_date(value)
        if d in seen:
            continue
        seen.add(d)
        out.append(d)
    out.sort()
    return out


def _reset_period_counters(tracking: dict[str, TrackingState], previous: date | None, current: date) -> None:
    if previous is None:
        return
    if not is_same_week(previous, current):
        for state in tracking.values():
            state.shifts_this_week = 0
    if not is_same_month(previous, current):
        for state in tracking.values():
            state.shifts_this_month = 0


def run_greedy(
    dates: Iterable[DateLike],
    members: Sequence[MemberForAssignment],
    start_time: str,
    points_value: float,
    *,
    preference_bonus: float = DEFAULT_PREFERENCE_BONUS,
    sort_roster_by_id: bool = False,
) -> GreedyRun:
    require_hhmm(start_time)
    bonus = coerce_preference_bonus(preference_bonus)
    roster = ordered_roster(members, sort_by_id=sort_roster_by_id)
    tracking = initial_tracking(roster)

    assignments: dict[str, str] = {}
    decisions: list[DateDecision] = []
    previous: date | None = None

    for current in chronological_dates(dates):
        key = format_date_key(current)
        _reset_period_counters(tracking, previous, current)
        previous = current

        decision = DateDecision(date=key)
        decisions.append(decision)

        best: MemberForAssignment | None = None
        best_score = float("inf")
        for member in roster:
            state = tracking[member.member_id]
            if not is_member_available(member, current, start_time):
                decision.blocked[member.member_id] = "unavailable"
                continue
            if has_reached_limits(member, state):
                decision.blocked[member.member_id] = "limit_reached"
                continue
            score = member_score(member, state, current, start_time, bonus)
            decision.candidates.append(CandidateScore(member.member_id, score))
            if score < best_score:
                best_score = score
                best = member

        if best is None:
            decision.skip_reason = SKIP_NO_MEMBERS if not roster else SKIP_ALL_BLOCKED
            logger.debug("no eligible member for %s (%s)", key, decision.skip_reason)
            continue

        assignments[key] = best.member_id
        decision.selected = best.member_id

        state = tracking[best.member_id]
        state.session_points += points_value
        state.shifts_this_week += 1
        state.shifts_this_month += 1
        state.last_assigned_date = current

    logger.debug(
        "greedy assignment filled %d of %d dates for %d members",
        len(assignments),
        len(decisions),
        len(roster),
    )
    return GreedyRun(assignments=assignments, tracking=tracking, decisions=decisions)


def assign_greedy(
    dates: Iterable[DateLike],
    members: Sequence[MemberForAssignment],
    start_time: str,
    points_value: float,
    *,
    preference_bonus: float = DEFAULT_PREFERENCE_BONUS,
    sort_roster_by_id: bool = False,
) -> dict[str, str]:
    """Return only the date -> member id map of :func:`run_greedy`."""
    run = run_greedy(
        dates,
        members,
        start_time,
        points_value,
        preference_bonus=preference_bonus,
        sort_roster_by_id=sort_roster_by_id,
    )
    return run.assignments


def explain_date(run: GreedyRun, date_key: str) -> DateDecision:
    for decision in run.decisions:
        if decision.date == date_key:
            return decision
    raise KeyError(f"date not part of this run: {date_key}")
