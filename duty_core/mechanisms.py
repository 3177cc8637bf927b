"""Strategy dispatcher for duty assignment.

Routes to one of two assignment strategies:
  - legacy scoring:      greedy fairness scorer with hard constraints
  - ranked round robin:  external turn order distributed cyclically

The ranked path is only taken when algorithm, stable id and organization
id are all configured; any partial combination falls back to the legacy
scorer.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .allocator import assign_greedy
from .calendar_utils import DateLike, format_date_key
from .models import MemberForAssignment, members_from_dicts
from .preferences import DEFAULT_PREFERENCE_BONUS, coerce_preference_bonus
from .round_robin import distribute_round_robin
from .turn_order import OrderProvider, TurnOrderRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegacyScoring:
    preference_bonus: float = DEFAULT_PREFERENCE_BONUS
    sort_roster_by_id: bool = False


@dataclass(frozen=True)
class RankedRoundRobin:
    algorithm: str
    stable_id: str
    organization_id: str
    window: tuple[str, str] | None


AssignmentMode = LegacyScoring | RankedRoundRobin


def _config_value(config: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = config.get(key)
        if value is not None and value != "":
            return value
    return None


def resolve_window(
    dates: Sequence[DateLike],
    start_date: DateLike | None = None,
    end_date: DateLike | None = None,
) -> tuple[str, str] | None:
    """Explicit bounds win; otherwise the first and last requested dates."""
    if start_date is None and not dates:
        return None
    if end_date is None and not dates:
        return None
    start = format_date_key(start_date if start_date is not None else dates[0])
    end = format_date_key(end_date if end_date is not None else dates[-1])
    return start, end


def resolve_config(config: Mapping[str, Any] | AssignmentMode | None, dates: Sequence[DateLike] = ()) -> AssignmentMode:
    if isinstance(config, (LegacyScoring, RankedRoundRobin)):
        return config
    config = config or {}

    algorithm = _config_value(config, "algorithm")
    stable_id = _config_value(config, "stableId", "stable_id")
    organization_id = _config_value(config, "organizationId", "organization_id")

    if algorithm and stable_id and organization_id:
        window = resolve_window(
            dates,
            _config_value(config, "startDate", "start_date"),
            _config_value(config, "endDate", "end_date"),
        )
        return RankedRoundRobin(
            algorithm=str(algorithm),
            stable_id=str(stable_id),
            organization_id=str(organization_id),
            window=window,
        )

    bonus = coerce_preference_bonus(config.get("preferenceBonus", config.get("preference_bonus")))
    sort_by_id = config.get("sortRosterById", config.get("sort_roster_by_id"))
    if sort_by_id is None:
        sort_by_id = False
    elif not isinstance(sort_by_id, bool):
        raise TypeError(f"sort_roster_by_id must be a bool, got {type(sort_by_id).__name__}")
    return LegacyScoring(preference_bonus=bonus, sort_roster_by_id=sort_by_id)


class GreedyStrategy:
    def __init__(self, mode: LegacyScoring):
        self.mode = mode

    async def assign(
        self,
        dates: Sequence[DateLike],
        members: Sequence[MemberForAssignment],
        start_time: str,
        points_value: float,
    ) -> dict[str, str]:
        return assign_greedy(
            dates,
            members,
            start_time,
            points_value,
            preference_bonus=self.mode.preference_bonus,
            sort_roster_by_id=self.mode.sort_roster_by_id,
        )


class RoundRobinStrategy:
    def __init__(self, mode: RankedRoundRobin, provider: OrderProvider):
        self.mode = mode
        self.provider = provider

    async def assign(
        self,
        dates: Sequence[DateLike],
        members: Sequence[MemberForAssignment],
        start_time: str,
        points_value: float,
    ) -> dict[str, str]:
        if not dates or self.mode.window is None:
            return {}
        request = TurnOrderRequest(
            stable_id=self.mode.stable_id,
            organization_id=self.mode.organization_id,
            algorithm=self.mode.algorithm,
            member_ids=[m.member_id for m in members],
            selection_start_date=self.mode.window[0],
            selection_end_date=self.mode.window[1],
        )
        computed = await self.provider.compute_turn_order(request)
        order = computed.member_ids()
        if not order:
            logger.info("turn order for stable %s returned no member ids", self.mode.stable_id)
        return distribute_round_robin(order, dates)


def build_strategy(mode: AssignmentMode, order_provider: OrderProvider | None = None) -> GreedyStrategy | RoundRobinStrategy:
    if isinstance(mode, RankedRoundRobin):
        if order_provider is None:
            raise ValueError(f"algorithm {mode.algorithm!r} configured but no order provider supplied")
        return RoundRobinStrategy(mode, order_provider)
    return GreedyStrategy(mode)


async def assign_dates(
    dates: Sequence[DateLike],
    members: Sequence[MemberForAssignment | Mapping[str, Any]],
    start_time: str,
    points_value: float,
    config: Mapping[str, Any] | AssignmentMode | None = None,
    *,
    order_provider: OrderProvider | None = None,
) -> dict[str, str]:
    """Assign each date to at most one member and return ``{YYYY-MM-DD: member_id}``.

    Dates without an eligible member are absent from the result. Order
    provider errors propagate to the caller unchanged.
    """
    dates = list(dates)
    roster = members_from_dicts(members)
    mode = resolve_config(config, dates)
    strategy = build_strategy(mode, order_provider)
    logger.debug("assigning %d dates to %d members via %s", len(dates), len(roster), type(mode).__name__)
    return await strategy.assign(dates, roster, start_time, points_value)
