"""Run assembly: resolve the strategy, assign, summarize, package as an artifact."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from duty_core.allocator import chronological_dates, run_greedy
from duty_core.calendar_utils import format_date_key
from duty_core.mechanisms import LegacyScoring, RankedRoundRobin, assign_dates, resolve_config
from duty_core.models import MemberForAssignment, members_from_dicts
from duty_core.summary import summarize_assignments
from duty_core.turn_order import LocalTurnOrderProvider, OrderProvider

from .config import RuntimeConfig
from .order_client import HttpTurnOrderProvider

logger = logging.getLogger(__name__)

UTC = timezone.utc


def now_utc_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def select_order_provider(runtime: RuntimeConfig | None, members: Sequence[MemberForAssignment]) -> OrderProvider:
    """Remote ranking service when configured, else an in-memory provider over the roster."""
    if runtime is not None and runtime.order_provider is not None:
        return HttpTurnOrderProvider.from_config(runtime.order_provider)
    logger.info("no remote order provider configured, ranking members locally")
    return LocalTurnOrderProvider(member_names={m.member_id: m.label for m in members})


def _with_default_bonus(config: Mapping[str, Any] | None, runtime: RuntimeConfig | None) -> dict[str, Any]:
    merged = dict(config or {})
    if runtime is not None and merged.get("preferenceBonus") is None and merged.get("preference_bonus") is None:
        merged["preferenceBonus"] = runtime.preference_bonus
    return merged


async def plan_run(
    dates: Sequence[str],
    members: Sequence[MemberForAssignment | Mapping[str, Any]],
    start_time: str,
    points_value: float,
    config: Mapping[str, Any] | None = None,
    *,
    runtime: RuntimeConfig | None = None,
    order_provider: OrderProvider | None = None,
) -> dict[str, Any]:
    roster = members_from_dicts(members)
    dates = list(dates)
    mode = resolve_config(_with_default_bonus(config, runtime), dates)

    decisions: list[dict[str, Any]] = []
    if isinstance(mode, LegacyScoring):
        greedy = run_greedy(
            dates,
            roster,
            start_time,
            points_value,
            preference_bonus=mode.preference_bonus,
            sort_roster_by_id=mode.sort_roster_by_id,
        )
        assignments = greedy.assignments
        decisions = [asdict(d) for d in greedy.decisions]
        strategy = "legacy_scoring"
    else:
        provider = order_provider or select_order_provider(runtime, roster)
        assignments = await assign_dates(dates, roster, start_time, points_value, mode, order_provider=provider)
        strategy = "ranked_round_robin"

    date_keys = [format_date_key(d) for d in chronological_dates(dates)]
    run: dict[str, Any] = {
        "run_id": f"run-{uuid4().hex[:12]}",
        "generated_at": now_utc_iso(),
        "strategy": strategy,
        "mode": asdict(mode),
        "range": {"from": date_keys[0], "to": date_keys[-1]} if date_keys else None,
        "start_time": start_time,
        "points_value": points_value,
        "dates": date_keys,
        "member_ids": [m.member_id for m in roster],
        "members": [asdict(m) for m in roster],
        "assignments": assignments,
        "summary": summarize_assignments(assignments, points_value, members=roster, requested_dates=dates),
        "decisions": decisions,
    }
    if isinstance(mode, RankedRoundRobin):
        run["notes"] = ["Ranked round robin does not re-check availability or period limits."]
    return run
