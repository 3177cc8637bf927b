"""Assignment summary -- distribution and fairness metrics for a date map.

All functions are pure dict-in / dict-out.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .calendar_utils import DateLike, format_date_key, parse_date
from .models import MemberForAssignment


def gini(values: list[float]) -> float:
    """Gini coefficient for a list of non-negative values."""
    if not values or all(v == 0 for v in values):
        return 0.0
    sorted_vals = sorted(values)
    n = len(sorted_vals)
    cumulative = sum((i + 1) * v for i, v in enumerate(sorted_vals))
    total = sum(sorted_vals)
    if total == 0:
        return 0.0
    return (2 * cumulative) / (n * total) - (n + 1) / n


def _below_minimums(
    assignments: Mapping[str, str],
    members: Sequence[MemberForAssignment],
) -> list[dict[str, Any]]:
    """Members whose assigned count falls below their informational floor in some period."""
    weekly: Counter[tuple[str, tuple[int, int]]] = Counter()
    monthly: Counter[tuple[str, tuple[int, int]]] = Counter()
    weeks: set[tuple[int, int]] = set()
    months: set[tuple[int, int]] = set()
    for key, member_id in assignments.items():
        d = parse_date(key)
        iso_year, iso_week, _ = d.isocalendar()
        weeks.add((iso_year, iso_week))
        months.add((d.year, d.month))
        weekly[(member_id, (iso_year, iso_week))] += 1
        monthly[(member_id, (d.year, d.month))] += 1

    rows: list[dict[str, Any]] = []
    for member in members:
        floor_week = member.limits.min_shifts_per_week
        floor_month = member.limits.min_shifts_per_month
        if floor_week is not None:
            for wk in sorted(weeks):
                count = weekly.get((member.member_id, wk), 0)
                if count < floor_week:
                    rows.append({
                        "member_id": member.member_id,
                        "period": f"{wk[0]}-W{wk[1]:02d}",
                        "assigned": count,
                        "minimum": floor_week,
                    })
        if floor_month is not None:
            for mo in sorted(months):
                count = monthly.get((member.member_id, mo), 0)
                if count < floor_month:
                    rows.append({
                        "member_id": member.member_id,
                        "period": f"{mo[0]}-{mo[1]:02d}",
                        "assigned": count,
                        "minimum": floor_month,
                    })
    return rows


def summarize_assignments(
    assignments: Mapping[str, str],
    points_value: float,
    *,
    members: Sequence[MemberForAssignment] | None = None,
    requested_dates: Iterable[DateLike] | None = None,
) -> dict[str, Any]:
    """Totals, per-member distribution and gaps for one assignment map.

    When the roster is given, members with zero assignments are listed too
    and the Gini coefficient covers the whole roster.
    """
    distribution: dict[str, dict[str, float]] = {}
    for member in members or ():
        distribution.setdefault(member.member_id, {"shifts": 0, "points": 0.0})
    for member_id in assignments.values():
        item = distribution.setdefault(member_id, {"shifts": 0, "points": 0.0})
        item["shifts"] += 1
        item["points"] += float(points_value)

    summary: dict[str, Any] = {
        "total_assigned": len(assignments),
        "total_points": round(float(points_value) * len(assignments), 2),
        "member_distribution": {
            mid: {"shifts": int(v["shifts"]), "points": round(v["points"], 2)}
            for mid, v in sorted(distribution.items(), key=lambda kv: (-kv[1]["shifts"], kv[0]))
        },
        "gini": round(gini([float(v["shifts"]) for v in distribution.values()]), 4),
    }

    if requested_dates is not None:
        requested = sorted({format_date_key(d) for d in requested_dates})
        unassigned = [d for d in requested if d not in assignments]
        summary["requested_dates"] = len(requested)
        summary["unassigned_dates"] = unassigned
        summary["fill_rate"] = round((len(requested) - len(unassigned)) / len(requested) * 100, 1) if requested else 0.0

    if members:
        summary["below_minimum"] = _below_minimums(assignments, members)

    return summary
