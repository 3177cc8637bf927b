"""Cyclic distribution of dates over an externally ranked turn order.

Availability and period caps are not re-checked here; the ranking
collaborator owns fairness on this path.
"""

from __future__ import annotations

from collections.abc import Sequence

from .calendar_utils import DateLike, format_date_key


def distribute_round_robin(order: Sequence[str], dates: Sequence[DateLike]) -> dict[str, str]:
    if not order or not dates:
        return {}
    n = len(order)
    return {format_date_key(d): order[i % n] for i, d in enumerate(dates)}
