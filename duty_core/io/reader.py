"""Read member rosters and date lists from JSON or CSV files."""

from __future__ import annotations

import csv
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from duty_core.calendar_utils import format_date_key
from duty_core.models import MemberForAssignment

from .schemas import parse_day_rules, to_float, to_limit


def load_roster(path: Path | str) -> list[MemberForAssignment]:
    """Load a roster file into members, keeping file order.

    ``.csv`` files use ROSTER_COLS; anything else is parsed as JSON, either
    a list of member dicts or an object with a ``members`` list.
    Raises FileNotFoundError if the file is missing and ValueError, naming
    the record index, for a record without a member id or with a malformed
    limit or day rule.
    """
    p = Path(path)
    if p.suffix.lower() == ".csv":
        return roster_from_rows(_read_csv(p), row_adapter=_roster_row_from_csv)
    payload = _read_json(p)
    rows = payload.get("members", []) if isinstance(payload, dict) else payload
    return roster_from_rows(rows)


def roster_from_rows(
    rows: list[dict[str, Any]],
    row_adapter: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
) -> list[MemberForAssignment]:
    members = []
    for index, row in enumerate(rows):
        try:
            if row_adapter is not None:
                row = row_adapter(row)
            members.append(MemberForAssignment.from_dict(row))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"invalid roster record #{index}: {exc}") from exc
    return members


def load_dates(path: Path | str) -> list[str]:
    """Load a date list (CSV ``date`` column, JSON list, or ``{"dates": [...]}``)."""
    p = Path(path)
    if p.suffix.lower() == ".csv":
        values = [row["date"] for row in _read_csv(p) if row.get("date")]
    else:
        payload = _read_json(p)
        values = payload.get("dates", []) if isinstance(payload, dict) else payload
    return [format_date_key(v) for v in values]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _roster_row_from_csv(row: dict[str, str]) -> dict[str, Any]:
    return {
        "member_id": (row.get("member_id") or "").strip(),
        "display_name": row.get("name") or "",
        "email": row.get("email") or "",
        "historical_points": to_float(row.get("historical_points")),
        "limits": {
            "max_shifts_per_week": to_limit(row.get("max_shifts_per_week")),
            "max_shifts_per_month": to_limit(row.get("max_shifts_per_month")),
            "min_shifts_per_week": to_limit(row.get("min_shifts_per_week")),
            "min_shifts_per_month": to_limit(row.get("min_shifts_per_month")),
        },
        "availability": {
            "never_available": parse_day_rules(row.get("never_available")),
            "preferred_times": parse_day_rules(row.get("preferred_times")),
        },
    }


def _read_json(path: Path) -> Any:
    """Read and parse a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _read_csv(path: Path) -> list[dict[str, str]]:
    """Read a CSV file into a list of dicts via csv.DictReader."""
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))
