"""Input records and per-run tracking state for duty assignment."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .calendar_utils import require_hhmm


def _pick(row: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return default


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> TimeSlot:
        start = require_hhmm(str(row["start"]))
        end = require_hhmm(str(row["end"]))
        if start == end:
            raise ValueError(f"empty time slot {start}-{end}")
        return cls(start=start, end=end)


@dataclass(frozen=True)
class DayRule:
    """Time slots on one ISO day of week (Monday=1 .. Sunday=7)."""

    day_of_week: int
    time_slots: tuple[TimeSlot, ...] = ()

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> DayRule:
        dow = int(_pick(row, "day_of_week", "dayOfWeek"))
        if dow < 1 or dow > 7:
            raise ValueError(f"day_of_week must be 1..7 (ISO), got {dow}")
        slots = _pick(row, "time_slots", "timeSlots", default=[])
        return cls(day_of_week=dow, time_slots=tuple(TimeSlot.from_dict(s) for s in slots))


@dataclass(frozen=True)
class MemberAvailability:
    never_available: tuple[DayRule, ...] = ()
    preferred_times: tuple[DayRule, ...] = ()

    @classmethod
    def from_dict(cls, row: Mapping[str, Any] | None) -> MemberAvailability:
        if not row:
            return cls()
        never = _pick(row, "never_available", "neverAvailable", default=[])
        preferred = _pick(row, "preferred_times", "preferredTimes", default=[])
        return cls(
            never_available=tuple(DayRule.from_dict(r) for r in never),
            preferred_times=tuple(DayRule.from_dict(r) for r in preferred),
        )


@dataclass(frozen=True)
class MemberLimits:
    """Per-period caps. ``None`` means unlimited; minimums are informational."""

    max_shifts_per_week: int | None = None
    max_shifts_per_month: int | None = None
    min_shifts_per_week: int | None = None
    min_shifts_per_month: int | None = None

    @classmethod
    def from_dict(cls, row: Mapping[str, Any] | None) -> MemberLimits:
        if not row:
            return cls()
        return cls(
            max_shifts_per_week=_optional_int(_pick(row, "max_shifts_per_week", "maxShiftsPerWeek")),
            max_shifts_per_month=_optional_int(_pick(row, "max_shifts_per_month", "maxShiftsPerMonth")),
            min_shifts_per_week=_optional_int(_pick(row, "min_shifts_per_week", "minShiftsPerWeek")),
            min_shifts_per_month=_optional_int(_pick(row, "min_shifts_per_month", "minShiftsPerMonth")),
        )


@dataclass(frozen=True)
class MemberForAssignment:
    member_id: str
    historical_points: float = 0.0
    availability: MemberAvailability = field(default_factory=MemberAvailability)
    limits: MemberLimits = field(default_factory=MemberLimits)
    display_name: str = ""
    email: str = ""

    @property
    def label(self) -> str:
        return self.display_name or self.member_id

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> MemberForAssignment:
        member_id = _pick(row, "member_id", "userId", "id")
        if member_id is None or str(member_id).strip() == "":
            raise ValueError("member record has no member_id")
        return cls(
            member_id=str(member_id),
            historical_points=float(_pick(row, "historical_points", "historicalPoints", default=0) or 0),
            availability=MemberAvailability.from_dict(row.get("availability")),
            limits=MemberLimits.from_dict(row.get("limits")),
            display_name=str(_pick(row, "display_name", "displayName", "name", default="")),
            email=str(row.get("email") or ""),
        )


@dataclass
class TrackingState:
    session_points: float = 0.0
    shifts_this_week: int = 0
    shifts_this_month: int = 0
    last_assigned_date: date | None = None


def members_from_dicts(rows: Iterable[Mapping[str, Any] | MemberForAssignment]) -> list[MemberForAssignment]:
    return [row if isinstance(row, MemberForAssignment) else MemberForAssignment.from_dict(row) for row in rows]
