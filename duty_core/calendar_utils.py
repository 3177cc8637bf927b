"""Shared calendar and time helpers used by availability, scoring and the scheduler.

One convention throughout: ISO day of week (Monday=1 .. Sunday=7), ISO
week numbering for week boundaries, and half-open ``[start, end)`` time
slots where ``end < start`` wraps past midnight. A slot with equal bounds
is empty: it never matches, and ``TimeSlot.from_dict`` rejects it.
"""

from __future__ import annotations

from datetime import date, datetime

DateLike = date | datetime | str


def parse_date(value: DateLike) -> date:
    """Coerce a date, datetime or ``YYYY-MM-DD`` string into a civil date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValueError("empty date value")
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"invalid date: {value!r}") from exc


def format_date_key(value: DateLike) -> str:
    return parse_date(value).isoformat()


def day_of_week(value: DateLike) -> int:
    return parse_date(value).isoweekday()


def is_same_week(a: DateLike, b: DateLike) -> bool:
    """True when both dates share ISO year and ISO week number."""
    ya, wa, _ = parse_date(a).isocalendar()
    yb, wb, _ = parse_date(b).isocalendar()
    return (ya, wa) == (yb, wb)


def is_same_month(a: DateLike, b: DateLike) -> bool:
    da = parse_date(a)
    db = parse_date(b)
    return (da.year, da.month) == (db.year, db.month)


def parse_hhmm_to_minutes(value: str | None) -> int | None:
    """Parse HH:MM into minutes after midnight."""
    if not value or ":" not in str(value):
        return None
    try:
        hh, mm = str(value).split(":", 1)
        h = int(hh)
        m = int(mm)
    except (TypeError, ValueError):
        return None
    if h < 0 or h > 23 or m < 0 or m > 59:
        return None
    return h * 60 + m


def require_hhmm(value: str) -> str:
    if parse_hhmm_to_minutes(value) is None:
        raise ValueError(f"invalid HH:MM time: {value!r}")
    return value


def is_time_in_range(time_value: str, start: str, end: str) -> bool:
    """Return True if ``time_value`` falls in ``[start, end)`` (supports overnight slots)."""
    t = parse_hhmm_to_minutes(time_value)
    s = parse_hhmm_to_minutes(start)
    e = parse_hhmm_to_minutes(end)
    if None in (t, s, e):
        return False
    if e == s:
        return False
    if e > s:
        return s <= t < e
    # Overnight slot, e.g. 22:00-06:00.
    return t >= s or t < e
