"""Input layer for local assignment runs.

Public API:
    load_roster(path)   -- read a JSON/CSV roster -> list[MemberForAssignment]
    load_dates(path)    -- read a JSON/CSV date list -> list of YYYY-MM-DD keys
"""

from .reader import load_dates, load_roster, roster_from_rows

__all__ = [
    "load_dates",
    "load_roster",
    "roster_from_rows",
]
