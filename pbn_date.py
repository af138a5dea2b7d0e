from datetime import date
from typing import List
from pbn_errors import InvalidDateFormat

def convert_date(pbn_date: str) -> date:
    """Convert "2025.6.17" or "2025-06-17" to a calendar date (no time, no zone)."""
    parts: List[str] = pbn_date.strip().replace(".", "-").split("-")
    if len(parts) != 3:
        raise InvalidDateFormat(pbn_date, f"found {len(parts)} parts, expected 3")
    if not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidDateFormat(pbn_date, "year, month and day must be numeric")
    year, month, day = (int(p) for p in parts)
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateFormat(pbn_date, str(e)) from e

def format_date(d: date) -> str:
    return f"{d.year:04d}.{d.month:02d}.{d.day:02d}"
