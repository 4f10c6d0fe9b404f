from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DATE_FORMAT_ISO, DATETIME_FORMAT_DMYHM

_DMY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_DMY_HM_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})\s+(\d{2}):(\d{2})(?::(\d{2}))?$")
_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT_ISO).date()


def parse_dmy_date(value: Optional[str]) -> Optional[date]:
    """Parse ``DD/MM/YYYY``; None when the text is not a real calendar date."""
    m = _DMY_RE.match(str(value or "").strip())
    if not m:
        return None
    dd, mm, yy = (int(x) for x in m.groups())
    try:
        return date(yy, mm, dd)
    except ValueError:
        return None


def parse_dmy_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse ``DD/MM/YYYY HH:MM[:SS]`` badge-clock timestamps."""
    m = _DMY_HM_RE.match(str(value or "").strip())
    if not m:
        return None
    dd, mm, yy, hh, mi = (int(x) for x in m.groups()[:5])
    ss = int(m.group(6)) if m.group(6) else 0
    try:
        return datetime(yy, mm, dd, hh, mi, ss)
    except ValueError:
        return None


def to_iso_date(value: date | datetime) -> str:
    return value.strftime(DATE_FORMAT_ISO)


def to_dmyhm(value: datetime) -> str:
    return value.strftime(DATETIME_FORMAT_DMYHM)


def to_iso_date_any(value: Optional[str]) -> Optional[str]:
    """Accept ISO or ``DD/MM/YYYY`` and return ISO, None if neither."""
    text = str(value or "").strip()
    if _ISO_RE.match(text):
        try:
            return to_iso_date(parse_iso_date(text))
        except ValueError:
            return None
    parsed = parse_dmy_date(text)
    return to_iso_date(parsed) if parsed else None


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, floored (negative when end < start)."""
    return int((end - start).total_seconds() // 60)


def at_time(day: date | datetime, t: time) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, t)
