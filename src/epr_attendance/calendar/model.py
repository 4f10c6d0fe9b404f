from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import parse_iso_date, to_iso_date_any
from ..common.rows import as_flag, as_text, pick
from ..core.constants import COLLECTIVE_LEAVE_TEXT
from ..core.enums import DayType
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def is_collective_leave_text(text: Optional[str], marker: str = COLLECTIVE_LEAVE_TEXT) -> bool:
    return " ".join(str(text or "").split()).lower() == marker.strip().lower()


@dataclass(frozen=True)
class CalendarFlags:
    is_workday: bool = False
    is_holiday: bool = False
    is_collective_leave: bool = False


@dataclass(frozen=True)
class CalendarDay:
    """Domain entity: one resolved day of the work calendar."""

    date: str
    is_workday: bool
    is_holiday: bool = False
    is_collective_leave: bool = False
    note: str = ""

    @property
    def weekday(self) -> int:
        """ISO weekday, 1=Mon .. 7=Sun."""
        return parse_iso_date(self.date).isoweekday()

    @property
    def is_weekday(self) -> bool:
        return self.weekday <= 5

    @property
    def is_billable_workday(self) -> bool:
        return self.is_workday and not self.is_holiday and not self.is_collective_leave

    @property
    def day_type(self) -> DayType:
        if self.is_holiday:
            return DayType.HOLIDAY
        if self.is_collective_leave:
            return DayType.COLLECTIVE_LEAVE
        if self.is_workday:
            return DayType.WORKDAY
        return DayType.NON_WORKDAY

    @property
    def flags(self) -> CalendarFlags:
        return CalendarFlags(
            is_workday=self.is_workday,
            is_holiday=self.is_holiday,
            is_collective_leave=self.is_collective_leave,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any], *, collective_leave_text: str = COLLECTIVE_LEAVE_TEXT) -> CalendarDay:
        iso = to_iso_date_any(as_text(pick(row, "date", "datum")))
        if not iso:
            raise ValidationError(f"Calendar date is not valid: {pick(row, 'date', 'datum')!r}")

        note = as_text(pick(row, "note", "tekst", default=""))
        if "is_collective_leave" in row:
            collective = as_flag(row["is_collective_leave"])
        else:
            collective = is_collective_leave_text(note, collective_leave_text)

        return cls(
            date=iso,
            is_workday=as_flag(pick(row, "is_workday", "dandelovni")),
            is_holiday=as_flag(pick(row, "is_holiday", "praznik")),
            is_collective_leave=collective,
            note=note,
        )


@dataclass(frozen=True)
class Period:
    date_from: str
    date_to: str

    @property
    def label(self) -> str:
        """``YYYY-MM`` when the period starts on the 1st within one month."""
        if self.date_from[:7] == self.date_to[:7] and self.date_from.endswith("-01"):
            return self.date_from[:7]
        return f"{self.date_from}__{self.date_to}"

    @property
    def is_full_month(self) -> bool:
        try:
            start = parse_iso_date(self.date_from)
            end = parse_iso_date(self.date_to)
        except ValueError:
            return False
        if (start.year, start.month) != (end.year, end.month) or start.day != 1:
            return False
        next_month = start.replace(year=start.year + 1, month=1) if start.month == 12 else start.replace(month=start.month + 1)
        return (next_month - end).days == 1

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> Period:
        date_from = to_iso_date_any(as_text(pick(value, "date_from", "from")))
        date_to = to_iso_date_any(as_text(pick(value, "date_to", "to")))
        if not date_from or not date_to:
            raise ValidationError("Period requires date_from and date_to (YYYY-MM-DD)")
        if date_to < date_from:
            raise ValidationError("Period date_to precedes date_from")
        return cls(date_from=date_from, date_to=date_to)


def build_calendar(
    days: Iterable[CalendarDay | Mapping[str, Any]],
    *,
    collective_leave_text: str = COLLECTIVE_LEAVE_TEXT,
) -> dict[str, CalendarDay]:
    """ISO date -> CalendarDay. Rows with an unusable date are skipped (already rejected by validation)."""
    out: dict[str, CalendarDay] = {}
    for item in days:
        if isinstance(item, CalendarDay):
            day = item
        else:
            try:
                day = CalendarDay.from_row(item, collective_leave_text=collective_leave_text)
            except ValidationError as exc:
                logger.debug("Skipping calendar row: %s", exc)
                continue
        out[day.date] = day
    return dict(sorted(out.items()))
