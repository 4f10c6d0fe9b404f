from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from ..calendar.model import CalendarFlags
from ..common.rows import as_int, as_optional_text, as_text, pick
from ..core.enums import PersonMode


@dataclass(frozen=True)
class RawEvent:
    """Domain entity: one badge-clock row (clock-in/clock-out pair) as exported by the ERP."""

    person_id: int
    clock_in: str
    clock_out: Optional[str] = None
    shift_type: int = 0
    event_type: int = 0
    note: str = ""
    device_location: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> RawEvent:
        return cls(
            person_id=as_int(pick(row, "person_id", "osebid"), default=0),
            clock_in=as_text(pick(row, "clock_in", "timevhod", default="")),
            clock_out=as_optional_text(pick(row, "clock_out", "timeizhod")),
            shift_type=as_int(pick(row, "shift_type", "tipvhod"), default=0),
            event_type=as_int(pick(row, "event_type", "tipizhod"), default=0),
            note=as_text(pick(row, "note", "opomba", default="")),
            device_location=as_optional_text(pick(row, "device_location", "lokizhod")),
        )


@dataclass(frozen=True)
class IntervalFlags:
    late_arrival: bool = False
    early_leave: bool = False
    open_interval: bool = False
    duplicate: bool = False
    conflict: bool = False
    needs_review: bool = False

    @property
    def late_or_early_leave(self) -> bool:
        return self.late_arrival or self.early_leave


@dataclass(frozen=True)
class Interval:
    """Read-model: one normalized RawEvent.

    Only the dedup/conflict pass may flip flags afterwards, and it does so by
    producing a new value through :meth:`with_flags`.
    """

    event_key: str
    person_id: int
    work_date: Optional[str]
    calendar_flags: CalendarFlags
    clock_in_raw: str
    clock_in_normalized: str
    clock_out_raw: Optional[str]
    duration_raw_minutes: int
    duration_effective_minutes: int
    late_minutes_raw: int
    late_minutes_normalized: int
    early_leave_minutes_raw: int
    early_leave_minutes_normalized: int
    shift_type: int
    event_type: int
    is_split_shift: bool
    is_wfh: bool
    is_ignored: bool
    note: str
    device_location: str
    flags: IntervalFlags
    anomalies: tuple[str, ...] = ()
    group_code: str = "UNKNOWN"
    first_name: str = ""
    last_name: str = ""
    mode: PersonMode = PersonMode.FULL

    @property
    def signature(self) -> tuple:
        """Dedup signature; the note text is not part of it."""
        return (
            self.person_id,
            self.work_date or "",
            self.clock_in_raw or "",
            self.clock_out_raw or "",
            self.event_type,
        )

    def with_flags(self, **changes: bool) -> Interval:
        return replace(self, flags=replace(self.flags, **changes))
