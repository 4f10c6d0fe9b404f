from __future__ import annotations

import pytest

from epr_attendance.attendance.model import RawEvent
from epr_attendance.calendar.model import CalendarDay, build_calendar
from epr_attendance.core.enums import PersonMode
from epr_attendance.people.model import Person, build_people

# 2026-02-02 is a Monday
WEEK = ["2026-02-02", "2026-02-03", "2026-02-04", "2026-02-05", "2026-02-06", "2026-02-07", "2026-02-08"]


@pytest.fixture
def week_calendar() -> dict[str, CalendarDay]:
    """Mon-Fri workdays, weekend off."""
    return build_calendar(CalendarDay(date=iso, is_workday=i < 5) for i, iso in enumerate(WEEK))


@pytest.fixture
def monday_calendar() -> dict[str, CalendarDay]:
    return build_calendar([CalendarDay(date="2026-02-02", is_workday=True)])


@pytest.fixture
def people() -> dict[int, Person]:
    return build_people(
        [
            Person(id=1, first_name="Ana", last_name="Horvat", group_code="ADM"),
            Person(id=2, first_name="Ivo", last_name="Kovac", group_code="EXT", mode=PersonMode.SLIM),
        ]
    )


@pytest.fixture
def make_event():
    def _make(
        clock_in: str = "02/02/2026 07:30",
        clock_out: str | None = "02/02/2026 15:30",
        *,
        person_id: int = 1,
        shift_type: int = 0,
        event_type: int = 0,
        note: str = "",
        device_location: str | None = None,
    ) -> RawEvent:
        return RawEvent(
            person_id=person_id,
            clock_in=clock_in,
            clock_out=clock_out,
            shift_type=shift_type,
            event_type=event_type,
            note=note,
            device_location=device_location,
        )

    return _make
