from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable, Mapping, Optional

from ..attendance.model import Interval
from ..calendar.model import CalendarDay
from ..common.datetime_utils import at_time, minutes_between, parse_dmy_datetime
from ..core.enums import AttendanceOrigin, AttendanceReason, DayType, EventType, PersonMode
from ..core.exceptions import InvariantViolation
from ..core.policy import DEFAULT_POLICY, AttendancePolicy
from ..people.model import Person
from .model import DailyRecord

logger = logging.getLogger(__name__)

# Excused absences: flat paid bucket, no presence, no discipline.
_NON_WORK_PAID = {
    EventType.SICK: ("paid_sick_70_minutes", AttendanceReason.SICK_LEAVE),
    EventType.SICK_HZZO: ("paid_sick_hzzo_100_minutes", AttendanceReason.SICK_LEAVE_HZZO_100),
    EventType.MATERNITY: ("paid_maternity_comp_100_minutes", AttendanceReason.MATERNITY_COMP_100),
}

_ON_SITE = "on_site"
_WFH = "wfh"


class DailyAggregator:
    """Fold intervals (plus calendar skeleton days) into one DailyRecord per (person, date).

    Phases run in a fixed order: seed skeleton, fold intervals, seed missing
    days, finalize, filter. All maps are local to one :meth:`aggregate` call.
    """

    def __init__(
        self,
        calendar: Mapping[str, CalendarDay],
        people: Mapping[int, Person],
        *,
        policy: AttendancePolicy = DEFAULT_POLICY,
    ):
        self._calendar = calendar
        self._people = people
        self._policy = policy

    def aggregate(self, intervals: Iterable[Interval]) -> list[DailyRecord]:
        intervals = list(intervals)
        records: dict[tuple[int, str], DailyRecord] = {}
        watermarks: dict[tuple[int, str, str], datetime] = {}

        self._seed_calendar_skeleton(records)

        for rec in intervals:
            if rec.work_date is None:
                logger.debug("Interval %s has no work date; kept for audit only", rec.event_key)
                continue
            record = records.get((rec.person_id, rec.work_date))
            if record is None:
                record = self._new_record(rec.person_id, rec.work_date, AttendanceOrigin.AUTO)
                records[record.key] = record
            self._fold(record, rec, watermarks)

        self._seed_missing_days(records, self._person_universe(intervals))

        out: list[DailyRecord] = []
        for key in sorted(records):
            record = records[key]
            self._finalize(record)
            _assert_finite(record)
            if self._keep(record):
                out.append(record)
        return out

    # -- phase 1 / 3: skeleton rows -------------------------------------------

    def _new_record(self, person_id: int, work_date: str, origin: AttendanceOrigin) -> DailyRecord:
        day = self._calendar.get(work_date)
        return DailyRecord(
            person_id=person_id,
            work_date=work_date,
            is_workday=day.is_workday if day else False,
            is_holiday=day.is_holiday if day else False,
            is_collective_leave=day.is_collective_leave if day else False,
            attendance_origin=origin,
        )

    def _is_slim(self, person_id: int) -> bool:
        person = self._people.get(person_id)
        return person is not None and person.is_slim

    def _seed_calendar_skeleton(self, records: dict[tuple[int, str], DailyRecord]) -> None:
        full_ids = [pid for pid in self._people if not self._is_slim(pid)]
        for iso, day in self._calendar.items():
            if not (day.is_holiday or day.is_collective_leave):
                continue
            for pid in full_ids:
                if (pid, iso) not in records:
                    records[(pid, iso)] = self._new_record(pid, iso, AttendanceOrigin.CALENDAR_AUTO)

    def _person_universe(self, intervals: list[Interval]) -> list[int]:
        # people dataset is authoritative; fall back to ids seen in events
        if self._people:
            return list(self._people)
        return sorted({rec.person_id for rec in intervals})

    def _seed_missing_days(self, records: dict[tuple[int, str], DailyRecord], person_ids: list[int]) -> None:
        for iso, day in self._calendar.items():
            if not day.is_billable_workday:
                continue
            for pid in person_ids:
                if self._is_slim(pid):
                    continue
                if (pid, iso) not in records:
                    records[(pid, iso)] = self._new_record(pid, iso, AttendanceOrigin.AUTO)

    # -- phase 2: fold --------------------------------------------------------

    def _fold(self, record: DailyRecord, rec: Interval, watermarks: dict) -> None:
        policy = self._policy
        record.interval_count += 1

        if not rec.is_ignored and (rec.flags.needs_review or rec.flags.duplicate or rec.flags.conflict):
            record.needs_review = True

        # duplicates and misscans stay visible for audit only
        if rec.flags.duplicate or rec.is_ignored:
            return

        event_type = EventType.parse(rec.event_type)
        paid = _NON_WORK_PAID.get(event_type)
        if paid:
            bucket, reason = paid
            raw = rec.duration_raw_minutes
            minutes = min(policy.minutes_per_workday, raw) if raw > 0 else policy.minutes_per_workday
            setattr(record, bucket, getattr(record, bucket) + minutes)
            record.is_paid_non_work_attendance = True
            if record.attendance_origin is AttendanceOrigin.AUTO:
                record.attendance_origin = AttendanceOrigin.MANUAL_STANDARDIZED
            record.attendance_reason = reason
            return

        holiday_work = event_type is EventType.HOLIDAY_WORK
        if holiday_work:
            record.work_on_holiday_150_minutes += max(0, rec.duration_raw_minutes)
            record.is_paid_non_work_attendance = True
            record.attendance_reason = AttendanceReason.WORK_ON_HOLIDAY_150

        clock_in = parse_dmy_datetime(rec.clock_in_raw)
        clock_out = parse_dmy_datetime(rec.clock_out_raw) if rec.clock_out_raw else None
        if clock_in is not None and clock_out is not None and clock_out >= clock_in:
            if rec.is_wfh and not holiday_work:
                self._add_wfh(record, clock_in, clock_out, watermarks)
            else:
                self._add_on_site(record, rec, clock_in, clock_out, holiday_work, watermarks)

        record.total_presence_minutes_raw += rec.duration_raw_minutes

        disciplined = not rec.is_wfh and not rec.is_split_shift and not holiday_work
        if not disciplined:
            return

        if rec.flags.late_or_early_leave:
            record.has_late_or_early_leave = True
        record.total_late_minutes_raw += rec.late_minutes_raw
        record.total_late_minutes_normalized += rec.late_minutes_normalized
        record.total_early_leave_minutes_raw += rec.early_leave_minutes_raw
        record.total_early_leave_minutes_normalized += rec.early_leave_minutes_normalized
        record.late_debt_minutes += (
            rec.late_minutes_normalized + rec.early_leave_minutes_raw
        ) * policy.late_debt_multiplier

        # informative overtime signal; payroll overtime is settled monthly
        if record.is_workday and clock_in is not None and clock_out is not None:
            early_arrival = max(0, minutes_between(clock_in, at_time(clock_in, policy.nominal_start)))
            if early_arrival > policy.early_overtime_threshold_minutes:
                record.early_overtime_minutes += max(0, early_arrival - policy.early_overtime_deduct_minutes)
            record.after_shift_minutes += max(0, minutes_between(at_time(clock_in, policy.nominal_end), clock_out))

    def _add_wfh(self, record: DailyRecord, start: datetime, end: datetime, watermarks: dict) -> None:
        key = (record.person_id, record.work_date, _WFH)
        last_end = watermarks.get(key)
        added = _guarded_minutes(start, end, last_end)
        if added is None:
            record.needs_review = True
            record.has_overlap = record.has_overlap or last_end is not None
        else:
            record.work_from_home_minutes += added
        watermarks[key] = max(last_end, end) if last_end else end

    def _add_on_site(
        self,
        record: DailyRecord,
        rec: Interval,
        start: datetime,
        end: datetime,
        holiday_work: bool,
        watermarks: dict,
    ) -> None:
        key = (record.person_id, record.work_date, _ON_SITE)
        last_end = watermarks.get(key)

        added_raw = _guarded_minutes(start, end, last_end)
        if added_raw is None:
            record.needs_review = True
            record.has_overlap = record.has_overlap or last_end is not None
        else:
            record.presence_on_site_minutes_raw += added_raw
            if holiday_work:
                record.holiday_work_on_site_minutes += added_raw

        # holiday work is paid from its own 150% bucket, never from the regular basis
        if not holiday_work:
            payroll_start = parse_dmy_datetime(rec.clock_in_normalized) or start
            added_eff = _guarded_minutes(payroll_start, end, last_end)
            if added_eff is None:
                record.needs_review = True
            else:
                record.presence_on_site_minutes_effective += added_eff

        watermarks[key] = max(last_end, end) if last_end else end

    # -- phase 4: finalize ----------------------------------------------------

    def _finalize(self, record: DailyRecord) -> None:
        policy = self._policy
        person = self._people.get(record.person_id)
        if person is not None:
            record.group_code = person.group_code
            record.first_name = person.first_name
            record.last_name = person.last_name
            record.mode = person.mode
        slim = record.mode is PersonMode.SLIM

        day = self._calendar.get(record.work_date)
        record.is_present_on_site = record.presence_on_site_minutes_raw > 0
        record.lateness_day = bool(day and day.is_workday and record.has_late_or_early_leave)
        record.day_type = day.day_type if day else DayType.NON_WORKDAY

        if record.day_type is DayType.WORKDAY:
            record.raw_on_site_minutes = max(0, record.presence_on_site_minutes_effective)
        else:
            record.raw_on_site_minutes = max(
                0, record.presence_on_site_minutes_raw - record.holiday_work_on_site_minutes
            )
        record.raw_wfh_minutes = max(0, record.work_from_home_minutes)
        worked = record.raw_on_site_minutes + record.raw_wfh_minutes
        record.total_work_minutes = min(policy.minutes_per_workday, worked)
        record.overtime_work_minutes = max(0, record.after_shift_minutes + record.early_overtime_minutes)

        if day is None:
            # no calendar row: nothing can be billed until the calendar is fixed
            record.needs_review = True
            record.daily_notes = "Date not covered by the work calendar"
            record.premium_150_minutes = record.work_on_holiday_150_minutes
            return

        paid_day = not slim and day.is_weekday
        if paid_day and record.day_type is DayType.HOLIDAY:
            record.paid_holiday_100_minutes = policy.minutes_per_workday
            record.is_paid_non_work_attendance = True
            record.attendance_reason = AttendanceReason.HOLIDAY_100
        if paid_day and record.day_type is DayType.COLLECTIVE_LEAVE:
            record.paid_collective_leave_100_minutes = policy.minutes_per_workday
            record.is_paid_non_work_attendance = True
            record.attendance_reason = AttendanceReason.COLLECTIVE_LEAVE_100

        # every minute worked outside a WORKDAY is premium, with no regular-rate portion
        if record.day_type is not DayType.WORKDAY and record.interval_count > 0:
            record.non_workday_150_minutes = worked
        record.premium_150_minutes = record.work_on_holiday_150_minutes + record.non_workday_150_minutes

        if not slim and record.day_type is DayType.WORKDAY and record.interval_count == 0:
            record.missing_attendance_day = True
            record.needs_action = True
            if record.attendance_reason is AttendanceReason.NONE:
                record.attendance_reason = AttendanceReason.UNKNOWN_ABSENCE
            record.daily_notes = record.daily_notes or "Workday without attendance, manager decision needed"

    # -- phase 5: filter ------------------------------------------------------

    @staticmethod
    def _keep(record: DailyRecord) -> bool:
        has_flags = record.needs_review or record.needs_action
        if record.mode is PersonMode.SLIM:
            return record.interval_count > 0 or has_flags
        if record.day_type is not DayType.NON_WORKDAY:
            return True
        return (
            record.interval_count > 0
            or record.nonwork_paid_minutes > 0
            or record.premium_150_minutes > 0
            or has_flags
        )


def _guarded_minutes(start: datetime, end: datetime, last_end: Optional[datetime]) -> Optional[int]:
    """Minutes from start to end, clamped to the bucket watermark; None when nothing is left."""
    effective_start = max(start, last_end) if last_end else start
    if effective_start >= end:
        return None
    return minutes_between(effective_start, end)


def _assert_finite(record: DailyRecord) -> None:
    for name, value in record.minute_fields().items():
        if not math.isfinite(value):
            raise InvariantViolation(f"Non-finite {name} for person {record.person_id} on {record.work_date}")


def aggregate_daily(
    intervals: Iterable[Interval],
    calendar: Mapping[str, CalendarDay],
    people: Mapping[int, Person],
    *,
    policy: AttendancePolicy = DEFAULT_POLICY,
) -> list[DailyRecord]:
    return DailyAggregator(calendar, people, policy=policy).aggregate(intervals)
