from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import Interval
from ..calendar.model import Period
from ..core.enums import AttendanceOrigin, AttendanceReason, DayType
from ..daily.model import DailyRecord
from ..people.model import Person
from .calculator.base import ReconciliationPolicy
from .calculator.fund_calculator import MonthlyFundPolicy
from .model import PeriodRecord

_SICK_REASONS = {AttendanceReason.SICK_LEAVE, AttendanceReason.SICK_LEAVE_HZZO_100}


class PeriodSummaryService:
    def __init__(self, *, calculator: Optional[ReconciliationPolicy] = None):
        self._calculator = calculator or MonthlyFundPolicy()

    def build_period_summary(
        self,
        *,
        daily: Sequence[DailyRecord],
        intervals: Iterable[Interval],
        people: Mapping[int, Person],
        period: Period,
    ) -> list[PeriodRecord]:
        accumulated = accumulate_period(daily, intervals, people, period)
        return [self._calculator.reconcile(p) for p in accumulated]


def accumulate_period(
    daily: Sequence[DailyRecord],
    intervals: Iterable[Interval],
    people: Mapping[int, Person],
    period: Period,
) -> list[PeriodRecord]:
    """Sum daily records into one PeriodRecord per person (before reconciliation)."""
    period_map: dict[int, PeriodRecord] = {}

    for d in daily:
        p = period_map.get(d.person_id)
        if p is None:
            person = people.get(d.person_id)
            p = PeriodRecord(
                person_id=d.person_id,
                period_from=period.date_from,
                period_to=period.date_to,
                group_code=person.group_code if person else d.group_code,
                mode=person.mode if person else d.mode,
                first_name=person.first_name if person else d.first_name,
                last_name=person.last_name if person else d.last_name,
                alt_id=person.alt_id if person else "",
            )
            period_map[d.person_id] = p
        _add_day(p, d)

    for rec in intervals:
        p = period_map.get(rec.person_id)
        if p is not None and rec.flags.open_interval:
            p.open_intervals_count += 1

    return [period_map[k] for k in sorted(period_map)]


def _add_day(p: PeriodRecord, d: DailyRecord) -> None:
    if d.is_workday:
        p.workdays_count += 1

    # payable day = WORKDAY + HOLIDAY_100 + COLLECTIVE_LEAVE_100, one each
    if d.day_type is DayType.WORKDAY:
        p.billable_days_count += 1
        p.payable_days_count += 1
        # non-workday minutes were already routed to the premium bucket
        p.raw_on_site_minutes_sum += max(0, d.raw_on_site_minutes)
        p.raw_wfh_minutes_sum += max(0, d.raw_wfh_minutes)
    if d.paid_holiday_100_minutes > 0:
        p.payable_days_count += 1
    if d.paid_collective_leave_100_minutes > 0:
        p.payable_days_count += 1

    p.total_presence_minutes_raw += d.total_presence_minutes_raw
    p.total_work_minutes += d.total_work_minutes
    p.total_overtime_work_minutes += d.overtime_work_minutes
    p.total_late_debt_minutes += d.late_debt_minutes
    p.total_late_minutes_raw += d.total_late_minutes_raw
    p.total_late_minutes_normalized += d.total_late_minutes_normalized
    p.total_early_leave_minutes_raw += d.total_early_leave_minutes_raw
    p.total_early_leave_minutes_normalized += d.total_early_leave_minutes_normalized

    p.pay_holiday_minutes += d.paid_holiday_100_minutes
    p.pay_collective_leave_minutes += d.paid_collective_leave_100_minutes
    p.pay_sick_70_minutes += d.paid_sick_70_minutes
    p.pay_sick_hzzo_70_minutes += d.paid_sick_hzzo_70_minutes
    p.pay_sick_hzzo_100_minutes += d.paid_sick_hzzo_100_minutes
    p.pay_injury_hzzo_100_minutes += d.paid_injury_hzzo_100_minutes
    p.pay_maternity_comp_minutes += d.paid_maternity_comp_100_minutes
    p.pay_premium_150_minutes += d.premium_150_minutes

    if d.missing_attendance_day:
        p.missing_attendance_days_count += 1
    if d.attendance_origin is AttendanceOrigin.MANUAL_STANDARDIZED:
        p.manual_standardized_days_count += 1
    if d.attendance_reason in _SICK_REASONS:
        p.sick_leave_days_count += 1
    if d.needs_review:
        p.needs_review_count += 1
    if d.is_present_on_site:
        p.presence_days_count += 1
    if d.lateness_day:
        p.lateness_days_count += 1
