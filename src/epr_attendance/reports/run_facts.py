from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from ..calendar.model import CalendarDay, Period
from ..core.policy import DEFAULT_POLICY, AttendancePolicy
from ..daily.model import DailyRecord

EXPECTED_PAID_POLICY = "PAYABLE_DAYS(Mon-Fri: workday|holiday|collective_leave)*480"


@dataclass(frozen=True)
class RunFacts:
    """Calendar-derived expectations for one run, independent of any person."""

    period_from: str
    period_to: str
    period_label: str
    workdays_count: int
    holiday_days_count: int
    collective_leave_days_count: int
    expected_presence_days_count: int
    expected_effective_presence_minutes: int
    payable_days_count: int
    expected_paid_minutes_month: int
    expected_paid_minutes_policy: str
    is_monthly_payroll: bool
    collective_leave_minutes: int
    holiday_minutes: int
    effective_presence_minutes: int


def summarize_run_facts(
    calendar: Mapping[str, CalendarDay],
    period: Period,
    daily: Iterable[DailyRecord],
    *,
    policy: AttendancePolicy = DEFAULT_POLICY,
) -> RunFacts:
    days = list(calendar.values())
    per_day = policy.minutes_per_workday

    workdays = sum(1 for d in days if d.is_workday)
    holidays = sum(1 for d in days if d.is_holiday)
    collective = sum(1 for d in days if d.is_collective_leave)
    billable = sum(1 for d in days if d.is_billable_workday)
    payable = sum(
        1 for d in days if d.is_weekday and (d.is_workday or d.is_holiday or d.is_collective_leave)
    )

    return RunFacts(
        period_from=period.date_from,
        period_to=period.date_to,
        period_label=period.label,
        workdays_count=workdays,
        holiday_days_count=holidays,
        collective_leave_days_count=collective,
        expected_presence_days_count=billable,
        expected_effective_presence_minutes=billable * per_day,
        payable_days_count=payable,
        expected_paid_minutes_month=payable * per_day,
        expected_paid_minutes_policy=EXPECTED_PAID_POLICY,
        is_monthly_payroll=period.is_full_month,
        collective_leave_minutes=collective * per_day,
        holiday_minutes=holidays * per_day,
        effective_presence_minutes=sum(d.total_work_minutes for d in daily),
    )
