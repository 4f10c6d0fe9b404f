from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PersonMode


@dataclass
class PeriodRecord:
    """One row per (person, period).

    Accumulated from daily records, then reconciled in a single pass that
    overwrites the payroll buckets and audit fields.
    """

    person_id: int
    period_from: str
    period_to: str
    group_code: str = "UNKNOWN"
    mode: PersonMode = PersonMode.FULL
    first_name: str = ""
    last_name: str = ""
    alt_id: str = ""

    # day counts
    workdays_count: int = 0
    billable_days_count: int = 0
    payable_days_count: int = 0
    presence_days_count: int = 0
    lateness_days_count: int = 0
    missing_attendance_days_count: int = 0
    manual_standardized_days_count: int = 0
    sick_leave_days_count: int = 0
    needs_review_count: int = 0
    open_intervals_count: int = 0

    # raw monthly facts
    raw_on_site_minutes_sum: int = 0
    raw_wfh_minutes_sum: int = 0
    total_presence_minutes_raw: int = 0
    total_work_minutes: int = 0
    total_overtime_work_minutes: int = 0
    total_late_debt_minutes: int = 0
    total_late_minutes_raw: int = 0
    total_late_minutes_normalized: int = 0
    total_early_leave_minutes_raw: int = 0
    total_early_leave_minutes_normalized: int = 0

    # payroll buckets (minutes)
    pay_regular_minutes: int = 0
    pay_wfh_regular_minutes: int = 0
    pay_overtime_minutes: int = 0
    pay_premium_150_minutes: int = 0
    pay_holiday_minutes: int = 0
    pay_collective_leave_minutes: int = 0
    pay_sick_70_minutes: int = 0
    pay_sick_hzzo_70_minutes: int = 0
    pay_sick_hzzo_100_minutes: int = 0
    pay_injury_hzzo_100_minutes: int = 0
    pay_maternity_comp_minutes: int = 0

    # settlement audit
    overtime_payable_150_minutes: int = 0
    uncovered_debt_minutes: int = 0
    expected_paid_minutes: int = 0
    total_paid_minutes_base: int = 0
    paid_excess_minutes: int = 0
    paid_shortage_minutes: int = 0
    settlement_applied: bool = False
    overtime_policy: str = ""

    @property
    def nonwork_paid_minutes(self) -> int:
        return (
            self.pay_holiday_minutes
            + self.pay_collective_leave_minutes
            + self.pay_sick_70_minutes
            + self.pay_sick_hzzo_70_minutes
            + self.pay_sick_hzzo_100_minutes
            + self.pay_injury_hzzo_100_minutes
            + self.pay_maternity_comp_minutes
        )
