from __future__ import annotations

from dataclasses import dataclass, fields

from ..core.enums import AttendanceOrigin, AttendanceReason, DayType, PersonMode


@dataclass
class DailyRecord:
    """One row per (person, date).

    Built by a single fold over zero-valued accumulators, then finalized in later
    passes (day type, paid buckets, reason codes). Minutes are whole minutes.
    """

    person_id: int
    work_date: str
    is_workday: bool = False
    is_holiday: bool = False
    is_collective_leave: bool = False
    day_type: DayType = DayType.NON_WORKDAY

    # interval accumulators
    interval_count: int = 0
    total_presence_minutes_raw: int = 0
    presence_on_site_minutes_raw: int = 0
    presence_on_site_minutes_effective: int = 0
    holiday_work_on_site_minutes: int = 0
    work_from_home_minutes: int = 0
    total_late_minutes_raw: int = 0
    total_late_minutes_normalized: int = 0
    total_early_leave_minutes_raw: int = 0
    total_early_leave_minutes_normalized: int = 0
    late_debt_minutes: int = 0
    early_overtime_minutes: int = 0
    after_shift_minutes: int = 0

    # reconcile inputs and informative KPIs
    raw_on_site_minutes: int = 0
    raw_wfh_minutes: int = 0
    total_work_minutes: int = 0
    overtime_work_minutes: int = 0

    # payroll buckets (minutes)
    paid_holiday_100_minutes: int = 0
    paid_collective_leave_100_minutes: int = 0
    paid_sick_70_minutes: int = 0
    paid_sick_hzzo_70_minutes: int = 0
    paid_sick_hzzo_100_minutes: int = 0
    paid_injury_hzzo_100_minutes: int = 0
    paid_maternity_comp_100_minutes: int = 0
    work_on_holiday_150_minutes: int = 0
    non_workday_150_minutes: int = 0
    premium_150_minutes: int = 0

    # classification / action
    has_late_or_early_leave: bool = False
    lateness_day: bool = False
    is_present_on_site: bool = False
    is_paid_non_work_attendance: bool = False
    missing_attendance_day: bool = False
    needs_action: bool = False
    needs_review: bool = False
    # an interval fell entirely inside time already counted for the day
    has_overlap: bool = False
    attendance_origin: AttendanceOrigin = AttendanceOrigin.AUTO
    attendance_reason: AttendanceReason = AttendanceReason.NONE
    daily_notes: str = ""

    # person enrichment
    group_code: str = "UNKNOWN"
    first_name: str = ""
    last_name: str = ""
    mode: PersonMode = PersonMode.FULL

    # reason codes, "|" joined in serialization order
    reason_codes: str = ""
    review_reason_codes: str = ""
    info_reason_codes: str = ""

    @property
    def key(self) -> tuple[int, str]:
        return (self.person_id, self.work_date)

    @property
    def nonwork_paid_minutes(self) -> int:
        return (
            self.paid_holiday_100_minutes
            + self.paid_collective_leave_100_minutes
            + self.paid_sick_70_minutes
            + self.paid_sick_hzzo_70_minutes
            + self.paid_sick_hzzo_100_minutes
            + self.paid_injury_hzzo_100_minutes
            + self.paid_maternity_comp_100_minutes
        )

    def minute_fields(self) -> dict[str, int]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name.endswith("_minutes") or f.name == "interval_count"
        }
