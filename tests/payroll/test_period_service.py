from epr_attendance.attendance.dedup import flag_duplicates
from epr_attendance.attendance.normalizer import IntervalNormalizer
from epr_attendance.calendar.model import CalendarDay, Period, build_calendar
from epr_attendance.daily.aggregator import aggregate_daily
from epr_attendance.payroll.service import PeriodSummaryService, accumulate_period


def _run(events, calendar, people):
    normalizer = IntervalNormalizer(calendar)
    intervals = flag_duplicates(normalizer.normalize(e, person=people.get(e.person_id)) for e in events)
    daily = aggregate_daily(intervals, calendar, people)
    return daily, intervals


def test_after_shift_minutes_become_overtime(monday_calendar, people, make_event):
    period = Period("2026-02-02", "2026-02-02")
    daily, intervals = _run([make_event("02/02/2026 07:30", "02/02/2026 17:00")], monday_calendar, people)

    (p,) = PeriodSummaryService().build_period_summary(daily=daily, intervals=intervals, people=people, period=period)

    assert p.person_id == 1
    assert p.payable_days_count == 1
    assert p.pay_regular_minutes == 480
    assert p.pay_overtime_minutes == 90
    assert p.total_overtime_work_minutes == 90
    assert p.presence_days_count == 1


def test_period_counts(people, make_event):
    calendar = build_calendar(
        [
            CalendarDay(date="2026-02-02", is_workday=True, is_holiday=True),
            CalendarDay(date="2026-02-03", is_workday=True),
            CalendarDay(date="2026-02-04", is_workday=True),
            CalendarDay(date="2026-02-05", is_workday=True),
            CalendarDay(date="2026-02-07", is_workday=False),
        ]
    )
    events = [
        make_event("03/02/2026 07:45", "03/02/2026 15:30"),
        make_event("04/02/2026 07:30", None),
        make_event("07/02/2026 09:00", "07/02/2026 11:00"),
    ]
    period = Period("2026-02-02", "2026-02-07")
    daily, intervals = _run(events, calendar, people)

    (p,) = accumulate_period(daily, intervals, people, period)

    assert p.payable_days_count == 4
    assert p.billable_days_count == 3
    assert p.missing_attendance_days_count == 1
    assert p.open_intervals_count == 1
    assert p.lateness_days_count == 1
    assert p.pay_holiday_minutes == 480
    assert p.pay_premium_150_minutes == 120
    assert p.raw_on_site_minutes_sum == 480
    assert p.total_late_debt_minutes == 30
    assert p.settlement_applied is False
