from epr_attendance.attendance.dedup import flag_duplicates
from epr_attendance.attendance.normalizer import IntervalNormalizer
from epr_attendance.core.enums import ReasonCode
from epr_attendance.daily.aggregator import aggregate_daily
from epr_attendance.reasons.engine import assign_reason_codes, join_codes


def _reasons(events, calendar, people):
    normalizer = IntervalNormalizer(calendar)
    intervals = flag_duplicates(normalizer.normalize(e, person=people.get(e.person_id)) for e in events)
    daily = aggregate_daily(intervals, calendar, people)
    return {d.key: d for d in assign_reason_codes(daily, intervals, calendar)}


def test_missing_day_code(monday_calendar, people):
    d = _reasons([], monday_calendar, people)[(1, "2026-02-02")]

    assert d.reason_codes == "MISSING_DAY"
    assert d.review_reason_codes == "MISSING_DAY"
    assert d.info_reason_codes == ""


def test_discipline_codes_are_info_only(monday_calendar, people, make_event):
    d = _reasons([make_event("02/02/2026 07:45", "02/02/2026 15:20")], monday_calendar, people)[(1, "2026-02-02")]

    assert d.reason_codes == "EARLY_LEAVE|LATE_ARRIVAL|WORKTIME_DEFICIT"
    assert d.review_reason_codes == ""
    assert d.info_reason_codes == "EARLY_LEAVE|LATE_ARRIVAL|WORKTIME_DEFICIT"
    assert d.needs_review is False


def test_clean_day_has_no_codes(monday_calendar, people, make_event):
    d = _reasons([make_event()], monday_calendar, people)[(1, "2026-02-02")]

    assert d.reason_codes == ""


def test_suspicious_short_interval_raises_review(monday_calendar, people, make_event):
    events = [
        make_event("02/02/2026 07:30", "02/02/2026 07:31"),
        make_event("02/02/2026 07:35", "02/02/2026 15:30"),
    ]
    d = _reasons(events, monday_calendar, people)[(1, "2026-02-02")]

    assert ReasonCode.SUSPICIOUS_SHORT_INTERVAL.value in d.review_reason_codes.split("|")
    assert d.needs_review is True


def test_open_interval_suppresses_suspicious_short(monday_calendar, people, make_event):
    events = [
        make_event("02/02/2026 07:30", "02/02/2026 07:31"),
        make_event("02/02/2026 07:35", None),
    ]
    d = _reasons(events, monday_calendar, people)[(1, "2026-02-02")]

    assert d.review_reason_codes == "OPEN_INTERVAL"


def test_misscan_is_ignored_by_reasons(monday_calendar, people, make_event):
    d = _reasons([make_event("02/02/2026 07:30", "02/02/2026 07:31", event_type=90)], monday_calendar, people)[
        (1, "2026-02-02")
    ]

    assert d.reason_codes == ""
    assert d.needs_review is False


def test_duplicate_with_conflicting_notes(monday_calendar, people, make_event):
    d = _reasons([make_event(note=""), make_event(note="card")], monday_calendar, people)[(1, "2026-02-02")]

    assert d.review_reason_codes == "CONFLICTING_INTERVAL|DUPLICATE_INTERVAL"


def test_wfh_conflict_has_its_own_code(monday_calendar, people, make_event):
    d = _reasons([make_event(event_type=6, device_location="192.168.100.41")], monday_calendar, people)[
        (1, "2026-02-02")
    ]

    assert d.review_reason_codes == "WFH_CONFLICT"


def test_interval_before_billable_start_has_review_code(monday_calendar, people, make_event):
    d = _reasons([make_event("02/02/2026 10:00", "02/02/2026 10:04")], monday_calendar, people)[(1, "2026-02-02")]

    assert d.needs_review is True
    assert d.review_reason_codes == "EFFECTIVE_START_AFTER_END"
    assert d.info_reason_codes == "EARLY_LEAVE|LATE_ARRIVAL|WORKTIME_DEFICIT"


def test_zero_duration_has_review_code(monday_calendar, people, make_event):
    d = _reasons([make_event("02/02/2026 09:00", "02/02/2026 09:00", event_type=6)], monday_calendar, people)[
        (1, "2026-02-02")
    ]

    assert d.needs_review is True
    assert d.review_reason_codes == "ZERO_DURATION"


def test_fully_covered_interval_is_reported_as_overlap(monday_calendar, people, make_event):
    events = [
        make_event("02/02/2026 07:30", "02/02/2026 15:30"),
        make_event("02/02/2026 09:00", "02/02/2026 10:00", shift_type=1),
    ]
    d = _reasons(events, monday_calendar, people)[(1, "2026-02-02")]

    assert d.needs_review is True
    assert d.reason_codes == "OVERLAPPING_INTERVAL"
    assert d.review_reason_codes == "OVERLAPPING_INTERVAL"


def test_date_outside_calendar(monday_calendar, people, make_event):
    d = _reasons([make_event("10/02/2026 07:30", "10/02/2026 15:30")], monday_calendar, people)[(1, "2026-02-10")]

    assert d.review_reason_codes == "CALENDAR_GAP"


def test_codes_sort_by_bucket_then_name():
    codes = [
        ReasonCode.LATE_ARRIVAL,
        ReasonCode.WFH_CONFLICT,
        ReasonCode.OPEN_INTERVAL,
        ReasonCode.MISSING_DAY,
        ReasonCode.CALENDAR_GAP,
        ReasonCode.SUSPICIOUS_SHORT_INTERVAL,
        ReasonCode.OPEN_INTERVAL,
    ]

    assert join_codes(codes) == (
        "MISSING_DAY|CALENDAR_GAP|OPEN_INTERVAL|WFH_CONFLICT|SUSPICIOUS_SHORT_INTERVAL|LATE_ARRIVAL"
    )
