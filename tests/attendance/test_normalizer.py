from epr_attendance.attendance.normalizer import IntervalNormalizer, event_key, is_wfh_note, normalize_event
from epr_attendance.core.enums import Anomaly


def test_small_lateness_snaps_to_flat_bucket(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("02/02/2026 07:45", "02/02/2026 15:30"))

    assert rec.late_minutes_raw == 15
    assert rec.late_minutes_normalized == 30
    assert rec.clock_in_normalized == "02/02/2026 07:30"
    assert rec.duration_raw_minutes == 465
    assert rec.duration_effective_minutes == 480
    assert rec.flags.late_arrival is True
    assert rec.flags.needs_review is False


def test_big_lateness_is_billed_from_clock_in_plus_offset(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("02/02/2026 08:10", "02/02/2026 15:30"))

    assert rec.late_minutes_raw == 40
    assert rec.late_minutes_normalized == 40
    assert rec.clock_in_normalized == "02/02/2026 08:15"
    assert rec.duration_effective_minutes == 435


def test_early_arrival_has_no_lateness(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("02/02/2026 07:00", "02/02/2026 15:30"))

    assert rec.late_minutes_raw == 0
    assert rec.late_minutes_normalized == 0
    assert rec.duration_raw_minutes == 510
    assert rec.duration_effective_minutes == 480


def test_early_leave_is_never_normalized(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("02/02/2026 07:30", "02/02/2026 15:07"))

    assert rec.early_leave_minutes_raw == 23
    assert rec.early_leave_minutes_normalized == 23
    assert rec.flags.early_leave is True


def test_open_interval(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("02/02/2026 07:30", None))

    assert rec.flags.open_interval is True
    assert rec.flags.needs_review is True
    assert rec.duration_raw_minutes == 0
    assert rec.duration_effective_minutes == 0
    assert Anomaly.OPEN_INTERVAL.value in rec.anomalies


def test_negative_duration_is_zeroed(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("02/02/2026 15:00", "02/02/2026 08:00"))

    assert rec.duration_raw_minutes == 0
    assert rec.flags.needs_review is True
    assert Anomaly.NEGATIVE_DURATION.value in rec.anomalies


def test_unparsable_clock_in_keeps_record_for_review(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("2026-02-02 07:30", "02/02/2026 15:30"))

    assert rec.work_date is None
    assert rec.flags.needs_review is True
    assert Anomaly.UNPARSABLE_CLOCK_IN.value in rec.anomalies


def test_wfh_note_skips_discipline(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(
        make_event("02/02/2026 09:00", "02/02/2026 13:00", note=" 001_radodkuce ")
    )

    assert rec.is_wfh is True
    assert rec.late_minutes_raw == 0
    assert rec.duration_effective_minutes == 240
    assert rec.flags.needs_review is False


def test_wfh_on_site_reader_is_a_conflict(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(
        make_event(event_type=6, device_location="192.168.100.77")
    )

    assert rec.is_wfh is True
    assert rec.flags.conflict is True
    assert rec.flags.needs_review is True
    assert Anomaly.WFH_CONFLICT.value in rec.anomalies


def test_short_split_shift_needs_review(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(
        make_event("02/02/2026 12:00", "02/02/2026 12:10", shift_type=1)
    )

    assert rec.is_split_shift is True
    assert rec.late_minutes_raw == 0
    assert rec.early_leave_minutes_raw == 0
    assert rec.duration_effective_minutes == 10
    assert Anomaly.SPLIT_SHIFT_SHORT.value in rec.anomalies


def test_unknown_codes_force_review(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event(shift_type=4, event_type=42))

    assert rec.flags.needs_review is True
    assert Anomaly.UNKNOWN_SHIFT_TYPE.value in rec.anomalies
    assert Anomaly.UNKNOWN_EVENT_TYPE.value in rec.anomalies
    assert rec.event_type == 42


def test_misscan_is_ignored(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event(event_type=90))

    assert rec.is_ignored is True


def test_non_workday_uses_raw_duration(week_calendar, make_event):
    rec = IntervalNormalizer(week_calendar).normalize(make_event("07/02/2026 09:00", "07/02/2026 12:00"))

    assert rec.work_date == "2026-02-07"
    assert rec.calendar_flags.is_workday is False
    assert rec.late_minutes_raw == 0
    assert rec.duration_effective_minutes == 180


def test_person_fields_are_copied(monday_calendar, people, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event(), person=people[1])

    assert rec.group_code == "ADM"
    assert rec.last_name == "Horvat"


def test_event_key_ignores_calendar_context(monday_calendar, week_calendar, make_event):
    event = make_event()
    a = IntervalNormalizer(monday_calendar).normalize(event)
    b = IntervalNormalizer(week_calendar).normalize(event)

    assert a.event_key == b.event_key == event_key(event)
    assert event_key(make_event(note="x")) != event_key(event)


def test_wfh_marker_tolerates_nbsp():
    assert is_wfh_note("001_RadOdKuce\u00a0", "001_RadOdKuce")
    assert not is_wfh_note("rad od kuce", "001_RadOdKuce")


def test_interval_ending_at_nominal_start_has_no_billable_minutes(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("02/02/2026 07:00", "02/02/2026 07:30"))

    assert rec.duration_raw_minutes == 30
    assert rec.duration_effective_minutes == 0
    assert Anomaly.EFFECTIVE_START_AFTER_END.value in rec.anomalies


def test_zero_duration_is_not_billed(monday_calendar, make_event):
    rec = IntervalNormalizer(monday_calendar).normalize(make_event("02/02/2026 07:45", "02/02/2026 07:45"))

    assert rec.duration_effective_minutes == 0
    assert rec.anomalies == (Anomaly.ZERO_DURATION.value,)


def test_normalize_event_uses_calendar_and_person(monday_calendar, people, make_event):
    rec = normalize_event(make_event("02/02/2026 07:45", "02/02/2026 15:30"), monday_calendar, person=people[1])

    assert rec.work_date == "2026-02-02"
    assert rec.clock_in_normalized == "02/02/2026 07:30"
    assert rec.late_minutes_normalized == 30
    assert rec.group_code == "ADM"
    assert rec.flags.needs_review is False
