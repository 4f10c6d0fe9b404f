"""Deterministic day-level reason codes.

Codes are grouped into priority buckets (missing day, integrity, policy markers,
anti-gaming, disciplinary). Serialization sorts by bucket, then by code name, so
the same inputs always produce the same strings. Everything except the
disciplinary bucket is a review code; the disciplinary bucket is info only.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import Interval
from ..calendar.model import CalendarDay
from ..core.enums import Anomaly, EventType, ReasonCode
from ..core.policy import DEFAULT_POLICY, AttendancePolicy
from ..daily.model import DailyRecord

PRIORITY_MISSING = 0
PRIORITY_INTEGRITY = 1
PRIORITY_POLICY = 2
PRIORITY_ANTI_GAMING = 3
PRIORITY_INFO = 4

REASON_PRIORITY: dict[ReasonCode, int] = {
    ReasonCode.MISSING_DAY: PRIORITY_MISSING,
    ReasonCode.UNPARSABLE_CLOCK_IN: PRIORITY_INTEGRITY,
    ReasonCode.CALENDAR_GAP: PRIORITY_INTEGRITY,
    ReasonCode.OPEN_INTERVAL: PRIORITY_INTEGRITY,
    ReasonCode.NEGATIVE_DURATION: PRIORITY_INTEGRITY,
    ReasonCode.ZERO_DURATION: PRIORITY_INTEGRITY,
    ReasonCode.EXCESSIVE_DURATION: PRIORITY_INTEGRITY,
    ReasonCode.EFFECTIVE_START_AFTER_END: PRIORITY_INTEGRITY,
    ReasonCode.OVERLAPPING_INTERVAL: PRIORITY_INTEGRITY,
    ReasonCode.UNKNOWN_SHIFT_TYPE: PRIORITY_INTEGRITY,
    ReasonCode.UNKNOWN_EVENT_TYPE: PRIORITY_INTEGRITY,
    ReasonCode.DUPLICATE_INTERVAL: PRIORITY_INTEGRITY,
    ReasonCode.CONFLICTING_INTERVAL: PRIORITY_INTEGRITY,
    ReasonCode.SPLIT_SHIFT_SHORT: PRIORITY_POLICY,
    ReasonCode.WFH_CONFLICT: PRIORITY_POLICY,
    ReasonCode.SUSPICIOUS_SHORT_INTERVAL: PRIORITY_ANTI_GAMING,
    ReasonCode.LATE_ARRIVAL: PRIORITY_INFO,
    ReasonCode.EARLY_LEAVE: PRIORITY_INFO,
    ReasonCode.WORKTIME_DEFICIT: PRIORITY_INFO,
}

_ANOMALY_CODES: dict[str, ReasonCode] = {
    Anomaly.UNPARSABLE_CLOCK_IN.value: ReasonCode.UNPARSABLE_CLOCK_IN,
    Anomaly.NEGATIVE_DURATION.value: ReasonCode.NEGATIVE_DURATION,
    Anomaly.ZERO_DURATION.value: ReasonCode.ZERO_DURATION,
    Anomaly.EXCESSIVE_DURATION.value: ReasonCode.EXCESSIVE_DURATION,
    Anomaly.EFFECTIVE_START_AFTER_END.value: ReasonCode.EFFECTIVE_START_AFTER_END,
    Anomaly.UNKNOWN_SHIFT_TYPE.value: ReasonCode.UNKNOWN_SHIFT_TYPE,
    Anomaly.UNKNOWN_EVENT_TYPE.value: ReasonCode.UNKNOWN_EVENT_TYPE,
    Anomaly.SPLIT_SHIFT_SHORT.value: ReasonCode.SPLIT_SHIFT_SHORT,
    Anomaly.WFH_CONFLICT.value: ReasonCode.WFH_CONFLICT,
}


def is_review_code(code: ReasonCode) -> bool:
    return REASON_PRIORITY[code] < PRIORITY_INFO


def sort_codes(codes: Iterable[ReasonCode]) -> list[ReasonCode]:
    return sorted(set(codes), key=lambda c: (REASON_PRIORITY[c], c.value))


def join_codes(codes: Iterable[ReasonCode]) -> str:
    return "|".join(c.value for c in sort_codes(codes))


def interval_codes(rec: Interval) -> set[ReasonCode]:
    codes: set[ReasonCode] = set()
    if rec.flags.open_interval:
        codes.add(ReasonCode.OPEN_INTERVAL)
    if rec.flags.duplicate:
        codes.add(ReasonCode.DUPLICATE_INTERVAL)
    # a WFH/reader contradiction also sets the conflict flag; it has its own code
    wfh_conflict = Anomaly.WFH_CONFLICT.value in rec.anomalies
    if rec.flags.conflict and (rec.flags.duplicate or not wfh_conflict):
        codes.add(ReasonCode.CONFLICTING_INTERVAL)
    for anomaly in rec.anomalies:
        code = _ANOMALY_CODES.get(anomaly)
        if code is not None:
            codes.add(code)
    return codes


class _DayEvidence:
    __slots__ = ("codes", "min_duration", "has_regular")

    def __init__(self) -> None:
        self.codes: set[ReasonCode] = set()
        self.min_duration: Optional[int] = None
        self.has_regular = False


class ReasonCodeEngine:
    def __init__(self, calendar: Mapping[str, CalendarDay], *, policy: AttendancePolicy = DEFAULT_POLICY):
        self._calendar = calendar
        self._policy = policy

    def assign(self, daily: Sequence[DailyRecord], intervals: Iterable[Interval]) -> list[DailyRecord]:
        """Write reason codes onto the daily records; may also raise ``needs_review``."""
        evidence: dict[tuple[int, str], _DayEvidence] = {}

        for rec in intervals:
            # misscans take no part in reason derivation
            if rec.is_ignored or rec.work_date is None:
                continue
            ev = evidence.setdefault((rec.person_id, rec.work_date), _DayEvidence())
            ev.codes |= interval_codes(rec)
            if rec.flags.open_interval or Anomaly.NEGATIVE_DURATION.value in rec.anomalies:
                continue
            dur = rec.duration_raw_minutes
            if ev.min_duration is None or dur < ev.min_duration:
                ev.min_duration = dur
            if EventType.parse(rec.event_type) is EventType.REGULAR:
                ev.has_regular = True

        for d in daily:
            self._assign_day(d, evidence.get(d.key))
        return list(daily)

    def _assign_day(self, d: DailyRecord, ev: Optional[_DayEvidence]) -> None:
        codes: set[ReasonCode] = set()

        if d.missing_attendance_day:
            codes.add(ReasonCode.MISSING_DAY)
        if ev is not None:
            codes |= ev.codes
        if d.work_date not in self._calendar:
            codes.add(ReasonCode.CALENDAR_GAP)
        if d.has_overlap:
            codes.add(ReasonCode.OVERLAPPING_INTERVAL)

        if d.total_late_minutes_raw > 0:
            codes.add(ReasonCode.LATE_ARRIVAL)
        if d.total_early_leave_minutes_raw > 0:
            codes.add(ReasonCode.EARLY_LEAVE)
        if d.late_debt_minutes > 0:
            codes.add(ReasonCode.WORKTIME_DEFICIT)

        if (
            ev is not None
            and d.interval_count > 0
            and not d.missing_attendance_day
            and ev.has_regular
            and ReasonCode.OPEN_INTERVAL not in ev.codes
            and ev.min_duration is not None
            and 0 <= ev.min_duration <= self._policy.suspicious_short_max_minutes
        ):
            codes.add(ReasonCode.SUSPICIOUS_SHORT_INTERVAL)
            d.needs_review = True

        d.reason_codes = join_codes(codes)
        d.review_reason_codes = join_codes(c for c in codes if is_review_code(c))
        d.info_reason_codes = join_codes(c for c in codes if not is_review_code(c))


def assign_reason_codes(
    daily: Sequence[DailyRecord],
    intervals: Iterable[Interval],
    calendar: Mapping[str, CalendarDay],
    *,
    policy: AttendancePolicy = DEFAULT_POLICY,
) -> list[DailyRecord]:
    return ReasonCodeEngine(calendar, policy=policy).assign(daily, intervals)
