from __future__ import annotations

import hashlib
from typing import Mapping, Optional

from ..calendar.model import CalendarDay, CalendarFlags
from ..common.datetime_utils import minutes_between, parse_dmy_datetime, to_iso_date
from ..core.enums import Anomaly, EventType, PersonMode, ShiftType
from ..core.policy import DEFAULT_POLICY, AttendancePolicy
from ..people.model import Person
from .factory import NormalizationStrategyFactory
from .model import Interval, IntervalFlags, RawEvent
from .strategies.base import StartDecision


def is_wfh_note(note: Optional[str], marker: str) -> bool:
    """Canonical work-from-home marker, case-insensitive, NBSP/whitespace tolerant."""
    text = " ".join(str(note or "").replace("\u00a0", " ").split())
    return text.lower() == marker.strip().lower()


def event_key(event: RawEvent) -> str:
    """Audit identity of the material fields, independent of calendar context."""
    material = "|".join(
        [
            str(event.person_id),
            event.clock_in or "",
            event.clock_out or "",
            str(event.event_type),
            event.note or "",
        ]
    )
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


class IntervalNormalizer:
    """Turn one RawEvent into one Interval. Malformed data degrades to ``needs_review``, never raises."""

    def __init__(
        self,
        calendar: Mapping[str, CalendarDay],
        *,
        policy: AttendancePolicy = DEFAULT_POLICY,
        strategy_factory: NormalizationStrategyFactory | None = None,
    ):
        self._calendar = calendar
        self._policy = policy
        self._factory = strategy_factory or NormalizationStrategyFactory()

    def normalize(self, event: RawEvent, *, person: Optional[Person] = None) -> Interval:
        policy = self._policy
        anomalies: list[Anomaly] = []
        conflict = False
        open_interval = False

        clock_in = parse_dmy_datetime(event.clock_in)
        clock_out = parse_dmy_datetime(event.clock_out) if event.clock_out else None
        if clock_in is None:
            anomalies.append(Anomaly.UNPARSABLE_CLOCK_IN)

        work_date = to_iso_date(clock_in) if clock_in else None
        day = self._calendar.get(work_date) if work_date else None
        calendar_flags = day.flags if day else CalendarFlags()

        shift_type = ShiftType.parse(event.shift_type)
        event_type = EventType.parse(event.event_type)
        is_split_shift = shift_type is ShiftType.SPLIT
        is_wfh = is_wfh_note(event.note, policy.wfh_note_marker) or event_type is EventType.WORK_FROM_HOME
        is_ignored = event_type is EventType.MISSCAN

        location = (event.device_location or "").strip()
        if is_wfh and location and location in policy.onsite_reader_addresses:
            conflict = True
            anomalies.append(Anomaly.WFH_CONFLICT)

        duration_raw = 0
        if clock_out is None:
            open_interval = True
            anomalies.append(Anomaly.OPEN_INTERVAL)
        elif clock_in is not None and clock_out < clock_in:
            anomalies.append(Anomaly.NEGATIVE_DURATION)
        elif clock_in is not None:
            duration_raw = minutes_between(clock_in, clock_out)
            if is_split_shift and 0 < duration_raw < policy.split_shift_min_minutes:
                anomalies.append(Anomaly.SPLIT_SHIFT_SHORT)
            if duration_raw == 0:
                anomalies.append(Anomaly.ZERO_DURATION)
            if duration_raw > policy.excessive_duration_minutes:
                anomalies.append(Anomaly.EXCESSIVE_DURATION)

        if clock_in is None:
            decision = StartDecision(clock_in_normalized=event.clock_in, duration_effective_minutes=0)
        else:
            strategy = self._factory.for_interval(
                is_workday=calendar_flags.is_workday,
                is_wfh=is_wfh,
                is_split_shift=is_split_shift,
            )
            decision = strategy.decide(
                clock_in=clock_in,
                clock_in_raw=event.clock_in,
                clock_out=clock_out,
                duration_raw_minutes=duration_raw,
                policy=policy,
            )
        if decision.effective_start_after_end:
            anomalies.append(Anomaly.EFFECTIVE_START_AFTER_END)

        if not shift_type.is_recognized:
            anomalies.append(Anomaly.UNKNOWN_SHIFT_TYPE)
        if not event_type.is_recognized:
            anomalies.append(Anomaly.UNKNOWN_EVENT_TYPE)

        flags = IntervalFlags(
            late_arrival=decision.late_minutes_raw > 0,
            early_leave=decision.early_leave_minutes_raw > 0,
            open_interval=open_interval,
            conflict=conflict,
            needs_review=bool(anomalies),
        )

        return Interval(
            event_key=event_key(event),
            person_id=event.person_id,
            work_date=work_date,
            calendar_flags=calendar_flags,
            clock_in_raw=event.clock_in,
            clock_in_normalized=decision.clock_in_normalized,
            clock_out_raw=event.clock_out,
            duration_raw_minutes=duration_raw,
            duration_effective_minutes=decision.duration_effective_minutes,
            late_minutes_raw=decision.late_minutes_raw,
            late_minutes_normalized=decision.late_minutes_normalized,
            early_leave_minutes_raw=decision.early_leave_minutes_raw,
            early_leave_minutes_normalized=decision.early_leave_minutes_raw,
            shift_type=event.shift_type,
            event_type=event.event_type,
            is_split_shift=is_split_shift,
            is_wfh=is_wfh,
            is_ignored=is_ignored,
            note=event.note or "",
            device_location=location,
            flags=flags,
            anomalies=tuple(a.value for a in anomalies),
            group_code=person.group_code if person else "UNKNOWN",
            first_name=person.first_name if person else "",
            last_name=person.last_name if person else "",
            mode=person.mode if person else PersonMode.FULL,
        )


def normalize_event(
    event: RawEvent,
    calendar: Mapping[str, CalendarDay],
    *,
    policy: AttendancePolicy = DEFAULT_POLICY,
    person: Optional[Person] = None,
) -> Interval:
    return IntervalNormalizer(calendar, policy=policy).normalize(event, person=person)
