from __future__ import annotations

from enum import Enum
from typing import Any


class _CodeEnum(int, Enum):
    """Closed set of ERP integer codes with an explicit unrecognized arm."""

    @classmethod
    def parse(cls, value: Any):
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UNRECOGNIZED

    @property
    def is_recognized(self) -> bool:
        return self is not type(self).UNRECOGNIZED


class ShiftType(_CodeEnum):
    """Entry type (`tipvhod`): how the shift was clocked."""

    UNRECOGNIZED = -1
    DEFAULT = 0
    SPLIT = 1


class EventType(_CodeEnum):
    """Exit type (`tipizhod`): ERP attendance catalogue code."""

    UNRECOGNIZED = -1
    REGULAR = 0
    SICK = 3
    ANNUAL_LEAVE = 4
    HOLIDAY = 5
    WORK_FROM_HOME = 6
    HOLIDAY_WORK = 7
    MATERNITY = 8
    SICK_HZZO = 9
    MISSCAN = 90


class PersonMode(str, Enum):
    """SLIM persons are excluded from calendar skeletons and missing-day checks."""

    FULL = "FULL"
    SLIM = "SLIM"

    @classmethod
    def parse(cls, value: Any) -> "PersonMode":
        text = str(value or "").strip().upper()
        return cls.SLIM if text == cls.SLIM.value else cls.FULL


class DayType(str, Enum):
    WORKDAY = "WORKDAY"
    HOLIDAY = "HOLIDAY"
    COLLECTIVE_LEAVE = "COLLECTIVE_LEAVE"
    NON_WORKDAY = "NON_WORKDAY"


class AttendanceOrigin(str, Enum):
    AUTO = "auto"
    CALENDAR_AUTO = "calendar_auto"
    MANUAL_STANDARDIZED = "manual_standardized"


class AttendanceReason(str, Enum):
    NONE = "NONE"
    SICK_LEAVE = "SICK_LEAVE"
    SICK_LEAVE_HZZO_100 = "SICK_LEAVE_HZZO_100"
    MATERNITY_COMP_100 = "MATERNITY_COMP_100"
    WORK_ON_HOLIDAY_150 = "WORK_ON_HOLIDAY_150"
    HOLIDAY_100 = "HOLIDAY_100"
    COLLECTIVE_LEAVE_100 = "COLLECTIVE_LEAVE_100"
    UNKNOWN_ABSENCE = "UNKNOWN_ABSENCE"


class Anomaly(str, Enum):
    """Data-quality markers explaining why an interval needs review."""

    UNPARSABLE_CLOCK_IN = "UNPARSABLE_CLOCK_IN"
    OPEN_INTERVAL = "OPEN_INTERVAL"
    NEGATIVE_DURATION = "NEGATIVE_DURATION"
    ZERO_DURATION = "ZERO_DURATION"
    EXCESSIVE_DURATION = "EXCESSIVE_DURATION"
    EFFECTIVE_START_AFTER_END = "EFFECTIVE_START_AFTER_END"
    SPLIT_SHIFT_SHORT = "SPLIT_SHIFT_SHORT"
    WFH_CONFLICT = "WFH_CONFLICT"
    UNKNOWN_SHIFT_TYPE = "UNKNOWN_SHIFT_TYPE"
    UNKNOWN_EVENT_TYPE = "UNKNOWN_EVENT_TYPE"


class ReasonCode(str, Enum):
    MISSING_DAY = "MISSING_DAY"

    UNPARSABLE_CLOCK_IN = "UNPARSABLE_CLOCK_IN"
    CALENDAR_GAP = "CALENDAR_GAP"
    OPEN_INTERVAL = "OPEN_INTERVAL"
    NEGATIVE_DURATION = "NEGATIVE_DURATION"
    ZERO_DURATION = "ZERO_DURATION"
    EXCESSIVE_DURATION = "EXCESSIVE_DURATION"
    EFFECTIVE_START_AFTER_END = "EFFECTIVE_START_AFTER_END"
    OVERLAPPING_INTERVAL = "OVERLAPPING_INTERVAL"
    UNKNOWN_SHIFT_TYPE = "UNKNOWN_SHIFT_TYPE"
    UNKNOWN_EVENT_TYPE = "UNKNOWN_EVENT_TYPE"
    DUPLICATE_INTERVAL = "DUPLICATE_INTERVAL"
    CONFLICTING_INTERVAL = "CONFLICTING_INTERVAL"

    SPLIT_SHIFT_SHORT = "SPLIT_SHIFT_SHORT"
    WFH_CONFLICT = "WFH_CONFLICT"

    SUSPICIOUS_SHORT_INTERVAL = "SUSPICIOUS_SHORT_INTERVAL"

    LATE_ARRIVAL = "LATE_ARRIVAL"
    EARLY_LEAVE = "EARLY_LEAVE"
    WORKTIME_DEFICIT = "WORKTIME_DEFICIT"


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ACTION = "ACTION"


class RunStatus(str, Enum):
    """Only runs without rejects and without review days are FINAL."""

    DRAFT = "DRAFT"
    FINAL = "FINAL"
