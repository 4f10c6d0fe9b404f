from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, time
from typing import Any, Mapping

from . import constants as c
from .exceptions import ValidationError


@dataclass(frozen=True)
class AttendancePolicy:
    """Policy knobs for normalization, discipline and reconciliation.

    Defaults mirror the agreed company rules; deployments override them through
    the settings module (``POLICY`` dict), never inside the engine.
    """

    nominal_start: time = c.NOMINAL_START
    nominal_end: time = c.NOMINAL_END
    minutes_per_workday: int = c.MINUTES_PER_WORKDAY
    late_bucket_minutes: int = c.LATE_BUCKET_MINUTES
    late_grace_max_minutes: int = c.LATE_NORMALIZE_GRACE_MAX
    big_late_plus_minutes: int = c.BIG_LATE_PLUS_MINUTES
    excessive_duration_minutes: int = c.EXCESSIVE_DURATION_MINUTES
    split_shift_min_minutes: int = c.SPLIT_SHIFT_MIN_MINUTES
    suspicious_short_max_minutes: int = c.SUSPICIOUS_SHORT_MAX_MINUTES
    late_debt_multiplier: int = c.LATE_DEBT_MULTIPLIER
    early_overtime_threshold_minutes: int = c.EARLY_OVERTIME_THRESHOLD_MINUTES
    early_overtime_deduct_minutes: int = c.EARLY_OVERTIME_DEDUCT_MINUTES
    wfh_note_marker: str = c.WFH_NOTE_MARKER
    collective_leave_text: str = c.COLLECTIVE_LEAVE_TEXT
    onsite_reader_addresses: frozenset[str] = field(default_factory=lambda: c.ONSITE_READER_ADDRESSES)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> AttendancePolicy:
        if not values:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValidationError(f"Unknown policy keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for name, value in values.items():
            if value is None:
                continue
            if name in {"nominal_start", "nominal_end"}:
                kwargs[name] = _parse_time(value, name)
            elif name == "onsite_reader_addresses":
                if isinstance(value, str):
                    value = value.split(",")
                kwargs[name] = frozenset(str(v).strip() for v in value if str(v).strip())
            elif name in {"wfh_note_marker", "collective_leave_text"}:
                kwargs[name] = str(value)
            else:
                try:
                    kwargs[name] = int(value)
                except (TypeError, ValueError):
                    raise ValidationError(f"Policy value {name} must be an integer")
        return cls(**kwargs)


def _parse_time(value: Any, name: str) -> time:
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Policy value {name} must be HH:MM")


DEFAULT_POLICY = AttendancePolicy()
