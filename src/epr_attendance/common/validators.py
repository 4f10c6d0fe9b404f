"""Dataset checks that run before compute.

Structural problems (a dataset that is not a list) are fatal and raise.
Row-level problems are collected as issues; every error counts as a reject and
keeps the run in DRAFT, but never stops the computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

from ..core.enums import EventType, ShiftType
from ..core.exceptions import ValidationError
from .datetime_utils import parse_dmy_datetime, to_iso_date_any
from .rows import pick

RAW_EVENTS = "raw_events"
CALENDAR = "calendar"
PEOPLE = "people"

REQUIRED_DATASETS = (RAW_EVENTS, CALENDAR)


@dataclass(frozen=True)
class ColumnRule:
    names: tuple[str, ...]
    kind: str
    required: bool = False
    allowed: Optional[frozenset[int]] = None
    positive: bool = False

    @property
    def name(self) -> str:
        return self.names[0]


def _codes(enum_cls) -> frozenset[int]:
    return frozenset(int(m) for m in enum_cls if m.is_recognized)


DATASET_RULES: dict[str, tuple[ColumnRule, ...]] = {
    RAW_EVENTS: (
        ColumnRule(("person_id", "osebid"), "int", required=True, positive=True),
        ColumnRule(("clock_in", "timevhod"), "datetime", required=True),
        ColumnRule(("clock_out", "timeizhod"), "datetime"),
        ColumnRule(("shift_type", "tipvhod"), "int", allowed=_codes(ShiftType)),
        ColumnRule(("event_type", "tipizhod"), "int", allowed=_codes(EventType)),
        ColumnRule(("note", "opomba"), "string"),
        ColumnRule(("device_location", "lokizhod"), "string"),
    ),
    CALENDAR: (
        ColumnRule(("date", "datum"), "date", required=True),
        ColumnRule(("is_workday", "dandelovni"), "int", required=True, allowed=frozenset({0, 1})),
        ColumnRule(("is_holiday", "praznik"), "int", allowed=frozenset({0, 1})),
        ColumnRule(("note", "tekst"), "string"),
    ),
    PEOPLE: (
        ColumnRule(("id", "person_id", "osebid"), "int", required=True, positive=True),
        ColumnRule(("first_name", "ime"), "string"),
        ColumnRule(("last_name", "priimek"), "string"),
    ),
}


@dataclass(frozen=True)
class ValidationIssue:
    dataset: str
    code: str
    row: Optional[int] = None
    column: Optional[str] = None


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def rejects_count(self) -> int:
        return len(self.errors)


@dataclass
class _Collector:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def error(self, dataset: str, code: str, row: Optional[int] = None, column: Optional[str] = None) -> None:
        self.errors.append(ValidationIssue(dataset, code, row, column))

    def warn(self, dataset: str, code: str, row: Optional[int] = None, column: Optional[str] = None) -> None:
        self.warnings.append(ValidationIssue(dataset, code, row, column))


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _check_int(value: Any, rule: ColumnRule) -> Optional[str]:
    number = _as_int(value)
    if number is None:
        return "INVALID_INT"
    if rule.positive and number <= 0:
        return "NOT_POSITIVE"
    if rule.allowed is not None and number not in rule.allowed:
        return "ENUM_VIOLATION"
    return None


_CHECKS: dict[str, Callable[[Any, ColumnRule], Optional[str]]] = {
    "int": _check_int,
    "string": lambda v, _: None if isinstance(v, str) else "INVALID_STRING",
    "date": lambda v, _: None if to_iso_date_any(str(v)) else "INVALID_DATE_FORMAT",
    "datetime": lambda v, _: None if parse_dmy_datetime(str(v)) else "INVALID_DATETIME_FORMAT",
}


def _validate_rows(name: str, rows: Sequence[Any], out: _Collector) -> None:
    rules = DATASET_RULES.get(name, ())
    for idx, row in enumerate(rows):
        if not isinstance(row, Mapping):
            out.error(name, "ROW_NOT_OBJECT", row=idx)
            continue
        for rule in rules:
            value = pick(row, *rule.names)
            if value is None:
                if rule.required:
                    out.error(name, "REQUIRED_MISSING", row=idx, column=rule.name)
                continue
            code = _CHECKS[rule.kind](value, rule)
            if code:
                out.error(name, code, row=idx, column=rule.name)

        if name == RAW_EVENTS:
            _check_interval(row, idx, out)


def _check_interval(row: Mapping[str, Any], idx: int, out: _Collector) -> None:
    clock_in = parse_dmy_datetime(pick(row, "clock_in", "timevhod"))
    if clock_in is None:
        return
    raw_out = pick(row, "clock_out", "timeizhod")
    if raw_out is None:
        out.warn(RAW_EVENTS, "OPEN_INTERVAL", row=idx)
        return
    clock_out = parse_dmy_datetime(raw_out)
    if clock_out is not None and clock_out < clock_in:
        out.warn(RAW_EVENTS, "NEGATIVE_DURATION", row=idx)


def _check_person_refs(events: Sequence[Any], people: Sequence[Any], out: _Collector) -> None:
    known = {
        str(pick(p, "id", "person_id", "osebid")).strip()
        for p in people
        if isinstance(p, Mapping)
    }
    for idx, row in enumerate(events):
        if not isinstance(row, Mapping):
            continue
        person_id = pick(row, "person_id", "osebid")
        if person_id is not None and str(person_id).strip() not in known:
            out.error(RAW_EVENTS, "FK_PERSON_NOT_FOUND", row=idx, column="person_id")


def validate_datasets(datasets: Mapping[str, Any]) -> ValidationReport:
    if not isinstance(datasets, Mapping):
        raise ValidationError("datasets must be an object keyed by dataset name")

    out = _Collector()
    for name in (RAW_EVENTS, CALENDAR, PEOPLE):
        rows = datasets.get(name)
        if rows is None:
            if name in REQUIRED_DATASETS:
                out.error(name, "DATASET_MISSING")
            continue
        if not isinstance(rows, (list, tuple)):
            raise ValidationError(f"Dataset {name} must be a list of rows")
        _validate_rows(name, rows, out)

    events = datasets.get(RAW_EVENTS) or []
    people = datasets.get(PEOPLE) or []
    if events and people:
        _check_person_refs(events, people, out)

    return ValidationReport(errors=tuple(out.errors), warnings=tuple(out.warnings))
