from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..calendar.model import Period
from ..common.serialization import to_plain
from ..common.validators import CALENDAR, PEOPLE, RAW_EVENTS, ValidationReport
from ..core.constants import USE_CASE
from ..core.enums import RunStatus
from ..core.exceptions import ValidationError

# payload key -> canonical dataset name (ERP export names kept for old callers)
_DATASET_ALIASES = {
    RAW_EVENTS: (RAW_EVENTS, "epr_data"),
    CALENDAR: (CALENDAR,),
    PEOPLE: (PEOPLE, "osebe_raw"),
}


@dataclass(frozen=True)
class Datasets:
    """Raw input rows, exactly as received. Parsing happens inside the engine."""

    raw_events: Optional[Any] = None
    calendar: Optional[Any] = None
    people: Optional[Any] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Datasets:
        if not isinstance(payload, Mapping):
            raise ValidationError("datasets must be an object keyed by dataset name")
        values: dict[str, Any] = {}
        for name, aliases in _DATASET_ALIASES.items():
            for alias in aliases:
                if payload.get(alias) is not None:
                    values[name] = payload[alias]
                    break
        return cls(**values)

    def as_mapping(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in ((RAW_EVENTS, self.raw_events), (CALENDAR, self.calendar), (PEOPLE, self.people))
            if value is not None
        }


@dataclass(frozen=True)
class RunRequest:
    period: Period
    datasets: Datasets
    use_case: str = USE_CASE

    @classmethod
    def from_payload(cls, payload: Any) -> RunRequest:
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be a JSON object")
        period = payload.get("period")
        if not isinstance(period, Mapping):
            raise ValidationError("period is required")
        use_case = str(payload.get("use_case") or USE_CASE)
        if use_case != USE_CASE:
            raise ValidationError(f"Unknown use_case: {use_case}")
        return cls(
            period=Period.from_mapping(period),
            datasets=Datasets.from_payload(payload.get("datasets")),
            use_case=use_case,
        )


@dataclass(frozen=True)
class RunMetadata:
    run_id: str
    use_case: str
    rules_version: str
    input_hash: str
    run_status: RunStatus
    generated_at: str
    timezone: str
    rejects_count: int
    needs_review_count: int
    needs_action_count: int


@dataclass(frozen=True)
class RunOutput:
    run_metadata: RunMetadata
    result: Any
    validation: ValidationReport

    @property
    def is_final(self) -> bool:
        return self.run_metadata.run_status is RunStatus.FINAL

    def to_dict(self) -> dict[str, Any]:
        out = {"run_metadata": to_plain(self.run_metadata)}
        out.update(self.result.to_dict())
        out["validation"] = {
            "ok": self.validation.ok,
            "errors": to_plain(self.validation.errors),
            "warnings": to_plain(self.validation.warnings),
        }
        return out
