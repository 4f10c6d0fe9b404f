from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from epr_attendance.calendar.model import Period
from epr_attendance.core.enums import RunStatus
from epr_attendance.core.exceptions import ValidationError
from epr_attendance.engine import ReconciliationEngine
from epr_attendance.runs.model import Datasets, RunRequest
from epr_attendance.runs.service import RunService, input_hash, resolve_run_status


def _service() -> RunService:
    return RunService(
        ReconciliationEngine(),
        clock=lambda: datetime(2026, 3, 1, 9, 0, tzinfo=ZoneInfo("Europe/Zagreb")),
        id_factory=lambda: "run-1",
    )


def _request(events) -> RunRequest:
    return RunRequest(
        period=Period("2026-02-02", "2026-02-02"),
        datasets=Datasets.from_payload(
            {
                "calendar": [{"date": "2026-02-02", "is_workday": 1}],
                "people": [{"id": 1}],
                "raw_events": events,
            }
        ),
    )


def test_clean_run_is_final():
    output = _service().run(_request([{"person_id": 1, "clock_in": "02/02/2026 07:30", "clock_out": "02/02/2026 15:30"}]))
    meta = output.run_metadata

    assert meta.run_status is RunStatus.FINAL
    assert meta.run_id == "run-1"
    assert meta.generated_at == "2026-03-01T09:00:00+01:00"
    assert meta.input_hash.startswith("sha256:")
    assert meta.rejects_count == 0
    assert output.is_final is True
    assert output.to_dict()["run_metadata"]["run_status"] == "FINAL"


def test_rejected_rows_keep_run_in_draft():
    output = _service().run(
        _request([{"person_id": 9, "clock_in": "02/02/2026 07:30", "clock_out": "02/02/2026 15:30"}])
    )

    assert output.run_metadata.rejects_count == 1
    assert output.validation.errors[0].code == "FK_PERSON_NOT_FOUND"
    assert output.run_metadata.run_status is RunStatus.DRAFT


def test_review_days_keep_run_in_draft():
    output = _service().run(_request([{"person_id": 1, "clock_in": "02/02/2026 07:30"}]))

    assert output.run_metadata.rejects_count == 0
    assert output.run_metadata.needs_review_count == 1
    assert output.run_metadata.run_status is RunStatus.DRAFT
    assert output.validation.warnings[0].code == "OPEN_INTERVAL"


def test_input_hash_is_stable_and_content_sensitive():
    events = [{"person_id": 1, "clock_in": "02/02/2026 07:30", "clock_out": "02/02/2026 15:30"}]

    assert input_hash(_request(events)) == input_hash(_request(list(events)))
    assert input_hash(_request(events)) != input_hash(_request([]))


def test_run_status_policy():
    assert resolve_run_status(0, 0) is RunStatus.FINAL
    assert resolve_run_status(1, 0) is RunStatus.DRAFT
    assert resolve_run_status(0, 3) is RunStatus.DRAFT


def test_non_list_dataset_is_fatal():
    request = RunRequest(
        period=Period("2026-02-02", "2026-02-02"),
        datasets=Datasets.from_payload({"calendar": [], "raw_events": {"person_id": 1}}),
    )

    with pytest.raises(ValidationError):
        _service().run(request)


def test_request_from_payload_validates_period():
    with pytest.raises(ValidationError):
        RunRequest.from_payload({"period": {"date_from": "2026-02-10", "date_to": "2026-02-01"}, "datasets": {}})
    with pytest.raises(ValidationError):
        RunRequest.from_payload({"datasets": {}})
    with pytest.raises(ValidationError):
        RunRequest.from_payload(
            {"use_case": "other", "period": {"date_from": "2026-02-01", "date_to": "2026-02-28"}, "datasets": {}}
        )
