"""Example: run one reconciliation through the service layer (no Flask).

Controllers are a thin layer; all attendance and payroll rules live in the engine.
"""

import importlib
import json

from config import get_settings_module

from epr_attendance.calendar.model import Period
from epr_attendance.container import build_container
from epr_attendance.runs.model import Datasets, RunRequest


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(policy=settings.POLICY, timezone=settings.TIMEZONE)

    datasets = Datasets.from_payload(
        {
            "calendar": [
                {"date": "2026-02-02", "is_workday": 1},
                {"date": "2026-02-03", "is_workday": 1},
                {"date": "2026-02-07", "is_workday": 0},
            ],
            "people": [{"id": 1, "first_name": "Ana", "last_name": "Horvat", "group_code": "adm"}],
            "raw_events": [
                {"person_id": 1, "clock_in": "02/02/2026 07:45", "clock_out": "02/02/2026 16:00"},
                {"person_id": 1, "clock_in": "07/02/2026 09:00", "clock_out": "07/02/2026 12:00"},
            ],
        }
    )
    request = RunRequest(period=Period("2026-02-02", "2026-02-07"), datasets=datasets)

    output = container.run_service.run(request)
    print(output.run_metadata.run_status.value)
    for line in output.result.recap_lines:
        print(f"[{line.severity.value}] {line.text}")
    print(json.dumps(output.to_dict()["period_summary"], indent=2))


if __name__ == "__main__":
    main()
