"""Run one reconciliation from a JSON request file and print the output.

Usage: python scripts/run_payload.py request.json [output.json]

The request file has the same shape as the POST /api/attendance/run body.
"""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

from config import get_settings_module

from epr_attendance.container import build_container
from epr_attendance.runs.model import RunRequest


def main() -> None:
    if len(sys.argv) < 2:
        raise SystemExit("usage: run_payload.py request.json [output.json]")

    settings = importlib.import_module(get_settings_module())
    container = build_container(policy=settings.POLICY, timezone=settings.TIMEZONE)

    payload = json.loads(Path(sys.argv[1]).read_text(encoding="utf-8"))
    output = container.run_service.run(RunRequest.from_payload(payload))
    text = json.dumps(output.to_dict(), ensure_ascii=False, indent=2)

    if len(sys.argv) > 2:
        Path(sys.argv[2]).write_text(text, encoding="utf-8")
        print(f"OK: {output.run_metadata.run_status.value} run {output.run_metadata.run_id} -> {sys.argv[2]}")
    else:
        print(text)


if __name__ == "__main__":
    main()
