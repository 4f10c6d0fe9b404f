from __future__ import annotations

import hashlib
import logging
import uuid
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from ..common.serialization import canonical_json
from ..common.validators import validate_datasets
from ..core.constants import DEFAULT_TIMEZONE, RULES_VERSION
from ..core.enums import RunStatus
from ..engine import ReconciliationEngine
from .model import RunMetadata, RunOutput, RunRequest

logger = logging.getLogger(__name__)


def input_hash(request: RunRequest) -> str:
    material = {
        "use_case": request.use_case,
        "period": {"date_from": request.period.date_from, "date_to": request.period.date_to},
        "datasets": request.datasets.as_mapping(),
    }
    return "sha256:" + hashlib.sha256(canonical_json(material).encode("utf-8")).hexdigest()


def resolve_run_status(rejects_count: int, needs_review_count: int) -> RunStatus:
    if rejects_count == 0 and needs_review_count == 0:
        return RunStatus.FINAL
    return RunStatus.DRAFT


class RunService:
    """Wraps one engine call with validation and run metadata. Dry-run only: nothing is persisted."""

    def __init__(
        self,
        engine: ReconciliationEngine,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._engine = engine
        self._timezone = timezone
        self._tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def run(self, request: RunRequest) -> RunOutput:
        # structural errors raise here, before anything is computed
        validation = validate_datasets(request.datasets.as_mapping())
        if not validation.ok:
            logger.warning(
                "Run for %s has %d rejected rows (first: %s)",
                request.period.label,
                validation.rejects_count,
                validation.errors[0],
            )

        result = self._engine.compute(request.datasets, request.period, validation)
        status = resolve_run_status(result.rejects_count, result.needs_review_count)

        metadata = RunMetadata(
            run_id=self._id_factory(),
            use_case=request.use_case,
            rules_version=RULES_VERSION,
            input_hash=input_hash(request),
            run_status=status,
            generated_at=self._clock().isoformat(timespec="seconds"),
            timezone=self._timezone,
            rejects_count=result.rejects_count,
            needs_review_count=result.needs_review_count,
            needs_action_count=result.needs_action_count,
        )
        logger.info("Run %s for %s finished as %s", metadata.run_id, request.period.label, status.value)
        return RunOutput(run_metadata=metadata, result=result, validation=validation)
