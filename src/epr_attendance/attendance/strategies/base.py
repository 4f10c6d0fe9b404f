from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.policy import AttendancePolicy


@dataclass(frozen=True)
class StartDecision:
    """How an interval's start is billed and disciplined."""

    clock_in_normalized: str
    duration_effective_minutes: int
    late_minutes_raw: int = 0
    late_minutes_normalized: int = 0
    early_leave_minutes_raw: int = 0
    effective_start_after_end: bool = False


class NormalizationStrategy(ABC):
    """Strategy Pattern: encapsulate how an interval start is normalized."""

    @abstractmethod
    def decide(
        self,
        *,
        clock_in: datetime,
        clock_in_raw: str,
        clock_out: Optional[datetime],
        duration_raw_minutes: int,
        policy: AttendancePolicy,
    ) -> StartDecision:
        raise NotImplementedError
