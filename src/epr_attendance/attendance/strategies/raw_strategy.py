from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.policy import AttendancePolicy
from .base import NormalizationStrategy, StartDecision


class RawIntervalStrategy(NormalizationStrategy):
    """Bill the interval as clocked: no start normalization, no discipline.

    Used for work from home, non-workdays and split shifts.
    """

    def decide(
        self,
        *,
        clock_in: datetime,
        clock_in_raw: str,
        clock_out: Optional[datetime],
        duration_raw_minutes: int,
        policy: AttendancePolicy,
    ) -> StartDecision:
        return StartDecision(clock_in_normalized=clock_in_raw, duration_effective_minutes=duration_raw_minutes)
