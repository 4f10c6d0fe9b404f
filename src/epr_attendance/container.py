from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.factory import NormalizationStrategyFactory
from .core.constants import DEFAULT_RECAP_TOP_N, DEFAULT_TIMEZONE
from .core.policy import AttendancePolicy
from .engine import ReconciliationEngine
from .payroll.calculator.fund_calculator import MonthlyFundPolicy
from .runs.service import RunService


@dataclass(frozen=True)
class Container:
    policy: AttendancePolicy
    engine: ReconciliationEngine
    run_service: RunService


def build_container(
    *,
    policy: Optional[Mapping[str, Any]] = None,
    timezone: str = DEFAULT_TIMEZONE,
    recap_top_n: int = DEFAULT_RECAP_TOP_N,
) -> Container:
    attendance_policy = AttendancePolicy.from_mapping(policy)

    engine = ReconciliationEngine(
        policy=attendance_policy,
        strategy_factory=NormalizationStrategyFactory(),
        calculator=MonthlyFundPolicy(attendance_policy.minutes_per_workday),
        recap_top_n=recap_top_n,
    )
    run_service = RunService(engine, timezone=timezone)

    return Container(policy=attendance_policy, engine=engine, run_service=run_service)
