"""Single entry point that runs every reconciliation phase over one input set.

Phase order: normalize -> dedup/conflict -> daily fold -> reason codes ->
period accumulation and fund reconciliation -> run facts -> recap and actions.
Nothing here keeps state between calls, so identical inputs give identical
results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.dedup import flag_duplicates
from .attendance.factory import NormalizationStrategyFactory
from .attendance.model import Interval, RawEvent
from .attendance.normalizer import IntervalNormalizer
from .calendar.model import Period, build_calendar
from .common.serialization import to_plain
from .common.validators import ValidationReport
from .core.constants import DEFAULT_RECAP_TOP_N
from .core.policy import DEFAULT_POLICY, AttendancePolicy
from .daily.aggregator import DailyAggregator
from .daily.model import DailyRecord
from .payroll.calculator.base import ReconciliationPolicy
from .payroll.calculator.fund_calculator import MonthlyFundPolicy
from .payroll.model import PeriodRecord
from .payroll.service import PeriodSummaryService
from .people.model import build_people
from .reasons.engine import ReasonCodeEngine
from .reports.actions import ActionsSeed, build_actions_seed
from .reports.recap import RecapLine, build_recap_lines
from .reports.run_facts import RunFacts, summarize_run_facts
from .runs.model import Datasets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputeResult:
    run_facts: RunFacts
    recap_lines: tuple[RecapLine, ...]
    interval_results: tuple[Interval, ...]
    daily_summary: tuple[DailyRecord, ...]
    period_summary: tuple[PeriodRecord, ...]
    actions_queue_seed: ActionsSeed
    rejects_count: int
    needs_review_count: int
    needs_action_count: int

    def to_dict(self) -> dict[str, Any]:
        return to_plain(self)


class ReconciliationEngine:
    def __init__(
        self,
        *,
        policy: AttendancePolicy = DEFAULT_POLICY,
        strategy_factory: Optional[NormalizationStrategyFactory] = None,
        calculator: Optional[ReconciliationPolicy] = None,
        recap_top_n: int = DEFAULT_RECAP_TOP_N,
    ):
        self._policy = policy
        self._strategy_factory = strategy_factory or NormalizationStrategyFactory()
        self._calculator = calculator or MonthlyFundPolicy(policy.minutes_per_workday)
        self._recap_top_n = recap_top_n

    def compute(
        self,
        datasets: Datasets,
        period: Period,
        validation: Optional[ValidationReport] = None,
    ) -> ComputeResult:
        policy = self._policy
        calendar = build_calendar(_mappings(datasets.calendar), collective_leave_text=policy.collective_leave_text)
        people = build_people(_mappings(datasets.people))
        events = [RawEvent.from_row(row) for row in _mappings(datasets.raw_events)]

        normalizer = IntervalNormalizer(calendar, policy=policy, strategy_factory=self._strategy_factory)
        intervals = flag_duplicates(normalizer.normalize(e, person=people.get(e.person_id)) for e in events)

        daily = DailyAggregator(calendar, people, policy=policy).aggregate(intervals)
        # reason codes may raise needs_review, so they run before the period sums
        daily = ReasonCodeEngine(calendar, policy=policy).assign(daily, intervals)

        period_summary = PeriodSummaryService(calculator=self._calculator).build_period_summary(
            daily=daily, intervals=intervals, people=people, period=period
        )
        run_facts = summarize_run_facts(calendar, period, daily, policy=policy)
        recap = build_recap_lines(run_facts, period_summary, top_n=self._recap_top_n)

        rejects = validation.rejects_count if validation is not None else 0
        needs_review = sum(1 for d in daily if d.needs_review) + sum(
            1 for rec in intervals if rec.work_date is None and rec.flags.needs_review
        )
        needs_action = sum(1 for d in daily if d.needs_action)

        logger.info(
            "Computed period %s: events=%d intervals=%d daily=%d persons=%d rejects=%d review=%d action=%d",
            period.label,
            len(events),
            len(intervals),
            len(daily),
            len(period_summary),
            rejects,
            needs_review,
            needs_action,
        )

        return ComputeResult(
            run_facts=run_facts,
            recap_lines=tuple(recap),
            interval_results=tuple(intervals),
            daily_summary=tuple(daily),
            period_summary=tuple(period_summary),
            actions_queue_seed=build_actions_seed(daily),
            rejects_count=rejects,
            needs_review_count=needs_review,
            needs_action_count=needs_action,
        )


def _mappings(rows: Any) -> list[Mapping[str, Any]]:
    if not isinstance(rows, (list, tuple)):
        return []
    return [row for row in rows if isinstance(row, Mapping)]


def compute(
    datasets: Datasets | Mapping[str, Any],
    period: Period,
    validation: Optional[ValidationReport] = None,
    *,
    policy: AttendancePolicy = DEFAULT_POLICY,
) -> ComputeResult:
    if not isinstance(datasets, Datasets):
        datasets = Datasets.from_payload(datasets)
    return ReconciliationEngine(policy=policy).compute(datasets, period, validation)
