"""Short, ordered summary lines for the people who sign off a payroll run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.constants import DEFAULT_RECAP_TOP_N
from ..core.enums import Severity
from ..payroll.model import PeriodRecord
from .run_facts import RunFacts


@dataclass(frozen=True)
class RecapLine:
    severity: Severity
    text: str
    metric: Optional[str] = None
    value: Optional[int] = None


def _total(period_summary: Sequence[PeriodRecord], name: str) -> int:
    return sum(getattr(p, name) for p in period_summary)


def _top(period_summary: Sequence[PeriodRecord], name: str, top_n: int) -> list[PeriodRecord]:
    hits = [p for p in period_summary if getattr(p, name) > 0]
    hits.sort(key=lambda p: (-getattr(p, name), p.person_id))
    return hits[:top_n]


def build_recap_lines(
    run_facts: RunFacts,
    period_summary: Sequence[PeriodRecord],
    top_n: int = DEFAULT_RECAP_TOP_N,
) -> list[RecapLine]:
    lines = [
        RecapLine(
            Severity.INFO,
            f"Period {run_facts.period_label}: {run_facts.workdays_count} workdays, "
            f"{run_facts.holiday_days_count} holidays, {run_facts.collective_leave_days_count} collective leave days, "
            f"{run_facts.expected_presence_days_count} billable days.",
            "workdays_count",
            run_facts.workdays_count,
        ),
        RecapLine(
            Severity.INFO,
            f"Expected effective presence: {run_facts.expected_effective_presence_minutes} min; "
            f"achieved: {run_facts.effective_presence_minutes} min.",
            "effective_presence_minutes",
            run_facts.effective_presence_minutes,
        ),
        RecapLine(
            Severity.INFO,
            f"Status minutes: collective leave {run_facts.collective_leave_minutes} min; "
            f"public holidays {run_facts.holiday_minutes} min.",
        ),
    ]

    missing = _total(period_summary, "missing_attendance_days_count")
    if missing > 0:
        lines.append(
            RecapLine(
                Severity.ACTION,
                f"Unexplained absences: {missing} workdays without attendance "
                "(manager must enter sick leave or approved annual leave).",
                "missing_attendance_days",
                missing,
            )
        )
        top = _top(period_summary, "missing_attendance_days_count", top_n)
        if top:
            listing = ", ".join(f"{p.person_id}({p.missing_attendance_days_count}d)" for p in top)
            lines.append(RecapLine(Severity.ACTION, f"Persons with unexplained absences (top {top_n}): {listing}"))

    open_intervals = _total(period_summary, "open_intervals_count")
    if open_intervals > 0:
        lines.append(
            RecapLine(
                Severity.WARN,
                f"Open intervals: {open_intervals} (check missing clock-out).",
                "open_intervals_count",
                open_intervals,
            )
        )

    needs_review = _total(period_summary, "needs_review_count")
    if needs_review > 0:
        lines.append(
            RecapLine(
                Severity.WARN,
                f"Days to review: {needs_review}.",
                "needs_review_count",
                needs_review,
            )
        )

    late = _total(period_summary, "total_late_minutes_normalized")
    early = _total(period_summary, "total_early_leave_minutes_raw")
    lines.append(
        RecapLine(
            Severity.INFO,
            f"Total lateness (normalized): {late} min; early leave: {early} min.",
            "late_minutes_normalized_total",
            late,
        )
    )

    overtime = _total(period_summary, "total_overtime_work_minutes")
    lines.append(
        RecapLine(
            Severity.INFO,
            f"Total overtime signal: {overtime} min (sum of daily overtime minutes).",
            "overtime_minutes_total",
            overtime,
        )
    )
    return lines
