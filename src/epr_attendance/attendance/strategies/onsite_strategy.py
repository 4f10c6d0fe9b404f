from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...common.datetime_utils import at_time, minutes_between, to_dmyhm
from ...core.policy import AttendancePolicy
from .base import NormalizationStrategy, StartDecision


class OnSiteWorkdayStrategy(NormalizationStrategy):
    """On-site work on a calendar workday.

    Arrivals up to the grace limit are billed from the nominal start and charged a
    flat lateness bucket; bigger delays are billed from clock-in plus a small offset
    and charged in full.
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
        start_ref = at_time(clock_in, policy.nominal_start)
        delta_start = minutes_between(start_ref, clock_in)

        if delta_start <= policy.late_grace_max_minutes:
            effective_start = start_ref
        else:
            effective_start = clock_in + timedelta(minutes=policy.big_late_plus_minutes)

        if delta_start <= 0:
            late_raw, late_normalized = 0, 0
        elif delta_start <= policy.late_grace_max_minutes:
            late_raw, late_normalized = delta_start, policy.late_bucket_minutes
        else:
            late_raw, late_normalized = delta_start, delta_start

        effective_minutes = 0
        start_after_end = False
        if clock_out is not None and clock_out > clock_in:
            # the whole interval lies before the billable start
            if effective_start >= clock_out:
                start_after_end = True
            else:
                effective_minutes = minutes_between(effective_start, clock_out)

        early_leave = 0
        if clock_out is not None:
            end_ref = at_time(clock_in, policy.nominal_end)
            if clock_out < end_ref:
                early_leave = minutes_between(clock_out, end_ref)

        return StartDecision(
            clock_in_normalized=to_dmyhm(effective_start),
            duration_effective_minutes=effective_minutes,
            late_minutes_raw=max(0, late_raw),
            late_minutes_normalized=max(0, late_normalized),
            early_leave_minutes_raw=max(0, early_leave),
            effective_start_after_end=start_after_end,
        )
