from __future__ import annotations

from dataclasses import replace

from ...core.constants import MINUTES_PER_WORKDAY
from ..model import PeriodRecord
from .base import ReconciliationPolicy

FUND_POLICY_DESCRIPTION = (
    "MONTHLY v4: fund=payable*480; regular<=fund-nonwork; premium always 150%; "
    "overtime=max(workday_excess-debt,0); debt hits only overtime"
)


class MonthlyFundPolicy(ReconciliationPolicy):
    """Fund rule: regular pay is capped by the monthly fund, debt only reduces overtime.

    The fund (payable days x 480) is first filled by non-work paid buckets, then by
    workday minutes (on-site first, WFH after). Workday minutes beyond the cap become
    overtime net of lateness debt. Premium minutes are never touched.
    """

    def __init__(self, minutes_per_workday: int = MINUTES_PER_WORKDAY):
        self._minutes_per_workday = int(minutes_per_workday)

    def reconcile(self, record: PeriodRecord) -> PeriodRecord:
        fund = max(0, record.payable_days_count) * self._minutes_per_workday

        raw_on_site = max(0, record.raw_on_site_minutes_sum)
        raw_wfh = max(0, record.raw_wfh_minutes_sum)
        raw_workday = raw_on_site + raw_wfh

        nonwork_paid = record.nonwork_paid_minutes
        regular_cap = max(0, fund - nonwork_paid)

        regular_total = min(raw_workday, regular_cap)
        regular_on_site = min(raw_on_site, regular_total)
        regular_wfh = min(raw_wfh, max(0, regular_total - regular_on_site))

        workday_excess = max(0, raw_workday - regular_cap)
        debt = max(0, record.total_late_debt_minutes)
        overtime = max(0, workday_excess - debt)
        uncovered_debt = max(0, debt - workday_excess)

        premium = max(0, record.pay_premium_150_minutes)
        base_paid = regular_on_site + regular_wfh + nonwork_paid

        return replace(
            record,
            pay_regular_minutes=regular_on_site,
            pay_wfh_regular_minutes=regular_wfh,
            pay_overtime_minutes=overtime,
            pay_premium_150_minutes=premium,
            uncovered_debt_minutes=uncovered_debt,
            overtime_payable_150_minutes=premium + overtime,
            expected_paid_minutes=fund,
            total_paid_minutes_base=base_paid,
            paid_excess_minutes=max(0, base_paid - fund),
            paid_shortage_minutes=max(0, fund - base_paid),
            settlement_applied=True,
            overtime_policy=FUND_POLICY_DESCRIPTION,
        )
