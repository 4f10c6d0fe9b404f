from epr_attendance.payroll.calculator.fund_calculator import FUND_POLICY_DESCRIPTION, MonthlyFundPolicy
from epr_attendance.payroll.model import PeriodRecord


def _record(**kwargs) -> PeriodRecord:
    return PeriodRecord(person_id=1, period_from="2026-02-01", period_to="2026-02-28", **kwargs)


def test_regular_pay_never_exceeds_capped_fund():
    out = MonthlyFundPolicy().reconcile(
        _record(
            payable_days_count=2,
            raw_on_site_minutes_sum=600,
            raw_wfh_minutes_sum=500,
            pay_sick_70_minutes=240,
            total_late_debt_minutes=100,
        )
    )

    fund = 2 * 480
    assert out.pay_regular_minutes + out.pay_wfh_regular_minutes <= fund - out.nonwork_paid_minutes
    assert out.pay_regular_minutes == 600
    assert out.pay_wfh_regular_minutes == 120
    assert out.pay_overtime_minutes == 280
    assert out.uncovered_debt_minutes == 0
    assert out.expected_paid_minutes == fund
    assert out.total_paid_minutes_base == 960
    assert out.paid_excess_minutes == 0
    assert out.paid_shortage_minutes == 0
    assert out.settlement_applied is True
    assert out.overtime_policy == FUND_POLICY_DESCRIPTION


def test_debt_never_reduces_premium():
    out = MonthlyFundPolicy().reconcile(
        _record(
            payable_days_count=1,
            raw_on_site_minutes_sum=400,
            total_late_debt_minutes=200,
            pay_premium_150_minutes=300,
        )
    )

    assert out.pay_premium_150_minutes == 300
    assert out.pay_overtime_minutes == 0
    assert out.uncovered_debt_minutes == 200
    assert out.overtime_payable_150_minutes == 300
    assert out.paid_shortage_minutes == 80


def test_non_work_paid_beyond_fund_is_reported_as_excess():
    out = MonthlyFundPolicy().reconcile(
        _record(payable_days_count=1, raw_on_site_minutes_sum=120, pay_holiday_minutes=480, pay_sick_70_minutes=120)
    )

    assert out.pay_regular_minutes == 0
    assert out.pay_overtime_minutes == 120
    assert out.paid_excess_minutes == 120


def test_reconcile_returns_new_record():
    record = _record(payable_days_count=1, raw_on_site_minutes_sum=480)
    out = MonthlyFundPolicy().reconcile(record)

    assert record.pay_regular_minutes == 0
    assert out.pay_regular_minutes == 480
