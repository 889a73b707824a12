"""Weekly schedule tests"""
from datetime import timedelta
from decimal import Decimal

import pytest

from config.constants import CustomerClass, REPAYMENT_SCHEDULE_COLUMNS
from core.calculator import price
from core.schedule_generator import generate, schedule_to_frame
from data_manager.schema import LoanProduct, ProductType


class TestScenario:
    def test_four_equal_installments(self, product, four_week_type, start_date):
        r = price(Decimal("10000"), product, four_week_type, CustomerClass.NEW)
        sch = generate(r, start_date)
        assert len(sch) == 4
        assert [e.total_due for e in sch] == [Decimal("2750.00")] * 4
        assert [e.interest_portion for e in sch] == [Decimal("250.00")] * 4
        assert sum(e.principal_portion for e in sch) == Decimal("10000.00")

    def test_fees_on_week_one_only(self, product, four_week_type, start_date):
        r = price(Decimal("10000"), product, four_week_type, CustomerClass.NEW)
        sch = generate(r, start_date)
        assert sch[0].processing_fee_due == Decimal("200.00")
        assert sch[0].registration_fee_due == Decimal("200.00")
        for e in sch[1:]:
            assert e.processing_fee_due == 0
            assert e.registration_fee_due == 0

    def test_fees_not_added_to_installment(self, product, four_week_type, start_date):
        r = price(Decimal("10000"), product, four_week_type, CustomerClass.NEW)
        assert generate(r, start_date)[0].total_due == r.weekly_installment

    def test_repeat_customer_no_registration_fee(self, product, four_week_type, start_date):
        r = price(Decimal("10000"), product, four_week_type, CustomerClass.REPEAT)
        sch = generate(r, start_date)
        assert sch[0].registration_fee_due == 0
        assert sch[0].processing_fee_due == Decimal("200.00")


class TestDueDates:
    def test_week_one_is_seven_days_after_start(self, product, four_week_type, start_date):
        r = price(Decimal("10000"), product, four_week_type, CustomerClass.NEW)
        sch = generate(r, start_date)
        assert sch[0].due_date == start_date + timedelta(days=7)
        assert sch[-1].due_date == start_date + timedelta(days=28)

    def test_strictly_increasing(self, product, start_date):
        eight = ProductType("t8", "std", "Eight", 8, Decimal("50"))
        sch = generate(price(Decimal("4321"), product, eight, CustomerClass.NEW), start_date)
        dates = [e.due_date for e in sch]
        assert all(a < b for a, b in zip(dates, dates[1:]))
        assert [e.week_number for e in sch] == list(range(1, 9))


class TestReconciliation:
    def test_remainder_in_final_week(self, product, start_date):
        three = ProductType("t3", "std", "Three", 3, Decimal("10"))
        sch = generate(price(Decimal("1000"), product, three, CustomerClass.REPEAT), start_date)
        assert [e.total_due for e in sch] == [Decimal("366.67"), Decimal("366.67"), Decimal("366.66")]
        assert [e.interest_portion for e in sch] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]

    @pytest.mark.parametrize("weeks,rate", [(3, "10"), (4, "25"), (5, "31.25"), (7, "43.75"), (8, "50")])
    def test_totals_exact_across_amounts(self, product, start_date, weeks, rate):
        product_type = ProductType("t", "std", "T", weeks, Decimal(rate), Decimal("3.3"), "percentage")
        principal = Decimal("1000")
        while principal <= Decimal("50000"):
            r = price(principal, product, product_type, CustomerClass.NEW)
            sch = generate(r, start_date)
            assert len(sch) == weeks
            assert sum(e.total_due for e in sch) == r.total_payable
            assert sum(e.interest_portion for e in sch) == r.total_interest
            assert sum(e.principal_portion for e in sch) == principal
            assert abs(sch[-1].total_due - r.weekly_installment) < Decimal("0.01") * weeks
            principal += Decimal("1234.57")

    def test_zero_duration_gives_empty_schedule(self, product, four_week_type, start_date):
        r = price(Decimal("10000"), product, four_week_type, CustomerClass.NEW)
        r.duration_weeks = 0
        assert generate(r, start_date) == []


class TestScheduleFrame:
    def test_columns_and_values(self, product, four_week_type, start_date):
        r = price(Decimal("10000"), product, four_week_type, CustomerClass.NEW)
        df = schedule_to_frame(generate(r, start_date))
        assert list(df.columns) == REPAYMENT_SCHEDULE_COLUMNS
        assert df["total_due"].sum() == pytest.approx(11000.0)
        assert df.iloc[0]["due_date"] == "2026-01-12"
        assert df.iloc[0]["processing_fee"] == 200.0

    def test_empty(self):
        assert schedule_to_frame([]).empty
