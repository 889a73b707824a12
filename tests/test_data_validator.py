from decimal import Decimal

import pytest

from data_manager.data_validator import (
    validate_catalog_ranges,
    validate_loan_product,
    validate_product_type,
)
from data_manager.schema import LoanProduct


class TestValidateLoanProduct:
    def test_valid(self):
        assert validate_loan_product("Inuka", 1000, 5000, 300) == (True, "")
        assert validate_loan_product("Fadhili", 10000.01)[0]

    @pytest.mark.parametrize("args", [
        ("", 1000, 5000),
        ("X", None, 5000),
        ("X", 0, 5000),
        ("X", 5000, 1000),
        ("X", 1000, "lots"),
        ("X", 1000, 5000, -1),
    ])
    def test_invalid(self, args):
        ok, msg = validate_loan_product(*args)
        assert not ok
        assert msg


class TestValidateProductType:
    def test_valid(self):
        assert validate_product_type("Inuka 4 Weeks", 4, 25, 500, "flat") == (True, "")
        assert validate_product_type("Fadhili 8 Weeks", 8, 50, 5, "percentage")[0]

    @pytest.mark.parametrize("args", [
        ("", 4, 25),
        ("T", 0, 25),
        ("T", 4.5, 25),
        ("T", "four", 25),
        ("T", 4, None),
        ("T", 4, -1),
        ("T", 4, 25, -5),
        ("T", 4, 25, 5, "tiered"),
    ])
    def test_invalid(self, args):
        ok, msg = validate_product_type(*args)
        assert not ok
        assert msg


def _p(name, low, high):
    return LoanProduct(name.lower(), name, Decimal(low), None if high is None else Decimal(high))


class TestValidateCatalogRanges:
    def test_contiguous(self):
        products = [_p("Kuza", "5000.01", "10000"), _p("Inuka", "1000", "5000"),
                    _p("Fadhili", "10000.01", None)]
        assert validate_catalog_ranges(products) == (True, "")

    def test_overlap(self):
        ok, msg = validate_catalog_ranges([_p("A", "1000", "5000"), _p("B", "5000", "9000")])
        assert not ok
        assert "overlaps" in msg

    def test_gap(self):
        ok, msg = validate_catalog_ranges([_p("A", "1000", "5000"), _p("B", "6000", "9000")])
        assert not ok
        assert "not covered" in msg

    def test_unbounded_not_last(self):
        ok, _ = validate_catalog_ranges([_p("A", "1000", None), _p("B", "6000", "9000")])
        assert not ok

    def test_empty(self):
        assert validate_catalog_ranges([]) == (True, "")
