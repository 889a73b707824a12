"""Workbook store tests"""
from decimal import Decimal

import pytest

from config.constants import CustomerClass
from core.calculator import price
from core.classifier import classify
from core.exceptions import CatalogError
from data_manager.excel_handler import (
    delete_product,
    delete_product_type,
    get_all_products,
    get_booked_loans,
    get_config,
    get_config_float,
    get_customer_loans,
    get_product_by_id,
    get_product_types,
    init_excel,
    load_catalog,
    save_customer_loan,
    save_loan,
    save_product,
    save_product_type,
    set_config,
)


@pytest.fixture
def workbook(tmp_path):
    path = tmp_path / "loan_book.xlsx"
    init_excel(path)
    return path


class TestSeededCatalog:
    def test_products_by_amount(self, workbook):
        catalog = load_catalog(workbook)
        assert catalog.match_product(Decimal("3000")).product_id == "inuka"
        assert catalog.match_product(Decimal("10000")).product_id == "kuza"
        assert catalog.match_product(Decimal("10000.01")).product_id == "fadhili"
        assert catalog.match_product(Decimal("999.99")) is None

    def test_types_sorted_by_duration(self, workbook):
        types = load_catalog(workbook).list_types_for_product("kuza")
        assert [t.duration_weeks for t in types] == [4, 5, 6, 7, 8]

    def test_small_loan_pricing(self, workbook):
        catalog = load_catalog(workbook)
        r = price(Decimal("3000"), catalog.get_product("inuka"), catalog.get_type("inuka-4w"),
                  CustomerClass.NEW)
        assert r.total_interest == Decimal("750.00")
        assert r.processing_fee == Decimal("500.00")
        assert r.registration_fee == Decimal("300.00")
        assert r.total_payable == Decimal("3750.00")
        assert r.weekly_installment == Decimal("937.50")

    def test_large_loan_percentage_fee(self, workbook):
        catalog = load_catalog(workbook)
        r = price(Decimal("20000"), catalog.get_product("fadhili"), catalog.get_type("fadhili-4w"),
                  CustomerClass.REPEAT)
        assert r.processing_fee == Decimal("1000.00")
        assert r.registration_fee == Decimal("0")

    def test_init_does_not_overwrite(self, workbook):
        set_config("currency", "UGX", filepath=workbook)
        init_excel(workbook)
        assert get_config("currency", workbook) == "UGX"


class TestProductCrud:
    def test_add_product(self, workbook):
        save_product({"product_id": "mega", "product_name": "Mega", "min_amount": 50000.0,
                      "max_amount": 90000.0, "registration_fee": 0.0}, workbook)
        row = get_product_by_id("mega", workbook)
        assert row["product_name"] == "Mega"
        assert len(get_all_products(workbook)) == 4

    def test_update_product(self, workbook):
        save_product({"product_id": "inuka", "product_name": "Inuka Plus"}, workbook)
        assert get_product_by_id("inuka", workbook)["product_name"] == "Inuka Plus"
        assert len(get_all_products(workbook)) == 3

    def test_edit_form_payload(self, workbook):
        save_product({"product_id": "fadhili", "product_name": "Fadhili", "product_code": "FADHILI",
                      "min_amount": 10000.01, "max_amount": 50000.0, "registration_fee": 250.0}, workbook)
        catalog = load_catalog(workbook)
        fadhili = catalog.get_product("fadhili")
        assert fadhili.max_amount == Decimal("50000")
        assert fadhili.registration_fee == Decimal("250")
        assert catalog.match_product(Decimal("60000")) is None
        assert len(get_product_types("fadhili", workbook)) == 5

    def test_delete_cascades_to_types(self, workbook):
        delete_product("kuza", workbook)
        assert get_product_by_id("kuza", workbook) is None
        assert get_product_types("kuza", workbook).empty
        assert len(get_product_types("inuka", workbook)) == 5

    def test_delete_missing_product(self, workbook):
        with pytest.raises(CatalogError, match="not found"):
            delete_product("nope", workbook)

    def test_type_needs_product(self, workbook):
        with pytest.raises(CatalogError):
            save_product_type({"type_id": "x-4w", "product_id": "nope", "product_type": "X",
                               "duration_weeks": 4, "interest_rate": 10.0}, workbook)

    def test_add_and_remove_type(self, workbook):
        save_product_type({"type_id": "inuka-12w", "product_id": "inuka", "product_type": "Inuka 12 Weeks",
                           "duration_weeks": 12, "interest_rate": 75.0, "processing_fee_rate": 500.0,
                           "processing_fee_mode": "flat"}, workbook)
        assert load_catalog(workbook).get_type("inuka-12w").duration_weeks == 12
        delete_product_type("inuka-12w", workbook)
        assert load_catalog(workbook).get_type("inuka-12w") is None

    def test_delete_missing_type(self, workbook):
        with pytest.raises(CatalogError):
            delete_product_type("nope-4w", workbook)


class TestCustomerLoans:
    def test_unknown_customer_is_new(self, workbook):
        assert get_customer_loans("C-404", workbook) == []
        assert classify(get_customer_loans("C-404", workbook)) == CustomerClass.NEW

    def test_history_classifies(self, workbook):
        save_customer_loan({"loan_id": "L-1", "customer_id": "C-1", "status": "rejected"}, workbook)
        assert classify(get_customer_loans("C-1", workbook)) == CustomerClass.NEW
        save_customer_loan({"loan_id": "L-2", "customer_id": "C-1", "status": "disbursed"}, workbook)
        assert classify(get_customer_loans("C-1", workbook)) == CustomerClass.REPEAT

    def test_booked_loan_in_history(self, workbook):
        save_loan({"loan_id": "LN-1", "customer_id": "C-2", "status": "bm_review",
                   "scored_amount": 3000.0, "total_payable": 3750.0}, workbook)
        assert len(get_booked_loans(workbook)) == 1
        loans = get_customer_loans("C-2", workbook)
        assert [r.status for r in loans] == ["bm_review"]


class TestConfig:
    def test_seeded_values(self, workbook):
        assert get_config_float("min_bookable_amount", 0, workbook) == 1000.0
        assert get_config("currency", workbook) == "KES"

    def test_missing_and_bad_values(self, workbook):
        assert get_config("nope", workbook) is None
        assert get_config_float("nope", 7.0, workbook) == 7.0
        set_config("default_duration_weeks", "soon", filepath=workbook)
        assert get_config_float("default_duration_weeks", 4.0, workbook) == 4.0

    def test_set_new_key(self, workbook):
        set_config("grace_days", "3", "Grace period", workbook)
        assert get_config_float("grace_days", 0, workbook) == 3.0
