"""Command line tests against a throwaway workbook"""
import pytest
from click.testing import CliRunner

from cli import cli
from data_manager.excel_handler import get_booked_loans, get_product_by_id, init_excel


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "loan_book.xlsx"
    init_excel(path)
    return path


@pytest.fixture
def run(data_file):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(cli, ['--data-file', str(data_file), *args])
    return _run


class TestQuote:
    def test_priced(self, run):
        result = run('quote', '--amount', '3000', '--approved-limit', '15000',
                     '--start-date', '2026-01-05')
        assert result.exit_code == 0
        assert "Product: Inuka" in result.output
        assert "Total payable: KES 3,750.00" in result.output
        assert "Registration fee: KES 300.00" in result.output
        assert "Ready to book" in result.output

    def test_over_limit(self, run):
        result = run('quote', '--amount', '20000', '--approved-limit', '15000')
        assert result.exit_code == 0
        assert "Error: Amount exceeds approved limit of KES 15,000.00" in result.output
        assert "Not bookable" in result.output

    def test_nothing_entered(self, run):
        result = run('quote', '--amount', '', '--approved-limit', '15000')
        assert "No amount entered." in result.output

    def test_repeat_customer(self, run):
        run('add-customer-loan', '--customer-id', 'C-9', '--loan-id', 'L-1', '--status', 'disbursed')
        result = run('quote', '--amount', '3000', '--approved-limit', '15000', '--customer-id', 'C-9')
        assert "Customer: Repeat" in result.output
        assert "Registration fee: KES 0.00" in result.output


class TestSchedule:
    def test_csv(self, run):
        result = run('schedule', '--amount', '3000', '--approved-limit', '15000',
                     '--weeks', '6', '--start-date', '2026-01-05')
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0] == "week,due_date,principal,interest,processing_fee,registration_fee,total_due"
        assert len(lines) == 7
        assert lines[1].startswith("1,2026-01-12,")

    def test_default_duration_from_config(self, run):
        run('set-config', '--key', 'default_duration_weeks', '--value', '6')
        result = run('schedule', '--amount', '3000', '--approved-limit', '15000',
                     '--start-date', '2026-01-05')
        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 7

    def test_unpriceable(self, run):
        result = run('schedule', '--amount', 'abc', '--approved-limit', '15000')
        assert result.exit_code != 0
        assert "valid loan amount" in result.output


class TestBookLoan:
    def test_books_and_persists(self, run, data_file):
        result = run('book-loan', '--amount', '3000', '--approved-limit', '15000',
                     '--customer-id', 'C-1', '--booked-by', 'officer-7')
        assert result.exit_code == 0, result.output
        assert "booked: KES 3,750.00 over 4 Weeks" in result.output
        loans = get_booked_loans(data_file)
        assert len(loans) == 1
        assert loans.iloc[0]["status"] == "bm_review"

    def test_requires_customer(self, run):
        result = run('book-loan', '--amount', '3000', '--approved-limit', '15000')
        assert result.exit_code != 0
        assert "--customer-id" in result.output

    def test_blocked(self, run, data_file):
        result = run('book-loan', '--amount', '500', '--approved-limit', '15000', '--customer-id', 'C-1')
        assert result.exit_code != 0
        assert "Loan cannot be booked" in result.output
        assert get_booked_loans(data_file).empty


class TestCatalogCommands:
    def test_add_product(self, run, data_file):
        result = run('add-product', '--product-id', 'mega', '--product-name', 'Mega',
                     '--min-amount', '200000', '--max-amount', '500000')
        assert result.exit_code == 0
        assert "saved" in result.output
        # fadhili is unbounded, so mega sits above it
        assert "Warning:" in result.output
        assert get_product_by_id("mega", data_file) is not None

    def test_add_product_invalid(self, run):
        result = run('add-product', '--product-name', 'Bad', '--min-amount', '5000', '--max-amount', '1000')
        assert result.exit_code != 0
        assert "Maximum amount" in result.output

    def test_add_type_unknown_product(self, run):
        result = run('add-type', '--product-id', 'nope', '--product-type', 'X',
                     '--duration-weeks', '4', '--interest-rate', '10')
        assert result.exit_code != 0
        assert "not found" in result.output

    def test_delete_product(self, run, data_file):
        assert run('delete-product', '--product-id', 'kuza').exit_code == 0
        assert get_product_by_id("kuza", data_file) is None
        assert run('delete-product', '--product-id', 'kuza').exit_code != 0

    def test_compare_tiers(self, run):
        result = run('compare-tiers', '--amount', '3000')
        assert result.exit_code == 0
        assert "inuka-4w" in result.output
        assert "inuka-8w" in result.output

    def test_set_config(self, run):
        run('set-config', '--key', 'currency', '--value', 'UGX')
        result = run('list-configs')
        assert "UGX" in result.output
