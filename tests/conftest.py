import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

# make the project root importable
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config.constants import ProcessingFeeMode  # noqa: E402
from core.catalog import ProductCatalog  # noqa: E402
from data_manager.schema import LoanProduct, ProductType  # noqa: E402


@pytest.fixture
def start_date():
    return date(2026, 1, 5)


@pytest.fixture
def product():
    return LoanProduct(
        product_id="std", product_name="Standard",
        min_amount=Decimal("1000"), max_amount=Decimal("50000"),
        registration_fee=Decimal("200"),
    )


@pytest.fixture
def four_week_type():
    return ProductType(
        type_id="std-4w", product_id="std", product_type="Standard 4 Weeks",
        duration_weeks=4, interest_rate=Decimal("10"),
        processing_fee_rate=Decimal("2"),
        processing_fee_mode=ProcessingFeeMode.PERCENTAGE.value,
    )


@pytest.fixture
def catalog(product, four_week_type):
    """One product covering 1,000-50,000 with a single 4 week type."""
    return ProductCatalog([product], [four_week_type])


@pytest.fixture
def tiered_catalog():
    """Small (1,000-5,000) with 4/6/8 weeks, Large (5,000.01+) with 5/8 weeks."""
    products = [
        LoanProduct("small", "Small", Decimal("1000"), Decimal("5000"), Decimal("300")),
        LoanProduct("large", "Large", Decimal("5000.01"), None, Decimal("300")),
    ]
    types = [
        ProductType("small-8w", "small", "Small 8 Weeks", 8, Decimal("50"), Decimal("500")),
        ProductType("small-4w", "small", "Small 4 Weeks", 4, Decimal("25"), Decimal("500")),
        ProductType("small-6w", "small", "Small 6 Weeks", 6, Decimal("37.5"), Decimal("500")),
        ProductType("large-8w", "large", "Large 8 Weeks", 8, Decimal("50"), Decimal("5"),
                    ProcessingFeeMode.PERCENTAGE.value),
        ProductType("large-5w", "large", "Large 5 Weeks", 5, Decimal("31.25"), Decimal("5"),
                    ProcessingFeeMode.PERCENTAGE.value),
    ]
    return ProductCatalog(products, types)
