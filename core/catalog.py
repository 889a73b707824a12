"""Loan product catalog: amount-range matching and product type lookup."""
import logging
from decimal import Decimal
from typing import Iterable, List, Optional

import pandas as pd

from config.constants import ProcessingFeeMode
from data_manager.schema import LoanProduct, ProductType
from utils.money import to_decimal

logger = logging.getLogger(__name__)


class ProductCatalog:
    """Read-only view of one tenant's products and their product types.

    Built per invocation from already-fetched rows; nothing here mutates.
    """

    def __init__(self, products: Iterable[LoanProduct], product_types: Iterable[ProductType]):
        self._products = tuple(products)
        self._types = tuple(product_types)

    @property
    def products(self) -> tuple:
        return self._products

    @property
    def product_types(self) -> tuple:
        return self._types

    def match_product(self, principal: Decimal) -> Optional[LoanProduct]:
        """The product whose inclusive [min, max] range holds the principal."""
        if principal is None or principal < 0:
            return None
        for product in self._products:
            if product.contains(principal):
                return product
        logger.debug("no product covers amount %s", principal)
        return None

    def list_types_for_product(self, product_id: str) -> List[ProductType]:
        """Product types of a product, shortest duration first.

        Ties on duration keep catalog order (sorted() is stable). Types without
        a positive duration cannot be priced and are left out.
        """
        owned = [t for t in self._types
                 if t.product_id == product_id and t.duration_weeks > 0]
        return sorted(owned, key=lambda t: t.duration_weeks)

    def get_product(self, product_id: str) -> Optional[LoanProduct]:
        for product in self._products:
            if product.product_id == product_id:
                return product
        return None

    def get_type(self, type_id: str) -> Optional[ProductType]:
        for product_type in self._types:
            if product_type.type_id == type_id:
                return product_type
        return None

    @classmethod
    def from_frames(cls, products_df: pd.DataFrame, types_df: pd.DataFrame) -> "ProductCatalog":
        """Build a catalog from the workbook sheets, row order = catalog order."""
        products = [_product_from_row(row) for _, row in products_df.iterrows()] \
            if not products_df.empty else []
        types = [_type_from_row(row) for _, row in types_df.iterrows()] \
            if not types_df.empty else []
        return cls(products, types)


def _text(value) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value)


def _product_from_row(row: pd.Series) -> LoanProduct:
    return LoanProduct(
        product_id=_text(row["product_id"]),
        product_name=_text(row["product_name"]),
        min_amount=to_decimal(row["min_amount"], Decimal("0")),
        max_amount=to_decimal(row.get("max_amount")),
        registration_fee=to_decimal(row.get("registration_fee")),
        product_code=_text(row.get("product_code")),
    )


def _type_from_row(row: pd.Series) -> ProductType:
    mode = _text(row.get("processing_fee_mode")) or ProcessingFeeMode.FLAT.value
    return ProductType(
        type_id=_text(row["type_id"]),
        product_id=_text(row["product_id"]),
        product_type=_text(row["product_type"]),
        duration_weeks=int(row["duration_weeks"]),
        interest_rate=to_decimal(row["interest_rate"], Decimal("0")),
        processing_fee_rate=to_decimal(row.get("processing_fee_rate"), Decimal("0")),
        processing_fee_mode=mode,
        registration_fee=to_decimal(row.get("registration_fee"), Decimal("0")),
        penalty_rate=to_decimal(row.get("penalty_rate"), Decimal("0")),
    )
