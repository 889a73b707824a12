"""Product type comparison for one amount"""
from datetime import date
from decimal import Decimal
from typing import Optional

import pandas as pd

from config.constants import TIER_COMPARISON_COLUMNS
from core.calculator import calc_effective_rate, price
from core.catalog import ProductCatalog
from core.classifier import classify
from core.schedule_generator import generate


def compare_tiers(
    principal: Decimal,
    catalog: ProductCatalog,
    prior_loans=(),
    start_date: Optional[date] = None,
) -> pd.DataFrame:
    """
    Price every product type of the product matching `principal`.
    Returns one row per type, shortest duration first; empty when no product
    or no type matches.
    """
    product = catalog.match_product(principal)
    if product is None:
        return pd.DataFrame(columns=TIER_COMPARISON_COLUMNS)

    customer_class = classify(prior_loans)
    start_date = start_date or date.today()
    rows = []
    for product_type in catalog.list_types_for_product(product.product_id):
        result = price(principal, product, product_type, customer_class)
        schedule = generate(result, start_date)
        rows.append({
            "type_id": product_type.type_id,
            "product_type": product_type.product_type,
            "duration_weeks": product_type.duration_weeks,
            "interest_rate": float(result.interest_rate),
            "processing_fee": float(result.processing_fee),
            "registration_fee": float(result.registration_fee),
            "total_interest": float(result.total_interest),
            "total_payable": float(result.total_payable),
            "weekly_installment": float(result.weekly_installment),
            "effective_rate": calc_effective_rate(result, schedule),
        })

    return pd.DataFrame(rows, columns=TIER_COMPARISON_COLUMNS)
