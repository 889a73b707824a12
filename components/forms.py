"""Form components"""
from typing import Optional

import pandas as pd
import streamlit as st

from config.constants import ProcessingFeeMode


def _value_or(row: Optional[pd.Series], key: str, default):
    if row is None or key not in row or pd.isna(row[key]):
        return default
    return row[key]


def render_product_form(
    key_prefix: str = "new_product",
    product: Optional[pd.Series] = None,
) -> dict | None:
    """Render the loan product create/edit form; returns the data on submit.

    Args:
        key_prefix: widget key prefix
        product: the existing product row when editing
    """
    is_edit = product is not None
    st.subheader("Edit loan product" if is_edit else "New loan product")

    with st.form(f"{key_prefix}_form"):
        product_name = st.text_input("Product name", value=_value_or(product, "product_name", ""),
                                     key=f"{key_prefix}_name")
        product_code = st.text_input("Product code", value=_value_or(product, "product_code", ""),
                                     key=f"{key_prefix}_code")
        c1, c2, c3 = st.columns(3)
        with c1:
            min_amount = st.number_input(
                "Minimum amount", min_value=0.0, step=500.0,
                value=float(_value_or(product, "min_amount", 1000.0)), key=f"{key_prefix}_min")
        with c2:
            unbounded = st.checkbox("No upper bound", value=_value_or(product, "max_amount", None) is None,
                                    key=f"{key_prefix}_unbounded")
            max_amount = st.number_input(
                "Maximum amount", min_value=0.0, step=500.0,
                value=float(_value_or(product, "max_amount", 5000.0)), key=f"{key_prefix}_max")
        with c3:
            registration_fee = st.number_input(
                "Registration fee (new customers)", min_value=0.0, step=50.0,
                value=float(_value_or(product, "registration_fee", 0.0)), key=f"{key_prefix}_reg")

        submitted = st.form_submit_button("Save changes" if is_edit else "Create product",
                                          width='stretch', type="primary")
        if submitted:
            return {
                "product_name": product_name,
                "product_code": product_code,
                "min_amount": min_amount,
                "max_amount": None if unbounded else max_amount,
                "registration_fee": registration_fee,
            }
    return None


def render_product_type_form(product_name: str, key_prefix: str = "new_type") -> dict | None:
    """Render the product type form for one product."""
    with st.form(f"{key_prefix}_form"):
        st.subheader(f"New product type for {product_name}")
        c1, c2 = st.columns(2)
        with c1:
            duration_weeks = st.number_input("Duration (weeks)", min_value=1, max_value=104, value=4,
                                             key=f"{key_prefix}_weeks")
        with c2:
            interest_rate = st.number_input("Interest over the duration (%)", min_value=0.0,
                                            value=25.0, step=0.25, format="%.2f",
                                            key=f"{key_prefix}_rate")
        product_type = st.text_input("Name", value=f"{product_name} {duration_weeks} Weeks",
                                     key=f"{key_prefix}_name")
        c1, c2, c3 = st.columns(3)
        with c1:
            processing_fee_mode = st.selectbox(
                "Processing fee mode",
                options=[m.value for m in ProcessingFeeMode],
                format_func=lambda x: ProcessingFeeMode(x).label,
                key=f"{key_prefix}_mode",
            )
        with c2:
            processing_fee_rate = st.number_input("Processing fee rate / amount", min_value=0.0,
                                                  value=0.0, step=50.0, key=f"{key_prefix}_fee")
        with c3:
            penalty_rate = st.number_input("Penalty rate (%)", min_value=0.0, value=0.0,
                                           step=0.5, key=f"{key_prefix}_penalty")

        if st.form_submit_button("Add product type", width='stretch'):
            return {
                "product_type": product_type,
                "duration_weeks": int(duration_weeks),
                "interest_rate": interest_rate,
                "processing_fee_mode": processing_fee_mode,
                "processing_fee_rate": processing_fee_rate,
                "registration_fee": 0.0,
                "penalty_rate": penalty_rate,
            }
    return None
