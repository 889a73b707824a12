"""Formatted table components"""
import pandas as pd
import streamlit as st


def render_schedule_table(schedule: pd.DataFrame):
    """Render the weekly repayment schedule"""
    if schedule.empty:
        st.info("No repayment schedule yet")
        return

    display_df = schedule.copy()

    col_map = {
        "week": "Week",
        "due_date": "Due date",
        "principal": "Principal",
        "interest": "Interest",
        "processing_fee": "Processing fee",
        "registration_fee": "Registration fee",
        "total_due": "Installment",
    }

    display_cols = [c for c in col_map if c in display_df.columns]
    display_df = display_df[display_cols].rename(columns=col_map)

    money_cols = ["Principal", "Interest", "Processing fee", "Registration fee", "Installment"]
    for col in money_cols:
        if col in display_df.columns:
            display_df[col] = display_df[col].apply(lambda x: f"{x:,.2f}")

    st.dataframe(display_df, width='stretch', hide_index=True)


def render_tier_comparison_table(comparison_df: pd.DataFrame):
    """Render the product type comparison"""
    if comparison_df.empty:
        st.info("No product types to compare")
        return

    display = comparison_df.drop(columns=["type_id"]).rename(columns={
        "product_type": "Product type",
        "duration_weeks": "Weeks",
        "interest_rate": "Interest (%)",
        "processing_fee": "Processing fee",
        "registration_fee": "Registration fee",
        "total_interest": "Total interest",
        "total_payable": "Total payable",
        "weekly_installment": "Weekly installment",
        "effective_rate": "Effective annual rate (%)",
    })
    money_cols = ["Processing fee", "Registration fee", "Total interest", "Total payable", "Weekly installment"]
    for col in money_cols:
        display[col] = display[col].apply(lambda x: f"{x:,.2f}")

    st.dataframe(display, width='stretch', hide_index=True)
