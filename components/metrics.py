"""Metric card components"""
import streamlit as st

from data_manager.schema import PricingResult
from utils.formatters import fmt_amount, fmt_rate, fmt_weeks


def render_pricing_metrics(result: PricingResult, effective_rate: float):
    """Render the priced loan summary"""
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Principal", fmt_amount(result.principal))
    with c2:
        st.metric("Total payable", fmt_amount(result.total_payable))
    with c3:
        st.metric("Weekly installment", fmt_amount(result.weekly_installment))
    with c4:
        st.metric("Duration", fmt_weeks(result.duration_weeks))

    c5, c6, c7, c8 = st.columns(4)
    with c5:
        st.metric("Interest", fmt_amount(result.total_interest), fmt_rate(result.interest_rate), delta_color="off")
    with c6:
        st.metric("Processing fee", fmt_amount(result.processing_fee))
    with c7:
        st.metric("Registration fee", fmt_amount(result.registration_fee))
    with c8:
        st.metric("Effective annual rate", fmt_rate(effective_rate))
