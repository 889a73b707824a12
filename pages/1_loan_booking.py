"""Loan booking"""
from decimal import Decimal

import streamlit as st

from config.constants import ErrorCode
from config.settings import DEFAULT_MIN_BOOKABLE_AMOUNT, DEFAULT_DURATION_WEEKS
from core.booking import BookingContext, build_loan_record
from core.calculator import calc_effective_rate
from core.comparison import compare_tiers
from core.engine import PricingEngine
from core.exceptions import BookingBlockedError
from core.schedule_generator import schedule_to_frame
from data_manager.excel_handler import (
    get_config_float, get_customer_loans, init_excel, load_catalog, save_loan,
)
from components.charts import create_cost_pie, create_schedule_bar
from components.metrics import render_pricing_metrics
from components.tables import render_schedule_table, render_tier_comparison_table
from utils.formatters import fmt_amount, fmt_weeks

st.set_page_config(page_title="Loan booking", page_icon="💳", layout="wide")
st.title("💳 Loan booking")

init_excel()

c1, c2, c3 = st.columns(3)
with c1:
    customer_id = st.text_input("Customer ID", key="booking_customer")
with c2:
    approved_limit = st.number_input("Approved limit", min_value=0.0, value=10000.0, step=500.0,
                                     key="booking_limit")
with c3:
    booked_by = st.text_input("Booked by", key="booking_officer")

if not customer_id:
    st.info("Enter a customer ID to start booking.")
    st.stop()

# a new customer or limit starts a new booking form
engine_key = (customer_id, approved_limit)
if st.session_state.get("booking_engine_key") != engine_key:
    st.session_state["booking_engine_key"] = engine_key
    st.session_state["booking_engine"] = PricingEngine(
        catalog=load_catalog(),
        approved_limit=Decimal(str(approved_limit)),
        prior_loans=get_customer_loans(customer_id),
        min_amount=get_config_float("min_bookable_amount", DEFAULT_MIN_BOOKABLE_AMOUNT),
        duration_weeks=int(get_config_float("default_duration_weeks", DEFAULT_DURATION_WEEKS)),
    )
    st.session_state["booking_amount"] = ""

engine: PricingEngine = st.session_state["booking_engine"]


def _on_amount_change():
    quote = engine.set_principal(st.session_state["booking_amount"])
    if quote is not None and ErrorCode.EXCEEDS_APPROVED_LIMIT in quote.errors:
        st.session_state["booking_amount"] = ""


def _on_type_change():
    engine.select_type(st.session_state["booking_type"])


st.text_input("Loan amount", key="booking_amount", on_change=_on_amount_change,
              placeholder=f"Up to {fmt_amount(approved_limit)}")

warning = engine.active_warning()
if warning is not None:
    st.error(warning.message)

quote = engine.quote
if quote is None:
    st.stop()

for message in quote.messages():
    st.warning(message)

if not quote.result.is_priced:
    st.stop()

result = quote.result
type_ids = [t.type_id for t in quote.available_types]
type_names = {t.type_id: f"{t.product_type} ({fmt_weeks(t.duration_weeks)})" for t in quote.available_types}
st.session_state["booking_type"] = result.type_id

c1, c2 = st.columns([2, 1])
with c1:
    st.selectbox("Product type", options=type_ids, format_func=lambda x: type_names[x],
                 key="booking_type", on_change=_on_type_change)
with c2:
    st.write(f"**Product:** {result.product_name} ({result.product_range})")
    st.write(f"**Customer:** {result.customer_class.label}")

effective_rate = calc_effective_rate(result, quote.schedule)
render_pricing_metrics(result, effective_rate)

st.divider()

schedule_df = schedule_to_frame(quote.schedule)
col1, col2 = st.columns([2, 1])
with col1:
    st.plotly_chart(create_schedule_bar(schedule_df), width='stretch')
with col2:
    fees = float(result.processing_fee + result.registration_fee)
    st.plotly_chart(create_cost_pie(float(result.principal), float(result.total_interest), fees),
                    width='stretch')

st.subheader("Repayment schedule")
render_schedule_table(schedule_df)

with st.expander("Compare product types"):
    render_tier_comparison_table(compare_tiers(result.principal, engine.catalog, engine.prior_loans))

st.divider()

if st.button("Book loan", type="primary", disabled=not quote.is_bookable):
    context = BookingContext(customer_id=customer_id, booked_by=booked_by or None)
    try:
        record = build_loan_record(quote, engine.approved_limit, context)
    except BookingBlockedError as e:
        st.error(str(e))
    else:
        save_loan(record)
        st.success(f"Loan {record['loan_id']} booked for review.")
        del st.session_state["booking_engine_key"]
