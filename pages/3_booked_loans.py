"""Booked loans"""
import streamlit as st

from data_manager.excel_handler import get_booked_loans, init_excel
from utils.formatters import fmt_amount

st.set_page_config(page_title="Booked loans", page_icon="📒", layout="wide")
st.title("📒 Booked loans")

init_excel()

loans = get_booked_loans()
if loans.empty:
    st.info("No loans booked yet.")
    st.stop()

c1, c2, c3 = st.columns(3)
c1.metric("Loans", len(loans))
c2.metric("Principal booked", fmt_amount(loans["scored_amount"].sum()))
c3.metric("Total payable", fmt_amount(loans["total_payable"].sum()))

st.dataframe(loans, width='stretch', hide_index=True)
