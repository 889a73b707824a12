"""Loan Booking Console - entry point"""
import streamlit as st

from config.settings import PAGE_TITLE, PAGE_ICON, LAYOUT, EXCEL_FILE
from data_manager.excel_handler import init_excel
from utils.log import configure_logging

st.set_page_config(
    page_title=PAGE_TITLE,
    page_icon=PAGE_ICON,
    layout=LAYOUT,
    initial_sidebar_state="expanded",
)

configure_logging()
init_excel()

st.title(f"{PAGE_ICON} {PAGE_TITLE}")

st.markdown("""
Price and book weekly loans against a customer's approved limit.

### Pages

| Page | What it does |
|------|--------------|
| 💳 **Loan booking** | Enter an amount, pick a product type, review the schedule, book |
| 🗂️ **Product catalog** | Manage loan products (amount ranges) and their product types |
| 📒 **Booked loans** | Loans booked from this console |

### Pricing rules

- The product is chosen by amount range; the product type sets duration, interest and processing fee
- Interest is flat: a percentage of principal over the whole duration
- Processing and registration fees are billed with week 1 and are not spread over the installments
- The registration fee applies only to customers without a disbursed or pending-disbursement loan
- The last installment absorbs rounding so the schedule adds up to the total payable
""")

with st.sidebar:
    st.markdown("### About")
    st.markdown(f"Data is stored in `{EXCEL_FILE.name}`")
