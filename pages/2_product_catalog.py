"""Product catalog"""
import streamlit as st

from config.constants import ProcessingFeeMode
from data_manager.data_validator import (
    validate_catalog_ranges, validate_loan_product, validate_product_type,
)
from data_manager.excel_handler import (
    delete_product, delete_product_type, get_all_products, get_product_types,
    init_excel, load_catalog, save_product, save_product_type,
)
from components.forms import render_product_form, render_product_type_form
from utils.formatters import fmt_amount, fmt_range, fmt_rate, fmt_weeks
from utils.id_generator import generate_product_id, generate_type_id

st.set_page_config(page_title="Product catalog", page_icon="🗂️", layout="wide")
st.title("🗂️ Product catalog")

init_excel()

ok, msg = validate_catalog_ranges(load_catalog().products)
if not ok:
    st.warning(f"Catalog ranges need attention: {msg}")

tab_list, tab_new = st.tabs(["Products", "New product"])

with tab_list:
    products = get_all_products()
    if products.empty:
        st.info("No loan products yet.")
    for _, product in products.iterrows():
        pid = str(product["product_id"])
        max_amount = None if product.isna()["max_amount"] else product["max_amount"]
        with st.container(border=True):
            col_info, col_actions = st.columns([4, 1])
            with col_info:
                st.subheader(product["product_name"])
                st.write(f"**Range:** {fmt_range(product['min_amount'], max_amount)}")
                if not product.isna()["registration_fee"]:
                    st.write(f"**Registration fee:** {fmt_amount(product['registration_fee'])}")
            with col_actions:
                st.button("Delete", key=f"del_{pid}", type="secondary",
                          on_click=lambda p=pid: delete_product(p))

            types = get_product_types(pid)
            for _, t in types.iterrows():
                fee = (fmt_rate(t["processing_fee_rate"])
                       if t["processing_fee_mode"] == ProcessingFeeMode.PERCENTAGE.value
                       else fmt_amount(t["processing_fee_rate"]))
                c1, c2 = st.columns([4, 1])
                c1.write(f"{t['product_type']}: {fmt_weeks(t['duration_weeks'])}, "
                         f"interest {fmt_rate(t['interest_rate'])}, processing fee {fee}")
                c2.button("Remove", key=f"del_type_{t['type_id']}",
                          on_click=lambda tid=str(t["type_id"]): delete_product_type(tid))

            with st.expander("Edit product"):
                edited = render_product_form(key_prefix=f"edit_{pid}", product=product)
            if edited is not None:
                ok, msg = validate_loan_product(edited["product_name"], edited["min_amount"],
                                                edited["max_amount"], edited["registration_fee"])
                if not ok:
                    st.error(msg)
                else:
                    save_product({"product_id": pid, **edited})
                    st.success(f"Product {edited['product_name']} updated")
                    st.rerun()

            new_type = render_product_type_form(product["product_name"], key_prefix=f"type_{pid}")
            if new_type is not None:
                ok, msg = validate_product_type(
                    new_type["product_type"], new_type["duration_weeks"], new_type["interest_rate"],
                    new_type["processing_fee_rate"], new_type["processing_fee_mode"],
                    new_type["registration_fee"],
                )
                if not ok:
                    st.error(msg)
                else:
                    save_product_type({"type_id": generate_type_id(), "product_id": pid, **new_type})
                    st.success("Product type added")
                    st.rerun()

with tab_new:
    data = render_product_form()
    if data is not None:
        ok, msg = validate_loan_product(data["product_name"], data["min_amount"],
                                        data["max_amount"], data["registration_fee"])
        if not ok:
            st.error(msg)
        else:
            save_product({"product_id": generate_product_id(), **data})
            st.success(f"Product {data['product_name']} created")
            st.rerun()
