import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from config.constants import (
    SHEET_LOAN_PRODUCTS, SHEET_PRODUCT_TYPES, SHEET_CUSTOMER_LOANS,
    SHEET_LOANS, SHEET_CONFIG,
    LOAN_PRODUCTS_COLUMNS, PRODUCT_TYPES_COLUMNS, CUSTOMER_LOANS_COLUMNS,
    LOANS_COLUMNS, CONFIG_COLUMNS, ProcessingFeeMode,
)
from config.settings import (
    EXCEL_FILE, BACKUP_KEEP, CURRENCY,
    DEFAULT_MIN_BOOKABLE_AMOUNT, DEFAULT_DURATION_WEEKS,
)
from core.catalog import ProductCatalog
from core.exceptions import CatalogError
from data_manager.schema import CustomerLoanRecord

logger = logging.getLogger(__name__)


def _default_config_rows() -> List[dict]:
    now = datetime.now().isoformat()
    return [
        {"key": "min_bookable_amount", "value": str(DEFAULT_MIN_BOOKABLE_AMOUNT), "description": "Minimum bookable principal", "updated_at": now},
        {"key": "default_duration_weeks", "value": str(DEFAULT_DURATION_WEEKS), "description": "Duration held when a booking starts", "updated_at": now},
        {"key": "currency", "value": CURRENCY, "description": "Display currency", "updated_at": now},
    ]


def _default_catalog_rows():
    """Inuka / Kuza / Fadhili with 4-8 week types at 6.25% per week."""
    now = datetime.now().isoformat()
    products = [
        {"product_id": "inuka", "product_name": "Inuka", "product_code": "INUKA",
         "min_amount": 1000.0, "max_amount": 5000.0, "registration_fee": 300.0, "created_at": now},
        {"product_id": "kuza", "product_name": "Kuza", "product_code": "KUZA",
         "min_amount": 5000.01, "max_amount": 10000.0, "registration_fee": 300.0, "created_at": now},
        {"product_id": "fadhili", "product_name": "Fadhili", "product_code": "FADHILI",
         "min_amount": 10000.01, "max_amount": None, "registration_fee": 300.0, "created_at": now},
    ]
    types = []
    for product in products:
        pid = product["product_id"]
        # up to 10,000 pays a flat 500; above it 5% of principal
        if product["max_amount"] is None:
            fee_rate, fee_mode = 5.0, ProcessingFeeMode.PERCENTAGE.value
        else:
            fee_rate, fee_mode = 500.0, ProcessingFeeMode.FLAT.value
        for weeks in range(4, 9):
            types.append({
                "type_id": f"{pid}-{weeks}w", "product_id": pid,
                "product_type": f"{product['product_name']} {weeks} Weeks",
                "duration_weeks": weeks, "interest_rate": 6.25 * weeks,
                "processing_fee_rate": fee_rate, "processing_fee_mode": fee_mode,
                "registration_fee": 0.0, "penalty_rate": 0.0, "created_at": now,
            })
    return products, types


def init_excel(filepath: Path = EXCEL_FILE):
    """Create the workbook with every sheet, seeded with the default catalog."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    if filepath.exists():
        return

    products, types = _default_catalog_rows()
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        pd.DataFrame(products, columns=LOAN_PRODUCTS_COLUMNS).to_excel(
            writer, sheet_name=SHEET_LOAN_PRODUCTS, index=False)
        pd.DataFrame(types, columns=PRODUCT_TYPES_COLUMNS).to_excel(
            writer, sheet_name=SHEET_PRODUCT_TYPES, index=False)
        pd.DataFrame(columns=CUSTOMER_LOANS_COLUMNS).to_excel(
            writer, sheet_name=SHEET_CUSTOMER_LOANS, index=False)
        pd.DataFrame(columns=LOANS_COLUMNS).to_excel(
            writer, sheet_name=SHEET_LOANS, index=False)
        pd.DataFrame(_default_config_rows(), columns=CONFIG_COLUMNS).to_excel(
            writer, sheet_name=SHEET_CONFIG, index=False)
    logger.info("created workbook %s", filepath)


def backup_excel(filepath: Path = EXCEL_FILE):
    """Back up the workbook before a write, keeping the latest few copies."""
    if filepath.exists():
        ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_path = filepath.with_suffix(f".xlsx.bak_{ts}")
        shutil.copy2(filepath, backup_path)
        backups = sorted(filepath.parent.glob(f"{filepath.stem}.xlsx.bak_*"))
        for old in backups[:-BACKUP_KEEP]:
            old.unlink()


def read_sheet(sheet_name: str, filepath: Path = EXCEL_FILE, columns: Optional[list] = None) -> pd.DataFrame:
    """Read one sheet; a missing sheet reads as an empty frame."""
    init_excel(filepath)
    try:
        df = pd.read_excel(filepath, sheet_name=sheet_name, engine="openpyxl")
    except ValueError:
        df = pd.DataFrame(columns=columns or [])
    return df


def write_sheet(df: pd.DataFrame, sheet_name: str, filepath: Path = EXCEL_FILE):
    """Replace one sheet, keeping the others."""
    init_excel(filepath)
    backup_excel(filepath)

    with pd.ExcelWriter(filepath, engine="openpyxl", mode="a", if_sheet_exists="replace") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    logger.debug("wrote %d rows to %s", len(df), sheet_name)


def _append_row(sheet_name: str, columns: list, record: dict, filepath: Path):
    df = read_sheet(sheet_name, filepath, columns)
    new_row = pd.DataFrame([record], columns=columns)
    df = new_row if df.empty else pd.concat([df, new_row], ignore_index=True)
    write_sheet(df, sheet_name, filepath)


# ---- loan products ----

def get_all_products(filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    return read_sheet(SHEET_LOAN_PRODUCTS, filepath, LOAN_PRODUCTS_COLUMNS)


def get_product_by_id(product_id: str, filepath: Path = EXCEL_FILE) -> Optional[pd.Series]:
    df = get_all_products(filepath)
    match = df[df["product_id"].astype(str) == product_id]
    if match.empty:
        return None
    return match.iloc[0]


def save_product(product_dict: dict, filepath: Path = EXCEL_FILE):
    """Insert a product, or update the one with the same product_id."""
    df = get_all_products(filepath)
    existing = df[df["product_id"].astype(str) == product_dict["product_id"]]
    if not existing.empty:
        for col in product_dict:
            if col in df.columns and col != "created_at":
                df.loc[df["product_id"].astype(str) == product_dict["product_id"], col] = product_dict[col]
        write_sheet(df, SHEET_LOAN_PRODUCTS, filepath)
    else:
        record = {"created_at": datetime.now().isoformat(), **product_dict}
        _append_row(SHEET_LOAN_PRODUCTS, LOAN_PRODUCTS_COLUMNS, record, filepath)
    logger.info("saved loan product %s", product_dict["product_id"])


def delete_product(product_id: str, filepath: Path = EXCEL_FILE):
    """Delete a product and its product types."""
    if get_product_by_id(product_id, filepath) is None:
        raise CatalogError(f"Loan product '{product_id}' not found", {"product_id": product_id})
    df = get_all_products(filepath)
    write_sheet(df[df["product_id"].astype(str) != product_id], SHEET_LOAN_PRODUCTS, filepath)
    types = get_all_product_types(filepath)
    if "product_id" in types.columns:
        write_sheet(types[types["product_id"].astype(str) != product_id], SHEET_PRODUCT_TYPES, filepath)
    logger.info("deleted loan product %s", product_id)


# ---- product types ----

def get_all_product_types(filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    return read_sheet(SHEET_PRODUCT_TYPES, filepath, PRODUCT_TYPES_COLUMNS)


def get_product_types(product_id: str, filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    df = get_all_product_types(filepath)
    return df[df["product_id"].astype(str) == product_id].reset_index(drop=True)


def save_product_type(type_dict: dict, filepath: Path = EXCEL_FILE):
    """Insert or update a product type; its product must exist."""
    if get_product_by_id(type_dict["product_id"], filepath) is None:
        raise CatalogError(f"Loan product '{type_dict['product_id']}' not found",
                           {"product_id": type_dict["product_id"]})
    df = get_all_product_types(filepath)
    existing = df[df["type_id"].astype(str) == type_dict["type_id"]]
    if not existing.empty:
        for col in type_dict:
            if col in df.columns and col != "created_at":
                df.loc[df["type_id"].astype(str) == type_dict["type_id"], col] = type_dict[col]
        write_sheet(df, SHEET_PRODUCT_TYPES, filepath)
    else:
        record = {"created_at": datetime.now().isoformat(), **type_dict}
        _append_row(SHEET_PRODUCT_TYPES, PRODUCT_TYPES_COLUMNS, record, filepath)
    logger.info("saved product type %s", type_dict["type_id"])


def delete_product_type(type_id: str, filepath: Path = EXCEL_FILE):
    df = get_all_product_types(filepath)
    if df[df["type_id"].astype(str) == type_id].empty:
        raise CatalogError(f"Product type '{type_id}' not found", {"type_id": type_id})
    write_sheet(df[df["type_id"].astype(str) != type_id], SHEET_PRODUCT_TYPES, filepath)


def load_catalog(filepath: Path = EXCEL_FILE) -> ProductCatalog:
    return ProductCatalog.from_frames(get_all_products(filepath), get_all_product_types(filepath))


# ---- customer loan history ----

def get_customer_loans(customer_id: str, filepath: Path = EXCEL_FILE) -> List[CustomerLoanRecord]:
    df = read_sheet(SHEET_CUSTOMER_LOANS, filepath, CUSTOMER_LOANS_COLUMNS)
    booked = read_sheet(SHEET_LOANS, filepath, LOANS_COLUMNS)
    records = []
    for frame in (df, booked):
        if frame.empty:
            continue
        rows = frame[frame["customer_id"].astype(str) == str(customer_id)]
        records.extend(CustomerLoanRecord(status=str(r["status"]), loan_id=str(r["loan_id"]))
                       for _, r in rows.iterrows())
    return records


def save_customer_loan(record: dict, filepath: Path = EXCEL_FILE):
    """Record a loan from the customer's history (imported from the loan system)."""
    record = {"created_at": datetime.now().isoformat(), **record}
    _append_row(SHEET_CUSTOMER_LOANS, CUSTOMER_LOANS_COLUMNS, record, filepath)


# ---- booked loans ----

def get_booked_loans(filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    return read_sheet(SHEET_LOANS, filepath, LOANS_COLUMNS)


def save_loan(record: dict, filepath: Path = EXCEL_FILE):
    _append_row(SHEET_LOANS, LOANS_COLUMNS, record, filepath)
    logger.info("booked loan %s for customer %s", record["loan_id"], record["customer_id"])


# ---- system config ----

def get_config(key: str, filepath: Path = EXCEL_FILE) -> Optional[str]:
    df = read_sheet(SHEET_CONFIG, filepath, CONFIG_COLUMNS)
    match = df[df["key"] == key]
    if match.empty:
        return None
    return str(match.iloc[0]["value"])


def get_config_float(key: str, default: float, filepath: Path = EXCEL_FILE) -> float:
    """Config value as a number, falling back to `default`."""
    value = get_config(key, filepath)
    if value is None:
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        logger.warning("config %s=%r is not a number, using %s", key, value, default)
        return default


def get_all_config(filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    return read_sheet(SHEET_CONFIG, filepath, CONFIG_COLUMNS)


def set_config(key: str, value: str, description: str = "", filepath: Path = EXCEL_FILE):
    df = read_sheet(SHEET_CONFIG, filepath, CONFIG_COLUMNS)
    now = datetime.now().isoformat()
    if key in df["key"].values:
        df.loc[df["key"] == key, "value"] = value
        df.loc[df["key"] == key, "updated_at"] = now
        if description:
            df.loc[df["key"] == key, "description"] = description
    else:
        new_row = pd.DataFrame([{
            "key": key, "value": value,
            "description": description, "updated_at": now,
        }])
        df = pd.concat([df, new_row], ignore_index=True)
    write_sheet(df, SHEET_CONFIG, filepath)
