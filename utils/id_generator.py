import uuid
from datetime import datetime


def generate_product_id() -> str:
    return f"PR-{datetime.now().strftime('%Y%m%d%H%M%S')}-{uuid.uuid4().hex[:4]}"


def generate_type_id() -> str:
    return f"PT-{datetime.now().strftime('%Y%m%d%H%M%S')}-{uuid.uuid4().hex[:4]}"


def generate_loan_id() -> str:
    return f"LN-{datetime.now().strftime('%Y%m%d%H%M%S')}-{uuid.uuid4().hex[:4]}"
