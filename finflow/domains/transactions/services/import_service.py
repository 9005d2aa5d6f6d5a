"""CSV import service for transaction ledgers."""

from __future__ import annotations

import csv
import datetime as dt
import io
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Row, select

from finflow.core.errors import ValidationError
from finflow.core.types import MAX_QUANTITY, to_decimal
from finflow.domains.branches.services.branch_service import owns_branch
from finflow.domains.categories.models.category_models import Category
from finflow.domains.transactions.services.transaction_service import TransactionStore
from finflow.extensions import db

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "product", "price")
BRANCH_REQUIRED = "Please select a branch to continue."


class ImportRow:
    def __init__(
        self,
        date: dt.date,
        product: str,
        price: Decimal,
        quantity: int,
        total: Decimal,
        category: Optional[str] = None,
    ):
        self.date = date
        self.product = product
        self.price = price
        self.quantity = quantity
        self.total = total
        self.category = category

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "product": self.product,
            "price": float(self.price),
            "quantity": self.quantity,
            "total": float(self.total),
            "category": self.category,
        }


def _read_text(file_obj) -> str:
    try:
        file_obj.seek(0)
    except (AttributeError, OSError):
        pass
    content = file_obj.read()
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise ValidationError("File must be UTF-8 encoded CSV")
    return content.lstrip("\ufeff")


def _parse_row(idx: int, row: dict) -> ImportRow:
    def fail(reason: str) -> ValidationError:
        return ValidationError(f"Row {idx}: {reason}")

    product = (row.get("product") or "").strip()
    if not product:
        raise fail("product is required")
    try:
        date = dt.date.fromisoformat((row.get("date") or "").strip())
    except ValueError:
        raise fail("date must be yyyy-MM-dd")
    try:
        price = to_decimal(row.get("price") or "")
        quantity = int((row.get("quantity") or "1").strip())
    except ValueError:
        raise fail("price and quantity must be numeric")
    if price < 0 or quantity < 1:
        raise fail("price must be >= 0 and quantity >= 1")
    if quantity > MAX_QUANTITY:
        raise fail(f"quantity must be <= {MAX_QUANTITY}")
    raw_total = (row.get("total") or "").strip()
    try:
        total = to_decimal(raw_total) if raw_total else to_decimal(price * quantity)
    except ValueError:
        raise fail("total must be numeric and within range")
    category = (row.get("category") or "").strip() or None
    return ImportRow(date, product, price, quantity, total, category)


def parse_csv(file_obj, *, max_rows: int = 1000) -> List[ImportRow]:
    """Parse an uploaded CSV into ImportRow list (header names are case-insensitive)."""
    reader = csv.DictReader(io.StringIO(_read_text(file_obj)))
    if not reader.fieldnames:
        raise ValidationError("CSV file is empty")
    reader.fieldnames = [(name or "").strip().lower() for name in reader.fieldnames]
    missing = [col for col in REQUIRED_COLUMNS if col not in reader.fieldnames]
    if missing:
        raise ValidationError(f"Missing required column(s): {', '.join(missing)}")

    rows: List[ImportRow] = []
    for idx, raw in enumerate(reader, start=1):
        if not any((value or "").strip() for value in raw.values() if isinstance(value, str)):
            continue
        if len(rows) >= max_rows:
            raise ValidationError(f"Import is limited to {max_rows} rows")
        rows.append(_parse_row(idx, raw))
    if not rows:
        raise ValidationError("CSV file has no rows")
    return rows


def preview_csv(file_obj, *, max_rows: int = 1000) -> List[dict]:
    return [row.to_dict() for row in parse_csv(file_obj, max_rows=max_rows)]


def _category_lookup(user_id: str) -> dict:
    rows = db.session.execute(
        select(Category.id, Category.name).where(Category.user_id == user_id)
    ).all()
    return {name.strip().lower(): cat_id for cat_id, name in rows}


def commit_import(
    user_id: str,
    store: TransactionStore,
    file_obj,
    branch_id: Optional[str],
    *,
    max_rows: int = 1000,
) -> List[Row]:
    """Insert every parsed row into ``store`` under the confirmed branch, all or nothing."""
    if not branch_id:
        raise ValidationError(BRANCH_REQUIRED)
    if not owns_branch(user_id, branch_id):
        raise ValidationError("Branch Not Found")
    parsed = parse_csv(file_obj, max_rows=max_rows)
    categories = _category_lookup(user_id)
    values = [
        {
            "category_id": categories.get(row.category.lower()) if row.category else None,
            "branch_id": branch_id,
            "date": row.date,
            "product": row.product,
            "price": row.price,
            "quantity": row.quantity,
            "total": row.total,
        }
        for row in parsed
    ]
    created = store.bulk_create(user_id, values)
    logger.info("Imported %d %s rows for user %s", len(created), store.resource, user_id)
    return created
