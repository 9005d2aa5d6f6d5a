"""DTO mappers for transactions.

Amounts are kept as Decimal all the way from storage and only become plain
numbers here, at the presentation boundary.
"""

from __future__ import annotations

from decimal import Decimal


def _money(value) -> float | None:
    if value is None:
        return None
    return float(Decimal(value))


def map_transaction_view(row) -> dict:
    return {
        "id": row.id,
        "category": row.category,
        "categoryId": row.category_id,
        "branch": row.branch,
        "branchId": row.branch_id,
        "date": row.date.isoformat() if row.date else None,
        "product": row.product,
        "price": _money(row.price),
        "quantity": row.quantity,
        "total": _money(row.total),
    }


def map_transaction_record(row) -> dict:
    return {
        "id": row.id,
        "userId": row.user_id,
        "categoryId": row.category_id,
        "branchId": row.branch_id,
        "date": row.date.isoformat() if row.date else None,
        "product": row.product,
        "price": _money(row.price),
        "quantity": row.quantity,
        "total": _money(row.total),
    }
