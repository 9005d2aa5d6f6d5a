"""Transaction stores: one per resource family, identical contract.

Reads left-join the owning category and branch so a transaction without
either still lists. Writes go through ``finflow.core.utils.scoped`` so that
UPDATE and DELETE only ever touch rows selected by an ownership-filtered CTE.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import Row, and_, insert, select

from finflow.core.errors import ValidationError
from finflow.core.types import new_id, to_decimal
from finflow.core.utils.scoped import by_id, by_ids, scoped_delete, scoped_update
from finflow.core.utils.validation import resolve_date_range
from finflow.domains.branches.models.branch_models import Branch
from finflow.domains.categories.models.category_models import Category
from finflow.domains.transactions.models.transaction_models import (
    PurchaseTransaction,
    SalesTransaction,
    Transaction,
)
from finflow.extensions import db

logger = logging.getLogger(__name__)


class TransactionStore:
    def __init__(self, resource: str, model, label: str):
        self.resource = resource
        self.model = model
        self.label = label
        self.table = model.__table__
        self._cte_prefix = model.__tablename__

    def __repr__(self) -> str:
        return f"TransactionStore({self.resource!r})"

    # Reads -----------------------------------------------------------------

    def _view_query(self, user_id: str):
        model = self.model
        return (
            select(
                model.id,
                Category.name.label("category"),
                model.category_id,
                Branch.name.label("branch"),
                model.branch_id,
                model.date,
                model.product,
                model.price,
                model.quantity,
                model.total,
            )
            .select_from(model)
            .outerjoin(
                Category,
                and_(Category.id == model.category_id, Category.user_id == model.user_id),
            )
            .outerjoin(
                Branch,
                and_(Branch.id == model.branch_id, Branch.user_id == model.user_id),
            )
            .where(model.user_id == user_id)
        )

    def list(
        self,
        user_id: str,
        *,
        from_date: Optional[dt.date] = None,
        to_date: Optional[dt.date] = None,
        category_id: Optional[str] = None,
        branch_id: Optional[str] = None,
        days: int = 30,
    ) -> List[Row]:
        start, end = resolve_date_range(from_date, to_date, days=days)
        model = self.model
        stmt = self._view_query(user_id).where(model.date >= start, model.date <= end)
        if category_id:
            stmt = stmt.where(model.category_id == category_id)
        if branch_id:
            stmt = stmt.where(model.branch_id == branch_id)
        stmt = stmt.order_by(model.date.desc(), model.product.asc())
        return list(db.session.execute(stmt).all())

    def get(self, user_id: str, record_id: str) -> Optional[Row]:
        stmt = self._view_query(user_id).where(self.model.id == record_id)
        return db.session.execute(stmt).first()

    # Writes ----------------------------------------------------------------

    def _check_refs(self, user_id: str, values: Iterable[dict]) -> None:
        """Reject category/branch references the caller does not own."""
        category_ids = {v["category_id"] for v in values if v.get("category_id")}
        branch_ids = {v["branch_id"] for v in values if v.get("branch_id")}
        if category_ids:
            owned = db.session.execute(
                select(Category.id).where(Category.user_id == user_id, Category.id.in_(list(category_ids)))
            ).scalars()
            if set(owned) != category_ids:
                raise ValidationError("Category Not Found")
        if branch_ids:
            owned = db.session.execute(
                select(Branch.id).where(Branch.user_id == user_id, Branch.id.in_(list(branch_ids)))
            ).scalars()
            if set(owned) != branch_ids:
                raise ValidationError("Branch Not Found")

    @staticmethod
    def _normalize(values: dict) -> dict:
        normalized = dict(values)
        try:
            for key in ("price", "total"):
                if normalized.get(key) is not None:
                    normalized[key] = to_decimal(normalized[key])
        except ValueError as exc:
            raise ValidationError("Amount is out of range") from exc
        return normalized

    def _new_row(self, user_id: str, values: dict) -> dict:
        # Multi-row VALUES needs every row to carry the same keys.
        row = self._normalize({"category_id": None, "branch_id": None, "quantity": 1, **values})
        if row.get("total") is None:
            row = self._normalize({**row, "total": row["price"] * row["quantity"]})
        return {**row, "id": new_id(), "user_id": user_id}

    def create(self, user_id: str, values: dict) -> Row:
        return self.bulk_create(user_id, [values])[0]

    def bulk_create(self, user_id: str, rows: Sequence[dict]) -> List[Row]:
        if not rows:
            return []
        self._check_refs(user_id, rows)
        payload = [self._new_row(user_id, values) for values in rows]
        stmt = insert(self.table).values(payload).returning(*self.table.c)
        created = list(db.session.execute(stmt).all())
        db.session.commit()
        if len(payload) > 1:
            logger.info("Bulk %s create for user %s: %d rows", self.resource, user_id, len(created))
        return created

    def update(self, user_id: str, record_id: str, values: dict) -> Optional[Row]:
        if not values:
            raise ValidationError("No fields to update")
        self._check_refs(user_id, [values])
        stmt = scoped_update(
            self.table,
            user_id,
            by_id(self.table, record_id),
            values=self._normalize(values),
            name=f"{self._cte_prefix}_to_update",
        )
        row = db.session.execute(stmt).first()
        db.session.commit()
        return row

    def delete(self, user_id: str, record_id: str) -> Optional[Row]:
        stmt = scoped_delete(
            self.table,
            user_id,
            by_id(self.table, record_id),
            name=f"{self._cte_prefix}_to_delete",
        )
        row = db.session.execute(stmt).first()
        db.session.commit()
        return row

    def bulk_delete(self, user_id: str, record_ids: Sequence[str]) -> List[Row]:
        if not record_ids:
            return []
        stmt = scoped_delete(
            self.table,
            user_id,
            by_ids(self.table, record_ids),
            name=f"{self._cte_prefix}_bulk_delete",
        )
        rows = list(db.session.execute(stmt).all())
        db.session.commit()
        logger.info(
            "Bulk %s delete for user %s: requested=%d deleted=%d",
            self.resource,
            user_id,
            len(record_ids),
            len(rows),
        )
        return rows


transactions = TransactionStore("transactions", Transaction, "Transaction")
sales_transactions = TransactionStore("sales-transactions", SalesTransaction, "Sales Transaction")
purchase_transactions = TransactionStore(
    "purchase-transactions", PurchaseTransaction, "Purchase Transaction"
)

STORES: Dict[str, TransactionStore] = {
    store.resource: store for store in (transactions, sales_transactions, purchase_transactions)
}


def get_store(resource: str) -> TransactionStore:
    return STORES[resource]
