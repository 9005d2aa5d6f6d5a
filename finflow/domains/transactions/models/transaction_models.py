"""Transaction models.

The generic, sales and purchase ledgers share one column layout and differ
only in their backing table.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from finflow.core.types import DecimalText, new_id
from finflow.extensions import db


class TransactionColumns:
    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    date: Mapped[dt.date] = mapped_column(db.Date, nullable=False)
    product: Mapped[str] = mapped_column(db.String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(DecimalText(32), nullable=False)
    quantity: Mapped[int] = mapped_column(db.Integer, nullable=False, default=1)
    total: Mapped[Decimal] = mapped_column(DecimalText(32), nullable=False)

    @declared_attr
    def user_id(cls) -> Mapped[str]:
        return mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    @declared_attr
    def category_id(cls) -> Mapped[str | None]:
        return mapped_column(db.ForeignKey("categories.id", ondelete="SET NULL"), index=True)

    @declared_attr
    def branch_id(cls) -> Mapped[str | None]:
        return mapped_column(db.ForeignKey("branches.id", ondelete="SET NULL"), index=True)

    @declared_attr.directive
    def __table_args__(cls):
        return (db.Index(f"ix_{cls.__tablename__}_user_date", "user_id", "date"),)


class Transaction(TransactionColumns, db.Model):
    __tablename__ = "transactions"


class SalesTransaction(TransactionColumns, db.Model):
    __tablename__ = "sales_transactions"


class PurchaseTransaction(TransactionColumns, db.Model):
    __tablename__ = "purchase_transactions"


__all__ = ["Transaction", "SalesTransaction", "PurchaseTransaction", "TransactionColumns"]
