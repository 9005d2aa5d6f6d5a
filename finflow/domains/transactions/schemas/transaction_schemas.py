"""Transaction schemas."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from finflow.core.schemas import CamelModel, EntityId
from finflow.core.types import MAX_QUANTITY

_REQUIRED_ON_UPDATE = ("date", "product", "price", "quantity", "total")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _coerce_date(value):
    # Browser forms post full ISO timestamps ("2024-01-10T00:00:00.000Z"); keep the calendar day.
    if isinstance(value, str) and "T" in value:
        return dt.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


class TransactionFields(CamelModel):
    category_id: Optional[EntityId] = None
    branch_id: Optional[EntityId] = None

    @field_validator("category_id", "branch_id", mode="before")
    @classmethod
    def _empty_refs(cls, value):
        return _blank_to_none(value)

    @field_validator("date", mode="before", check_fields=False)
    @classmethod
    def _timestamp_dates(cls, value):
        return _coerce_date(value)


class TransactionCreate(TransactionFields):
    date: dt.date
    product: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    total: Optional[Decimal] = Field(default=None, ge=0, max_digits=16, decimal_places=2)

    def to_values(self) -> dict:
        total = self.total if self.total is not None else self.price * self.quantity
        return {
            "category_id": str(self.category_id) if self.category_id else None,
            "branch_id": str(self.branch_id) if self.branch_id else None,
            "date": self.date,
            "product": self.product,
            "price": self.price,
            "quantity": self.quantity,
            "total": total,
        }


class TransactionUpdate(TransactionFields):
    date: Optional[dt.date] = None
    product: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    quantity: Optional[int] = Field(default=None, ge=1, le=MAX_QUANTITY)
    total: Optional[Decimal] = Field(default=None, ge=0, max_digits=16, decimal_places=2)

    @model_validator(mode="after")
    def _no_null_required(self):
        for name in _REQUIRED_ON_UPDATE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_values(self) -> dict:
        values = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name in ("category_id", "branch_id"):
                value = str(value) if value else None
            values[name] = value
        return values


class TransactionListFilter(CamelModel):
    from_date: Optional[str] = Field(default=None, alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")
    category_id: Optional[str] = None
    branch_id: Optional[str] = None


class ReportRequest(CamelModel):
    branch_id: Optional[EntityId] = None
    category_ids: List[EntityId] = Field(default_factory=list)
    gst: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    payment_type: Optional[str] = Field(default=None, max_length=64)
    date: Optional[dt.date] = None
    from_date: Optional[dt.date] = Field(default=None, alias="from")
    to_date: Optional[dt.date] = Field(default=None, alias="to")

    @field_validator("branch_id", mode="before")
    @classmethod
    def _empty_branch(cls, value):
        return _blank_to_none(value)

    @field_validator("date", mode="before")
    @classmethod
    def _timestamp_date(cls, value):
        return _coerce_date(_blank_to_none(value))
