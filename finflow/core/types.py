from __future__ import annotations

import uuid
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy.types import String, TypeDecorator

CENTS = Decimal("0.01")
MAX_QUANTITY = 10**9


def new_id() -> str:
    return str(uuid.uuid4())


def to_decimal(value) -> Decimal:
    """Normalize ints, floats, strings and Decimals to a two-place Decimal."""
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1 instead of its binary expansion
        amount = Decimal(str(value))
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"invalid amount: {value!r}")
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        # More digits than the decimal context can hold at two places.
        raise ValueError(f"amount out of range: {value!r}") from exc


class DecimalText(TypeDecorator):
    """Money stored as fixed-precision text, read back as Decimal."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(to_decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)
