"""Category service layer."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy import Row, insert, select

from finflow.core.errors import ValidationError
from finflow.core.types import new_id
from finflow.core.utils.scoped import by_id, by_ids, scoped_delete, scoped_update
from finflow.domains.categories.models.category_models import Category
from finflow.extensions import db

logger = logging.getLogger(__name__)

_table = Category.__table__


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    return name


def list_categories(user_id: str) -> List[Row]:
    stmt = select(Category.id, Category.name).where(Category.user_id == user_id)
    return list(db.session.execute(stmt).all())


def get_category(user_id: str, category_id: str) -> Optional[Row]:
    stmt = select(Category.id, Category.name).where(
        Category.user_id == user_id, Category.id == category_id
    )
    return db.session.execute(stmt).first()


def create_category(user_id: str, name: str | None) -> Row:
    stmt = (
        insert(_table)
        .values(id=new_id(), name=_clean_name(name), user_id=user_id)
        .returning(*_table.c)
    )
    row = db.session.execute(stmt).one()
    db.session.commit()
    return row


def update_category(user_id: str, category_id: str, name: str | None) -> Optional[Row]:
    stmt = scoped_update(
        _table,
        user_id,
        by_id(_table, category_id),
        values={"name": _clean_name(name)},
        name="categories_to_update",
    )
    row = db.session.execute(stmt).first()
    db.session.commit()
    return row


def delete_category(user_id: str, category_id: str) -> Optional[Row]:
    stmt = scoped_delete(_table, user_id, by_id(_table, category_id), name="category_to_delete")
    row = db.session.execute(stmt).first()
    db.session.commit()
    return row


def bulk_delete_categories(user_id: str, category_ids: Sequence[str]) -> List[Row]:
    if not category_ids:
        return []
    stmt = scoped_delete(_table, user_id, by_ids(_table, category_ids), name="categories_to_delete")
    rows = list(db.session.execute(stmt).all())
    db.session.commit()
    logger.info(
        "Bulk category delete for user %s: requested=%d deleted=%d",
        user_id,
        len(category_ids),
        len(rows),
    )
    return rows
