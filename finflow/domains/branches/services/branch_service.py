"""Branch service layer."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy import Row, insert, select

from finflow.core.errors import ValidationError
from finflow.core.types import new_id
from finflow.core.utils.scoped import by_id, by_ids, scoped_delete, scoped_update
from finflow.domains.branches.models.branch_models import Branch
from finflow.extensions import db

logger = logging.getLogger(__name__)

_table = Branch.__table__


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    return name


def list_branches(user_id: str) -> List[Row]:
    stmt = select(Branch.id, Branch.name).where(Branch.user_id == user_id)
    return list(db.session.execute(stmt).all())


def get_branch(user_id: str, branch_id: str) -> Optional[Row]:
    stmt = select(Branch.id, Branch.name).where(
        Branch.user_id == user_id, Branch.id == branch_id
    )
    return db.session.execute(stmt).first()


def owns_branch(user_id: str, branch_id: str) -> bool:
    return get_branch(user_id, branch_id) is not None


def create_branch(user_id: str, name: str | None) -> Row:
    stmt = (
        insert(_table)
        .values(id=new_id(), name=_clean_name(name), user_id=user_id)
        .returning(*_table.c)
    )
    row = db.session.execute(stmt).one()
    db.session.commit()
    return row


def update_branch(user_id: str, branch_id: str, name: str | None) -> Optional[Row]:
    stmt = scoped_update(
        _table,
        user_id,
        by_id(_table, branch_id),
        values={"name": _clean_name(name)},
        name="branches_to_update",
    )
    row = db.session.execute(stmt).first()
    db.session.commit()
    return row


def delete_branch(user_id: str, branch_id: str) -> Optional[Row]:
    stmt = scoped_delete(_table, user_id, by_id(_table, branch_id), name="branch_to_delete")
    row = db.session.execute(stmt).first()
    db.session.commit()
    return row


def bulk_delete_branches(user_id: str, branch_ids: Sequence[str]) -> List[Row]:
    if not branch_ids:
        return []
    stmt = scoped_delete(_table, user_id, by_ids(_table, branch_ids), name="branches_to_delete")
    rows = list(db.session.execute(stmt).all())
    db.session.commit()
    logger.info(
        "Bulk branch delete for user %s: requested=%d deleted=%d",
        user_id,
        len(branch_ids),
        len(rows),
    )
    return rows
