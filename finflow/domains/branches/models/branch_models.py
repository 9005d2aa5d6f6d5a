"""Branch model."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column

from finflow.core.types import new_id
from finflow.extensions import db


class Branch(db.Model):
    __tablename__ = "branches"
    __table_args__ = (db.Index("ix_branches_user_name", "user_id", "name"),)

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    user_id: Mapped[str] = mapped_column(
        db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )


__all__ = ["Branch"]
