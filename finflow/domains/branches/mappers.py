"""DTO mappers for branches."""

from __future__ import annotations


def map_branch(row) -> dict:
    return {"id": row.id, "name": row.name}


def map_branch_record(row) -> dict:
    return {"id": row.id, "name": row.name, "userId": row.user_id}
