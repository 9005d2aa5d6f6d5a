"""DTO mappers for categories."""

from __future__ import annotations


def map_category(row) -> dict:
    return {"id": row.id, "name": row.name}


def map_category_record(row) -> dict:
    return {"id": row.id, "name": row.name, "userId": row.user_id}
