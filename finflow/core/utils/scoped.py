"""Ownership-scoped mutation statements.

Every UPDATE/DELETE against user-owned rows is built the same way: a named
CTE selects the ids matching the caller's ``user_id`` plus the request's own
criteria, and the mutating statement touches only ``id IN (SELECT id FROM
<cte>)``. Ownership and mutation therefore live in one statement; there is no
read-then-write window and no path that mutates by bare id.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from sqlalchemy import CTE, Delete, Table, Update, delete, select, update


def owned_rows(table: Table, user_id: str, *criteria, name: str) -> CTE:
    return select(table.c.id).where(table.c.user_id == user_id, *criteria).cte(name)


def scoped_update(
    table: Table,
    user_id: str,
    *criteria,
    values: Mapping[str, Any],
    name: str,
) -> Update:
    targets = owned_rows(table, user_id, *criteria, name=name)
    return (
        update(table)
        .add_cte(targets)
        .where(table.c.id.in_(select(targets.c.id)))
        .values(**values)
        .returning(*table.c)
    )


def scoped_delete(table: Table, user_id: str, *criteria, name: str) -> Delete:
    targets = owned_rows(table, user_id, *criteria, name=name)
    return (
        delete(table)
        .add_cte(targets)
        .where(table.c.id.in_(select(targets.c.id)))
        .returning(*table.c)
    )


def by_id(table: Table, record_id: str):
    return table.c.id == record_id


def by_ids(table: Table, record_ids: Sequence[str]):
    return table.c.id.in_(list(record_ids))
