"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from finflow.core.errors import UserNotFound
from finflow.core.users.services import resolve_user
from finflow.core.utils.validation import parse_uuid

F = TypeVar("F", bound=Callable)


def with_user(missing_status: int = 404, id_label: str = "Id"):
    """Resolve the ``<email>`` path segment to a user and pass it on as ``user``.

    A ``<id>`` path segment, when the route has one, is checked for UUID shape
    before the user lookup so malformed ids never reach the database. Create
    paths report a missing user as 400, every other path as 404.
    """

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, email: str, **kwargs):  # type: ignore[misc]
            if "id" in kwargs:
                kwargs["id"] = parse_uuid(kwargs["id"], id_label)
            user = resolve_user(email)
            if user is None:
                raise UserNotFound(status_code=missing_status)
            return fn(*args, user=user, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
