"""User resolution.

Authentication happens upstream; by the time a request reaches FinFlow the
caller is identified only by the email embedded in the URL. Each request
resolves that email afresh and hands the resulting ``User`` to the stores.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from finflow.core.errors import ValidationError
from finflow.core.users.models import User
from finflow.extensions import db

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(email: str | None) -> str:
    if not email or not email.strip():
        raise ValidationError("Email Id is required")
    try:
        return _email_adapter.validate_python(email.strip())
    except PydanticValidationError as exc:
        raise ValidationError("Invalid Email Id") from exc


def get_user_by_email(email: str) -> Optional[User]:
    return User.query.filter_by(email=email).first()


def resolve_user(email: str | None) -> Optional[User]:
    return get_user_by_email(normalize_email(email))


def create_user(email: str, *, name: str | None = None) -> User:
    email = normalize_email(email)
    if get_user_by_email(email):
        raise ValidationError("User already exists")
    user = User(email=email, name=(name or "").strip() or None)
    db.session.add(user)
    db.session.commit()
    logger.info("Created user %s", user.id)
    return user


def get_or_create_user(email: str, *, name: str | None = None) -> User:
    user = resolve_user(email)
    if user:
        return user
    return create_user(email, name=name)
