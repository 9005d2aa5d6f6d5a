"""Schemas shared across resources."""

from __future__ import annotations

import uuid
from typing import Annotated, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finflow.core.utils.validation import UUID_PATTERN


def _hyphenated_uuid(value):
    if isinstance(value, str) and not UUID_PATTERN.fullmatch(value):
        raise ValueError("must be a hyphenated UUID")
    return value


EntityId = Annotated[uuid.UUID, BeforeValidator(_hyphenated_uuid)]


class CamelModel(BaseModel):
    """Request bodies use camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class BulkDeleteRequest(CamelModel):
    ids: List[EntityId] = Field(default_factory=list)

    def id_strings(self) -> List[str]:
        return [str(i) for i in self.ids]
