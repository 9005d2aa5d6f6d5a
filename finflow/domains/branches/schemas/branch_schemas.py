"""Branch schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from finflow.core.schemas import CamelModel


class BranchBody(CamelModel):
    name: Optional[str] = Field(default=None, max_length=255)
