"""Scheme application models."""

from pydantic import BaseModel, Field

from src.core.application.pagination import Pagination
from src.modules.schemes.domain.entities import Scheme


class SchemeSearchResult(BaseModel):
    """方案检索结果。"""

    schemes: list[Scheme] = Field(default_factory=list)
    pagination: Pagination
    source_used: str
    is_fallback: bool = False


class SchemeCategory(BaseModel):
    name: str
    count: int
