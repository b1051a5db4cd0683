"""列表检索与分页。

对已物化的实体列表做确定性的过滤和分页：
- 文本检索：query 对 text_fields 做大小写不敏感的子串匹配（任一字段命中即可）
- 字段过滤：每个过滤键对同名字段做大小写不敏感的子串匹配，多个过滤条件取 AND
- 分页保持原列表顺序，逐页拼接可还原完整的过滤结果
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from src.core.domain.exceptions import ValidationError

T = TypeVar("T")


class Pagination(BaseModel):
    """分页信息。"""

    current_page: int
    total_pages: int
    total_results: int
    page_size: int
    has_next_page: bool
    has_prev_page: bool


class Page(BaseModel, Generic[T]):
    """单页结果。"""

    items: list[T]
    pagination: Pagination


class SearchPaginator:
    """实体列表检索分页器。"""

    DEFAULT_TEXT_FIELDS = ("name", "description", "category")

    def __init__(self, text_fields: Sequence[str] = DEFAULT_TEXT_FIELDS) -> None:
        self.text_fields = tuple(text_fields)

    def filter(
        self,
        items: Sequence[T],
        query: str | None = None,
        filters: Mapping[str, str | None] | None = None,
    ) -> list[T]:
        results = list(items)

        term = (query or "").strip().lower()
        if term:
            results = [item for item in results if self._matches_text(item, term)]

        for field_name, value in (filters or {}).items():
            if not value or not value.strip():
                continue
            needle = value.strip().lower()
            results = [
                item
                for item in results
                if needle in self._field_text(item, field_name)
            ]

        return results

    def paginate(
        self,
        items: Sequence[T],
        query: str | None = None,
        filters: Mapping[str, str | None] | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Page[T]:
        """过滤并返回指定页。

        Raises:
            ValidationError: page_size 小于 1
        """
        if page_size < 1:
            raise ValidationError("page_size must be at least 1")
        page = max(page, 1)

        filtered = self.filter(items, query=query, filters=filters)
        total_results = len(filtered)
        total_pages = math.ceil(total_results / page_size)

        start = (page - 1) * page_size
        page_items = filtered[start : start + page_size]

        return Page(
            items=page_items,
            pagination=Pagination(
                current_page=page,
                total_pages=total_pages,
                total_results=total_results,
                page_size=page_size,
                has_next_page=page < total_pages,
                has_prev_page=page > 1,
            ),
        )

    def _matches_text(self, item: Any, term: str) -> bool:
        return any(term in self._field_text(item, name) for name in self.text_fields)

    @staticmethod
    def _field_text(item: Any, field_name: str) -> str:
        if isinstance(item, Mapping):
            value = item.get(field_name)
        else:
            value = getattr(item, field_name, None)
        if value is None:
            return ""
        return str(value).lower()
