"""Catalog snapshot entities."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Generic, TypeVar

RecordT = TypeVar("RecordT")

FALLBACK_SOURCE = "synthetic-fallback"


class CatalogState(StrEnum):
    """目录缓存状态。

    EMPTY -> FRESH -> STALE -> REFRESHING -> FRESH | FALLBACK
    """

    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"
    REFRESHING = "refreshing"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class CatalogSnapshot(Generic[RecordT]):
    """一次刷新得到的不可变记录快照，下次刷新时整体替换。"""

    records: tuple[RecordT, ...]
    source_used: str
    generated_at: datetime
    is_fallback: bool = False

    @classmethod
    def from_records(
        cls,
        records: list[RecordT],
        source_used: str,
        *,
        is_fallback: bool = False,
    ) -> "CatalogSnapshot[RecordT]":
        return cls(
            records=tuple(records),
            source_used=source_used,
            generated_at=datetime.now(UTC),
            is_fallback=is_fallback,
        )

    @classmethod
    def fallback(cls, records: list[RecordT]) -> "CatalogSnapshot[RecordT]":
        return cls.from_records(records, FALLBACK_SOURCE, is_fallback=True)

    def __len__(self) -> int:
        return len(self.records)
