"""Data source descriptors and chain results."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

TargetT = TypeVar("TargetT")
RecordT = TypeVar("RecordT")


class FetchStatus(str, Enum):
    """单次数据源尝试的结果。"""

    SUCCESS = "success"
    EMPTY = "empty"  # 成功但无数据
    FAILED = "failed"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class SourceDescriptor(Generic[TargetT, RecordT]):
    """数据源描述（不可变配置）。

    fetch 返回记录列表；返回 None 或空列表都视为该源没有可用数据。
    """

    name: str
    priority: int
    fetch: Callable[[TargetT], Awaitable[list[RecordT] | None]]
    enabled: bool = True
    timeout_ms: int = 20000

    @property
    def timeout_sec(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True)
class SourceAttempt:
    """单次尝试记录（用于诊断）。"""

    source_name: str
    status: FetchStatus
    duration_ms: int = 0
    records_count: int = 0
    error_message: str | None = None


@dataclass(frozen=True)
class ChainResult(Generic[RecordT]):
    """数据源链的成功结果。"""

    records: list[RecordT]
    source_used: str
    attempts: list[SourceAttempt] = field(default_factory=list)
