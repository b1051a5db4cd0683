"""进程内 TTL 缓存。

条目整体替换、从不原地修改，并发读者不会读到半更新的值。
时钟可注入，便于测试模拟时间流逝。
"""

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """缓存条目。"""

    value: V
    written_at: float

    def age(self, now: float) -> float:
        return now - self.written_at

    def is_valid(self, now: float, ttl_sec: float) -> bool:
        return self.age(now) < ttl_sec


class TTLCache(Generic[K, V]):
    """带过期时间的键值缓存。

    - get: 未设置或已过期都返回 None（miss）
    - peek: 不论新旧都返回条目，供"先返回旧数据"场景使用
    - 除 TTL 过期外不做淘汰（键空间有界）
    """

    def __init__(
        self,
        ttl_sec: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        self.ttl_sec = ttl_sec
        self._clock = clock
        self._entries: dict[K, CacheEntry[V]] = {}

    def get(self, key: K) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_valid(self._clock(), self.ttl_sec):
            return None
        return entry.value

    def peek(self, key: K) -> CacheEntry[V] | None:
        return self._entries.get(key)

    def set(self, key: K, value: V) -> CacheEntry[V]:
        entry = CacheEntry(value=value, written_at=self._clock())
        self._entries[key] = entry
        return entry

    def invalidate(self, key: K) -> bool:
        return self._entries.pop(key, None) is not None

    def is_fresh(self, key: K) -> bool:
        return self.get(key) is not None

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[K]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
