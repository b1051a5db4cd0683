"""目录快照加载器。

每个目录（方案列表、价格列表）一个实例，负责"刷新 / 返回旧数据 / 合成兜底"策略：
- 缓存新鲜：直接返回
- 缓存过期或为空：同步刷新（数据源链 + 全局截止时间）
  - 成功：存为 FRESH
  - 全部失败或超过截止时间：存合成数据（FALLBACK），照常返回，不报错
- 同一 key 已有刷新在进行：有旧数据则立即返回旧数据，没有则等待同一次刷新
- 后台定时刷新所有已知 key，由 is_updating 保证同一时间只有一轮
- 长时间无人读取的 key（以及超出上限时最久未读的 key）连同缓存一起退役，
  不再参与后台刷新；启动时登记的常驻 key 不会退役
"""

import asyncio
import contextlib
import time
from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar

from loguru import logger

from src.core.infrastructure.cache import TTLCache
from src.core.infrastructure.health import CatalogHealthResult, HealthStatus
from src.core.infrastructure.logging import BusinessEvents
from src.modules.sources.application.chain import SourceChainFetcher
from src.modules.sources.domain.entities import CatalogSnapshot, CatalogState
from src.modules.sources.domain.fetcher import SourceDescriptor

TargetT = TypeVar("TargetT")
RecordT = TypeVar("RecordT")


class CatalogSnapshotLoader(Generic[TargetT, RecordT]):
    """单个目录的快照加载与刷新。"""

    def __init__(
        self,
        *,
        name: str,
        cache: TTLCache[str, CatalogSnapshot[RecordT]],
        chain: SourceChainFetcher,
        descriptors: Sequence[SourceDescriptor[TargetT, RecordT]],
        fallback: Callable[[TargetT], list[RecordT]],
        deadline_sec: float,
        postprocess: Callable[[list[RecordT]], list[RecordT]] | None = None,
        clock: Callable[[], float] = time.monotonic,
        idle_sec: float | None = None,
        max_keys: int | None = None,
    ) -> None:
        """初始化加载器。

        Args:
            name: 目录名称（日志用）
            cache: 快照缓存
            chain: 数据源链
            descriptors: 该目录的数据源
            fallback: 合成数据生成函数（必须返回非空列表且不抛错）
            deadline_sec: 一次刷新中整条数据源链的总截止时间
            postprocess: 对数据源结果的规整（如按 id 去重）
            clock: 记录 key 最近读取时间的时钟
            idle_sec: 超过该时长无人读取的 key 被退役（None 表示不按时长退役）
            max_keys: 非常驻 key 的上限，超出时退役最久未读的 key
        """
        self.name = name
        self._cache = cache
        self._chain = chain
        self._descriptors = list(descriptors)
        self._fallback = fallback
        self._deadline_sec = deadline_sec
        self._postprocess = postprocess
        self._clock = clock
        self._idle_sec = idle_sec
        self._max_keys = max_keys

        self._targets: dict[str, TargetT] = {}
        self._last_read: dict[str, float] = {}
        self._pinned: set[str] = set()
        self._refreshing: dict[str, asyncio.Future[CatalogSnapshot[RecordT]]] = {}
        self._is_updating = False
        self._refresh_task: asyncio.Task[None] | None = None

    @property
    def is_updating(self) -> bool:
        return self._is_updating

    @property
    def is_running(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    @property
    def keys(self) -> list[str]:
        """当前登记（参与后台刷新）的 key。"""
        return list(self._targets)

    def register(self, key: str, target: TargetT, *, pinned: bool = False) -> None:
        """登记 key 以便后台刷新覆盖到它。

        Args:
            key: 缓存 key
            target: 刷新时传给数据源的查询目标
            pinned: 常驻 key，不会因闲置或超出上限被退役
        """
        is_new = key not in self._targets
        self._targets[key] = target
        self._last_read.setdefault(key, self._clock())
        if pinned:
            self._pinned.add(key)
        if is_new:
            self.retire_idle(keep=key)

    def retire_idle(self, keep: str | None = None) -> int:
        """退役闲置或超出上限的 key，同时删除其缓存条目。

        Args:
            keep: 本次不退役的 key（刚登记的 key）

        Returns:
            本次退役的 key 数量
        """
        now = self._clock()
        candidates = sorted(
            (last_read, key)
            for key, last_read in self._last_read.items()
            if key != keep
            and key not in self._pinned
            and key not in self._refreshing
        )

        unpinned = len(self._targets) - len(self._pinned)
        retired: list[str] = []
        for last_read, key in candidates:
            idle = self._idle_sec is not None and now - last_read >= self._idle_sec
            over_limit = (
                self._max_keys is not None
                and unpinned - len(retired) > self._max_keys
            )
            if not (idle or over_limit):
                break
            retired.append(key)

        for key in retired:
            self._targets.pop(key, None)
            self._last_read.pop(key, None)
            self._cache.invalidate(key)
        if retired:
            logger.debug(f"[{self.name}] Retired {len(retired)} idle keys")
        return len(retired)

    def state(self, key: str) -> CatalogState:
        if key in self._refreshing:
            return CatalogState.REFRESHING
        entry = self._cache.peek(key)
        if entry is None:
            return CatalogState.EMPTY
        if not self._cache.is_fresh(key):
            return CatalogState.STALE
        if entry.value.is_fallback:
            return CatalogState.FALLBACK
        return CatalogState.FRESH

    def cached(self, key: str) -> CatalogSnapshot[RecordT] | None:
        """返回当前缓存的快照（不论新旧），不触发刷新。"""
        entry = self._cache.peek(key)
        return entry.value if entry is not None else None

    async def load(self, key: str, target: TargetT) -> CatalogSnapshot[RecordT]:
        """读取快照，必要时同步刷新。永不抛错、永不返回空快照。"""
        self.register(key, target)
        self._last_read[key] = self._clock()

        snapshot = self._cache.get(key)
        if snapshot is not None:
            return snapshot

        entry = self._cache.peek(key)
        if entry is not None and key in self._refreshing:
            logger.debug(f"[{self.name}] Serving stale snapshot for {key} during refresh")
            return entry.value

        return await self.refresh(key, target)

    async def refresh(self, key: str, target: TargetT) -> CatalogSnapshot[RecordT]:
        """刷新指定 key；同一 key 的并发刷新共享同一次执行。"""
        self.register(key, target)

        pending = self._refreshing.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._refresh(key, target))
            self._refreshing[key] = pending
            pending.add_done_callback(lambda fut: self._forget_refresh(key, fut))

        return await asyncio.shield(pending)

    async def refresh_all(self) -> int:
        """刷新所有已登记的 key。已有一轮在进行时直接跳过。

        Returns:
            本轮刷新的 key 数量
        """
        if self._is_updating:
            logger.debug(f"[{self.name}] Refresh already in progress, skipping")
            return 0

        self._is_updating = True
        try:
            self.retire_idle()
            refreshed = 0
            for key, target in list(self._targets.items()):
                await self.refresh(key, target)
                refreshed += 1
            return refreshed
        finally:
            self._is_updating = False

    def start(self, interval_sec: float) -> None:
        """启动后台定时刷新任务（幂等）。"""
        if self.is_running:
            return
        self._refresh_task = asyncio.create_task(
            self._refresh_loop(interval_sec),
            name=f"{self.name}-refresh",
        )
        logger.info(f"[{self.name}] Background refresh started (every {interval_sec}s)")

    async def stop(self) -> None:
        """取消后台刷新任务并等待其退出。"""
        task, self._refresh_task = self._refresh_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info(f"[{self.name}] Background refresh stopped")

    def health(self) -> CatalogHealthResult:
        keys = self._cache.keys()
        states = {key: self.state(key).value for key in keys}
        degraded = any(state == CatalogState.FALLBACK for state in states.values())
        return CatalogHealthResult(
            status=HealthStatus.DEGRADED if degraded else HealthStatus.OK,
            catalog=self.name,
            cached_keys=len(keys),
            states=states,
        )

    async def _refresh_loop(self, interval_sec: float) -> None:
        while True:
            await asyncio.sleep(interval_sec)
            try:
                refreshed = await self.refresh_all()
                logger.debug(f"[{self.name}] Background refresh covered {refreshed} keys")
            except Exception as e:
                logger.exception(f"[{self.name}] Background refresh failed: {e}")

    async def _refresh(self, key: str, target: TargetT) -> CatalogSnapshot[RecordT]:
        start_time = time.time()
        reason = "all sources failed"

        result = None
        try:
            result = await asyncio.wait_for(
                self._chain.fetch(target, self._descriptors),
                timeout=self._deadline_sec,
            )
        except TimeoutError:
            reason = f"request deadline of {self._deadline_sec}s exceeded"
            logger.warning(f"[{self.name}] {reason} for {key}, abandoning sources")

        records: list[RecordT] = []
        if result is not None:
            records = result.records
            if self._postprocess is not None:
                records = self._postprocess(records)

        if records:
            snapshot = CatalogSnapshot.from_records(records, result.source_used)
        else:
            snapshot = CatalogSnapshot.fallback(self._build_fallback(target))
            BusinessEvents.feature_degraded(feature=self.name, reason=reason, key=key)

        self._cache.set(key, snapshot)
        BusinessEvents.catalog_refreshed(
            catalog=self.name,
            key=key,
            source_used=snapshot.source_used,
            record_count=len(snapshot),
            is_fallback=snapshot.is_fallback,
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return snapshot

    def _build_fallback(self, target: TargetT) -> list[RecordT]:
        records = self._fallback(target)
        if self._postprocess is not None:
            records = self._postprocess(records)
        return records

    def _forget_refresh(self, key: str, future: asyncio.Future[Any]) -> None:
        if self._refreshing.get(key) is future:
            del self._refreshing[key]
