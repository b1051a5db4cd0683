"""目录快照加载器单元测试。

测试覆盖：
- 新鲜缓存直接返回，不调用数据源
- 全部失败 / 超过截止时间时存合成数据
- 过期后同步刷新；刷新进行中返回旧数据
- 同一 key 并发刷新只执行一次
- refresh_all 的 is_updating 保护与后台任务启停
- 闲置 key 与超出上限的 key 退役
"""

import asyncio

import pytest

from src.core.infrastructure.cache import TTLCache
from src.core.infrastructure.health import HealthStatus
from src.modules.sources.application.chain import SourceChainFetcher
from src.modules.sources.application.snapshot_loader import CatalogSnapshotLoader
from src.modules.sources.domain.entities import FALLBACK_SOURCE, CatalogState
from src.modules.sources.domain.fetcher import SourceDescriptor

pytestmark = pytest.mark.anyio

TTL_SEC = 60


class ScriptedSource:
    """按顺序返回预设结果的数据源。"""

    def __init__(self, *results: list[str] | None, delay: float = 0.0) -> None:
        self.results = list(results)
        self.delay = delay
        self.calls = 0
        self.release = asyncio.Event()
        self.release.set()

    async def fetch(self, _target: str) -> list[str] | None:
        self.calls += 1
        await self.release.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.results:
            return None
        return self.results.pop(0)

    def descriptor(self, timeout_ms: int = 5000) -> SourceDescriptor[str, str]:
        return SourceDescriptor(
            name="scripted", priority=1, fetch=self.fetch, timeout_ms=timeout_ms
        )


def make_loader(
    fake_clock,
    source: ScriptedSource | None = None,
    deadline_sec: float = 2.0,
    timeout_ms: int = 5000,
    **options,
) -> CatalogSnapshotLoader[str, str]:
    descriptors = [source.descriptor(timeout_ms)] if source else []
    return CatalogSnapshotLoader(
        name="test",
        cache=TTLCache(TTL_SEC, clock=fake_clock),
        chain=SourceChainFetcher("test"),
        descriptors=descriptors,
        fallback=lambda target: [f"synthetic:{target}"],
        deadline_sec=deadline_sec,
        clock=fake_clock,
        **options,
    )


async def test_fresh_snapshot_served_without_refetch(fake_clock):
    source = ScriptedSource(["live"])
    loader = make_loader(fake_clock, source)

    first = await loader.load("k", "t")
    fake_clock.advance(TTL_SEC - 1)
    second = await loader.load("k", "t")

    assert first is second
    assert first.records == ("live",)
    assert first.source_used == "scripted"
    assert source.calls == 1
    assert loader.state("k") == CatalogState.FRESH


async def test_all_sources_failing_stores_fallback(fake_clock):
    loader = make_loader(fake_clock, ScriptedSource(None))

    snapshot = await loader.load("k", "t")

    assert snapshot.is_fallback is True
    assert snapshot.source_used == FALLBACK_SOURCE
    assert snapshot.records == ("synthetic:t",)
    assert loader.state("k") == CatalogState.FALLBACK


async def test_no_sources_configured_uses_fallback(fake_clock):
    loader = make_loader(fake_clock)

    snapshot = await loader.load("k", "t")

    assert snapshot.is_fallback is True
    assert len(snapshot) == 1


async def test_deadline_abandons_sources(fake_clock):
    source = ScriptedSource(["too late"], delay=1.0)
    loader = make_loader(fake_clock, source, deadline_sec=0.05)

    snapshot = await loader.load("k", "t")

    assert snapshot.is_fallback is True
    assert snapshot.records == ("synthetic:t",)


async def test_expired_snapshot_is_refreshed(fake_clock):
    source = ScriptedSource(["v1"], ["v2"])
    loader = make_loader(fake_clock, source)

    await loader.load("k", "t")
    fake_clock.advance(TTL_SEC)
    assert loader.state("k") == CatalogState.STALE

    snapshot = await loader.load("k", "t")

    assert snapshot.records == ("v2",)
    assert source.calls == 2


async def test_stale_snapshot_served_while_refreshing(fake_clock):
    source = ScriptedSource(["v1"], ["v2"])
    loader = make_loader(fake_clock, source)
    await loader.load("k", "t")
    fake_clock.advance(TTL_SEC)

    source.release.clear()
    refresh = asyncio.create_task(loader.refresh("k", "t"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert loader.state("k") == CatalogState.REFRESHING

    stale = await loader.load("k", "t")
    assert stale.records == ("v1",)

    source.release.set()
    fresh = await refresh
    assert fresh.records == ("v2",)
    assert loader.state("k") == CatalogState.FRESH


async def test_concurrent_refresh_shares_one_execution(fake_clock):
    source = ScriptedSource(["v1"], delay=0.05)
    loader = make_loader(fake_clock, source)

    results = await asyncio.gather(*(loader.load("k", "t") for _ in range(5)))

    assert source.calls == 1
    assert all(r is results[0] for r in results)


async def test_refresh_all_covers_registered_keys(fake_clock):
    source = ScriptedSource(["a"], ["b"])
    loader = make_loader(fake_clock, source)
    loader.register("k1", "t1")
    loader.register("k2", "t2")

    refreshed = await loader.refresh_all()

    assert refreshed == 2
    assert loader.cached("k1").records == ("a",)
    assert loader.cached("k2").records == ("b",)


async def test_refresh_all_skips_when_already_updating(fake_clock):
    source = ScriptedSource(["a"])
    loader = make_loader(fake_clock, source)
    loader.register("k", "t")

    source.release.clear()
    first = asyncio.create_task(loader.refresh_all())
    await asyncio.sleep(0)
    assert loader.is_updating is True

    assert await loader.refresh_all() == 0

    source.release.set()
    assert await first == 1
    assert loader.is_updating is False
    assert source.calls == 1


async def test_background_refresh_start_stop(fake_clock):
    source = ScriptedSource(["a"], ["b"], ["c"])
    loader = make_loader(fake_clock, source)
    loader.register("k", "t")

    loader.start(interval_sec=0.01)
    assert loader.is_running is True
    await asyncio.sleep(0.05)
    await loader.stop()

    assert loader.is_running is False
    assert source.calls >= 1
    assert loader.cached("k") is not None


async def test_health_reports_degraded_on_fallback(fake_clock):
    loader = make_loader(fake_clock)
    assert loader.health().status == HealthStatus.OK

    await loader.load("k", "t")
    health = loader.health()

    assert health.status == HealthStatus.DEGRADED
    assert health.states == {"k": "fallback"}
    assert health.cached_keys == 1


async def test_idle_keys_retired_with_their_cache_entries(fake_clock):
    loader = make_loader(fake_clock, idle_sec=300)
    for i in range(5):
        await loader.load(f"junk-{i}", f"t{i}")

    fake_clock.advance(301)
    await loader.load("k", "t")

    assert loader.keys == ["k"]
    assert loader.cached("junk-0") is None
    assert loader.health().cached_keys == 1


async def test_recently_read_key_is_kept(fake_clock):
    loader = make_loader(fake_clock, idle_sec=300)
    await loader.load("a", "t")
    fake_clock.advance(200)
    await loader.load("a", "t")
    fake_clock.advance(200)

    await loader.load("b", "t")

    assert loader.keys == ["a", "b"]


async def test_pinned_key_never_retired(fake_clock):
    loader = make_loader(fake_clock, idle_sec=300, max_keys=1)
    loader.register("listing", "t", pinned=True)
    await loader.load("listing", "t")

    fake_clock.advance(301)
    await loader.load("a", "t")
    fake_clock.advance(1)
    await loader.load("b", "t")

    assert loader.keys == ["listing", "b"]
    assert loader.cached("listing") is not None


async def test_key_limit_evicts_least_recently_read(fake_clock):
    loader = make_loader(fake_clock, max_keys=2)
    for key in ["a", "b", "c"]:
        await loader.load(key, "t")
        fake_clock.advance(1)

    assert loader.keys == ["b", "c"]
    assert loader.cached("a") is None


async def test_refresh_all_skips_retired_keys(fake_clock):
    source = ScriptedSource(["live"])
    loader = make_loader(fake_clock, source, idle_sec=300)
    await loader.load("k", "t")
    fake_clock.advance(301)

    refreshed = await loader.refresh_all()

    assert refreshed == 0
    assert loader.keys == []
    assert source.calls == 1
