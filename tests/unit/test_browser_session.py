"""共享浏览器会话单元测试。

测试覆盖：
- 并发 acquire 只启动一次
- page 无论成功 / 失败 / 超时都会关闭
- 启动失败、断开重连、release 幂等
"""

import asyncio

import pytest

from src.core.infrastructure.browser import (
    BrowserSessionManager,
    BrowserUnavailableError,
    ScrapeError,
)
from src.core.infrastructure.health import HealthStatus
from tests.fakes import FakeBrowser

pytestmark = pytest.mark.anyio


class CountingLauncher:
    """记录启动次数的启动函数，可配置延迟和失败。"""

    def __init__(self, delay: float = 0.0, error: Exception | None = None) -> None:
        self.delay = delay
        self.error = error
        self.calls = 0
        self.browsers: list[FakeBrowser] = []

    async def __call__(self) -> FakeBrowser:
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        browser = FakeBrowser("<html><body>ok</body></html>")
        self.browsers.append(browser)
        return browser


class TestAcquire:
    async def test_concurrent_acquire_launches_once(self):
        launcher = CountingLauncher(delay=0.05)
        session = BrowserSessionManager(launcher=launcher)

        browsers = await asyncio.gather(*(session.acquire() for _ in range(5)))

        assert launcher.calls == 1
        assert session.launch_count == 1
        assert all(b is browsers[0] for b in browsers)

    async def test_reuses_connected_browser(self):
        launcher = CountingLauncher()
        session = BrowserSessionManager(launcher=launcher)

        first = await session.acquire()
        second = await session.acquire()

        assert first is second
        assert launcher.calls == 1

    async def test_disconnected_browser_is_replaced(self):
        launcher = CountingLauncher()
        session = BrowserSessionManager(launcher=launcher)

        first = await session.acquire()
        first.connected = False
        second = await session.acquire()

        assert second is not first
        assert launcher.calls == 2

    async def test_launch_failure_raises_unavailable(self):
        launcher = CountingLauncher(error=RuntimeError("chromium not installed"))
        session = BrowserSessionManager(launcher=launcher)

        with pytest.raises(BrowserUnavailableError, match="chromium not installed"):
            await session.acquire()

        # 失败后不残留启动状态，下次调用会重新尝试
        assert session.is_running is False
        with pytest.raises(BrowserUnavailableError):
            await session.acquire()
        assert launcher.calls == 2


class TestWithPage:
    async def test_returns_result_and_closes_page(self):
        launcher = CountingLauncher()
        session = BrowserSessionManager(launcher=launcher)

        async def read(page):
            return await page.content()

        html = await session.with_page(read)

        assert "ok" in html
        page = launcher.browsers[0].pages[0]
        assert page.closed is True

    async def test_error_is_wrapped_and_page_closed(self):
        launcher = CountingLauncher()
        session = BrowserSessionManager(launcher=launcher)

        async def broken(_page):
            raise ValueError("selector missing")

        with pytest.raises(ScrapeError, match="selector missing"):
            await session.with_page(broken)

        assert launcher.browsers[0].pages[0].closed is True

    async def test_timeout_raises_scrape_error_and_closes_page(self):
        launcher = CountingLauncher()
        session = BrowserSessionManager(launcher=launcher)

        async def slow(_page):
            await asyncio.sleep(1)

        with pytest.raises(ScrapeError, match="timed out"):
            await session.with_page(slow, timeout=0.05)

        assert launcher.browsers[0].pages[0].closed is True

    async def test_every_call_gets_its_own_page(self):
        launcher = CountingLauncher()
        session = BrowserSessionManager(launcher=launcher)

        async def read(page):
            return await page.content()

        await asyncio.gather(*(session.with_page(read) for _ in range(3)))

        pages = launcher.browsers[0].pages
        assert len(pages) == 3
        assert all(p.closed for p in pages)
        assert launcher.calls == 1


class TestLifecycle:
    async def test_release_closes_browser_and_is_idempotent(self):
        launcher = CountingLauncher()
        session = BrowserSessionManager(launcher=launcher)
        browser = await session.acquire()

        await session.release()
        await session.release()

        assert browser.closed is True
        assert session.is_running is False

    async def test_release_without_launch(self):
        session = BrowserSessionManager(launcher=CountingLauncher())
        await session.release()
        assert session.launch_count == 0

    async def test_health(self):
        session = BrowserSessionManager(launcher=CountingLauncher())
        assert session.health().status == HealthStatus.SKIPPED

        await session.acquire()
        result = session.health().to_dict()
        assert result["status"] == "ok"
        assert result["running"] is True
        assert result["launch_count"] == 1
