"""共享无头浏览器会话管理。

整个进程最多只有一个浏览器实例：
- 延迟创建，跨调用复用，断开后整体替换
- 并发调用 acquire() 只会触发一次启动（共享同一个进行中的 Future）
- 每次抓取打开独立的 page，结束后无条件关闭
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import settings
from src.core.infrastructure.browser.exceptions import (
    BrowserUnavailableError,
    ScrapeError,
)
from src.core.infrastructure.health import BrowserHealthResult, HealthStatus
from src.core.infrastructure.logging import BusinessEvents

if TYPE_CHECKING:
    from playwright.async_api import Browser, Page, Playwright

T = TypeVar("T")

BrowserLauncher = Callable[[], Awaitable["Browser"]]

CHROMIUM_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
    "--no-default-browser-check",
    "--no-sandbox",
]


class BrowserSessionManager:
    """共享浏览器会话管理器。"""

    def __init__(
        self,
        *,
        launcher: BrowserLauncher | None = None,
        headless: bool | None = None,
        page_timeout_sec: float | None = None,
        user_agent: str | None = None,
        accept_language: str | None = None,
    ) -> None:
        """初始化会话管理器。

        Args:
            launcher: 自定义启动函数（测试时注入），默认启动 playwright chromium
            headless: 是否无头模式
            page_timeout_sec: 单次 page 任务的硬超时
            user_agent: page 使用的 User-Agent
            accept_language: page 使用的 Accept-Language
        """
        self._launcher = launcher or self._launch_chromium
        self._headless = settings.BROWSER_HEADLESS if headless is None else headless
        self._page_timeout_sec = page_timeout_sec or settings.BROWSER_PAGE_TIMEOUT_SEC
        self._user_agent = user_agent or settings.FETCHER_USER_AGENT
        self._accept_language = accept_language or settings.FETCHER_ACCEPT_LANGUAGE

        self._browser: Browser | None = None
        self._launching: asyncio.Future[Browser] | None = None
        self._playwright: Playwright | None = None
        self._launch_count = 0

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    @property
    def launch_count(self) -> int:
        return self._launch_count

    async def acquire(self) -> Browser:
        """获取共享浏览器实例。

        Raises:
            BrowserUnavailableError: 浏览器启动失败
        """
        browser = self._browser
        if browser is not None and browser.is_connected():
            return browser
        if browser is not None:
            logger.warning("Shared browser disconnected, launching a new one")
            self._browser = None

        if self._launching is None:
            self._launching = asyncio.ensure_future(self._create())

        # shield: 单个调用方被取消时不影响其他等待同一次启动的调用方
        return await asyncio.shield(self._launching)

    async def with_page(
        self,
        fn: Callable[[Page], Awaitable[T]],
        *,
        timeout: float | None = None,
    ) -> T:
        """打开新 page 执行 fn，无论成功、失败或超时都关闭 page。

        Raises:
            BrowserUnavailableError: 浏览器启动失败
            ScrapeError: page 打开失败、fn 抛错或超时
        """
        browser = await self.acquire()

        try:
            page = await browser.new_page(
                user_agent=self._user_agent,
                extra_http_headers={"Accept-Language": self._accept_language},
            )
        except Exception as e:
            self._discard_if_disconnected(browser)
            raise ScrapeError(f"Failed to open page: {e}") from e

        limit = timeout or self._page_timeout_sec
        try:
            return await asyncio.wait_for(fn(page), timeout=limit)
        except TimeoutError as e:
            raise ScrapeError(f"Page task timed out after {limit:.1f}s") from e
        except ScrapeError:
            raise
        except Exception as e:
            raise ScrapeError(f"Page task failed: {e}") from e
        finally:
            await self._close_page(page)
            self._discard_if_disconnected(browser)

    async def release(self, reason: str = "shutdown") -> None:
        """关闭共享浏览器并清理状态（幂等）。"""
        launching = self._launching
        if launching is not None and not launching.done():
            try:
                await asyncio.shield(launching)
            except BrowserUnavailableError as e:
                logger.debug(f"Pending browser launch failed during release: {e}")

        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None

        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.warning(f"Failed to close shared browser: {e}")
            BusinessEvents.browser_released(reason=reason)

        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning(f"Failed to stop playwright driver: {e}")

    def health(self) -> BrowserHealthResult:
        """浏览器未启动不视为异常（按需启动）。"""
        return BrowserHealthResult(
            status=HealthStatus.OK if self.is_running else HealthStatus.SKIPPED,
            running=self.is_running,
            launching=self._launching is not None,
            launch_count=self._launch_count,
        )

    async def _create(self) -> Browser:
        start_time = time.time()
        try:
            browser = await self._launcher()
        except Exception as e:
            logger.error(f"Browser launch failed: {e}")
            raise BrowserUnavailableError(f"Browser launch failed: {e}") from e
        finally:
            self._launching = None

        self._browser = browser
        self._launch_count += 1
        BusinessEvents.browser_launched(
            duration_ms=int((time.time() - start_time) * 1000),
            launch_count=self._launch_count,
        )
        return browser

    @retry(
        retry=retry_if_exception_type(PlaywrightError),
        stop=stop_after_attempt(settings.BROWSER_LAUNCH_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        reraise=True,
    )
    async def _launch_chromium(self) -> Browser:
        """启动 playwright chromium。"""
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        logger.info(f"Launching shared chromium (headless={self._headless})")
        return await self._playwright.chromium.launch(
            headless=self._headless,
            args=CHROMIUM_ARGS,
        )

    async def _close_page(self, page: Page) -> None:
        try:
            await page.close()
        except Exception as e:
            logger.debug(f"Failed to close page: {e}")

    def _discard_if_disconnected(self, browser: Browser) -> None:
        if self._browser is browser and not browser.is_connected():
            logger.warning("Shared browser reported disconnection, discarding handle")
            self._browser = None
