"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不访问任何外部数据源，浏览器与 HTTP 都用假实现）

使用方法：
    # 运行所有测试
    uv run pytest

    # 运行带覆盖率
    uv run pytest --cov=src --cov-report=html
"""

import random
from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings
from src.core.infrastructure.browser import BrowserSessionManager
from src.modules.catalog.application.context import (
    CatalogContext,
    build_catalog_context,
)
from src.modules.catalog.application.resilient_catalog import ResilientCatalog
from src.modules.market.domain.price_model import SyntheticPriceModel
from tests.fakes import FIXED_TODAY, FakeBrowser, FakeClock


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """测试环境配置。"""
    return Settings(
        ENVIRONMENT="local",
        CATALOG_REFRESH_ENABLED=False,  # 测试时不启动后台刷新
        CATALOG_REQUEST_DEADLINE_SEC=2.0,
    )


# ============================================
# 时间控制
# ============================================


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


# ============================================
# 浏览器 Fakes
# ============================================


@pytest.fixture
def fake_browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def browser_session(fake_browser: FakeBrowser) -> BrowserSessionManager:
    """注入假浏览器的会话管理器。"""

    async def launcher() -> FakeBrowser:
        return fake_browser

    return BrowserSessionManager(launcher=launcher, page_timeout_sec=1.0)


# ============================================
# 目录 Fixtures
# ============================================


@pytest.fixture
def price_model() -> SyntheticPriceModel:
    """固定随机种子和日期的合成价格模型。"""
    return SyntheticPriceModel(rng=random.Random(42), today=lambda: FIXED_TODAY)


@pytest.fixture
def catalog_factory(
    browser_session: BrowserSessionManager,
    price_model: SyntheticPriceModel,
    fake_clock: FakeClock,
) -> Callable[..., CatalogContext]:
    """创建不带任何外部数据源的目录上下文（默认全部走兜底数据）。"""

    def factory(**overrides: Any) -> CatalogContext:
        options: dict[str, Any] = {
            "browser": browser_session,
            "scheme_descriptors": [],
            "price_descriptors": [],
            "price_model": price_model,
            "clock": fake_clock,
            "deadline_sec": 2.0,
        }
        options.update(overrides)
        return build_catalog_context(**options)

    return factory


@pytest.fixture
def catalog(catalog_factory: Callable[..., CatalogContext]) -> ResilientCatalog:
    return ResilientCatalog(catalog_factory(), refresh_enabled=False)


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
async def async_client(
    test_settings: Settings,
    catalog: ResilientCatalog,
) -> AsyncGenerator[AsyncClient, None]:
    """异步 HTTP 客户端（用于 API 测试）。

    ASGITransport 不触发 lifespan，目录实例直接挂到 app.state 上。
    """
    _ = test_settings
    from main import app

    app.state.catalog = catalog
    await catalog.start()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    await catalog.stop()
    del app.state.catalog
