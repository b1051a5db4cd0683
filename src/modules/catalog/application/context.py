"""目录组件装配。

所有共享状态（浏览器会话、缓存、加载器）都挂在 CatalogContext 上，
由应用 lifespan 创建一次并显式注入，不使用模块级单例。
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from src.core.config import settings
from src.core.infrastructure.browser import BrowserSessionManager
from src.core.infrastructure.cache import TTLCache
from src.modules.market.application.services import MarketPriceService
from src.modules.market.domain.entities import PriceQuery, PriceRecord
from src.modules.market.domain.price_model import SyntheticPriceModel
from src.modules.schemes.application.services import SchemeCatalogService
from src.modules.schemes.domain.entities import Scheme, SchemeQuery, unique_schemes
from src.modules.schemes.infrastructure.fallback_schemes import fallback_schemes
from src.modules.sources.application.chain import SourceChainFetcher
from src.modules.sources.application.snapshot_loader import CatalogSnapshotLoader
from src.modules.sources.domain.fetcher import SourceDescriptor
from src.modules.sources.infrastructure.fetchers import FetcherFactory

SCHEMES_CATALOG = "schemes"
PRICES_CATALOG = "prices"


@dataclass
class CatalogContext:
    """目录运行期依赖。"""

    browser: BrowserSessionManager
    scheme_loader: CatalogSnapshotLoader[SchemeQuery, Scheme]
    price_loader: CatalogSnapshotLoader[PriceQuery, PriceRecord]
    schemes: SchemeCatalogService
    market: MarketPriceService

    @property
    def loaders(self) -> list[CatalogSnapshotLoader[Any, Any]]:
        return [self.scheme_loader, self.price_loader]


def build_catalog_context(
    *,
    browser: BrowserSessionManager | None = None,
    scheme_descriptors: Sequence[SourceDescriptor[SchemeQuery, Scheme]] | None = None,
    price_descriptors: Sequence[SourceDescriptor[PriceQuery, PriceRecord]] | None = None,
    price_model: SyntheticPriceModel | None = None,
    clock: Callable[[], float] = time.monotonic,
    deadline_sec: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CatalogContext:
    """创建目录上下文。

    Args:
        browser: 共享浏览器会话，不传则新建
        scheme_descriptors: 方案数据源，不传则按 settings.SCHEME_SOURCES 创建
        price_descriptors: 价格数据源，不传则按 settings.PRICE_SOURCES 创建
        price_model: 合成价格模型，不传则使用默认随机源
        clock: 缓存与 key 退役使用的时钟（测试时注入）
        deadline_sec: 单次刷新的全局截止时间
        transport: HTTP 数据源使用的 transport（测试用）
    """
    browser = browser or BrowserSessionManager()
    model = price_model or SyntheticPriceModel()
    deadline = deadline_sec or settings.CATALOG_REQUEST_DEADLINE_SEC

    factory = FetcherFactory(browser=browser, transport=transport)
    if scheme_descriptors is None:
        scheme_descriptors = factory.build_descriptors(settings.SCHEME_SOURCES)
    if price_descriptors is None:
        price_descriptors = factory.build_descriptors(settings.PRICE_SOURCES)

    def synthetic_prices(target: PriceQuery) -> list[PriceRecord]:
        return model.recent_prices(
            target.commodity,
            target.state,
            target.market,
            days=settings.PRICE_HISTORY_DAYS,
        )

    scheme_loader: CatalogSnapshotLoader[SchemeQuery, Scheme] = CatalogSnapshotLoader(
        name=SCHEMES_CATALOG,
        cache=TTLCache(settings.SCHEME_CACHE_TTL_SEC, clock=clock),
        chain=SourceChainFetcher(SCHEMES_CATALOG),
        descriptors=scheme_descriptors,
        fallback=fallback_schemes,
        deadline_sec=deadline,
        postprocess=unique_schemes,
        clock=clock,
        idle_sec=settings.CATALOG_KEY_IDLE_SEC,
        max_keys=settings.CATALOG_MAX_KEYS,
    )
    price_loader: CatalogSnapshotLoader[PriceQuery, PriceRecord] = CatalogSnapshotLoader(
        name=PRICES_CATALOG,
        cache=TTLCache(settings.PRICE_CACHE_TTL_SEC, clock=clock),
        chain=SourceChainFetcher(PRICES_CATALOG),
        descriptors=price_descriptors,
        fallback=synthetic_prices,
        deadline_sec=deadline,
        clock=clock,
        idle_sec=settings.CATALOG_KEY_IDLE_SEC,
        max_keys=settings.CATALOG_MAX_KEYS,
    )

    return CatalogContext(
        browser=browser,
        scheme_loader=scheme_loader,
        price_loader=price_loader,
        schemes=SchemeCatalogService(
            loader=scheme_loader,
            detail_cache=TTLCache(settings.SCHEME_DETAIL_CACHE_TTL_SEC, clock=clock),
        ),
        market=MarketPriceService(loader=price_loader, model=model),
    )
