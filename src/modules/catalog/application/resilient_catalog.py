"""ResilientCatalog：方案与价格的统一入口。

读取顺序：新鲜缓存 -> 数据源链（全局截止时间内）-> 合成数据。
列表和价格类操作永不抛错、永不返回空列表；唯一对外可见的错误是方案详情不存在。
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from src.core.config import settings
from src.modules.catalog.application.context import CatalogContext
from src.modules.market.domain.entities import (
    AnalyticsDashboard,
    ExportImportTrends,
    MarketAnalysis,
    PricePrediction,
    PriceRecord,
    SeasonalTrend,
    SupplyDemandAnalysis,
    VolatilityAnalysis,
)
from src.modules.schemes.application.models import SchemeCategory, SchemeSearchResult
from src.modules.schemes.domain.entities import (
    ApplicationGuide,
    EligibilityResult,
    FarmerProfile,
    Scheme,
    SchemeQuery,
)


class ResilientCatalog:
    """目录门面。"""

    def __init__(
        self,
        context: CatalogContext,
        refresh_enabled: bool = settings.CATALOG_REFRESH_ENABLED,
        refresh_interval_sec: float = settings.CATALOG_REFRESH_INTERVAL_SEC,
    ) -> None:
        self.context = context
        self.refresh_enabled = refresh_enabled
        self.refresh_interval_sec = refresh_interval_sec

    # ---------------------------------------------------------------- lifecycle

    async def start(self) -> None:
        """登记方案列表并启动后台刷新。"""
        self.context.scheme_loader.register(
            self.context.schemes.listing_key, SchemeQuery(), pinned=True
        )
        if not self.refresh_enabled:
            logger.info("Catalog background refresh disabled")
            return
        for loader in self.context.loaders:
            loader.start(self.refresh_interval_sec)

    async def stop(self) -> None:
        """停止后台刷新并释放浏览器。"""
        for loader in self.context.loaders:
            await loader.stop()
        await self.context.browser.release(reason="shutdown")

    def health(self) -> dict[str, Any]:
        return {
            "browser": self.context.browser.health().to_dict(),
            "catalogs": [loader.health().to_dict() for loader in self.context.loaders],
        }

    # ------------------------------------------------------------------ schemes

    async def search_schemes(
        self,
        query: str | None = None,
        filters: Mapping[str, str | None] | None = None,
        page: int = settings.DEFAULT_PAGE,
        page_size: int = settings.SCHEMES_PAGE_SIZE,
    ) -> SchemeSearchResult:
        filters = filters or {}
        return await self.context.schemes.search(
            query=query,
            category=filters.get("category"),
            status=filters.get("status"),
            page=page,
            page_size=page_size,
        )

    async def get_scheme_details(self, scheme_id: str) -> Scheme:
        return await self.context.schemes.get_details(scheme_id)

    async def check_eligibility(
        self,
        scheme_id: str,
        profile: FarmerProfile,
    ) -> EligibilityResult:
        return await self.context.schemes.check_eligibility(scheme_id, profile)

    async def get_application_guide(self, scheme_id: str) -> ApplicationGuide:
        return await self.context.schemes.get_application_guide(scheme_id)

    async def get_categories(self) -> list[SchemeCategory]:
        return await self.context.schemes.get_categories()

    # ------------------------------------------------------------------- market

    async def get_market_prices(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> list[PriceRecord]:
        return await self.context.market.get_prices(commodity, state, market)

    def generate_price_prediction(
        self,
        commodity: str,
        state: str,
        market: str,
        days: int = 30,
    ) -> list[PricePrediction]:
        return self.context.market.predict(commodity, state, market, days)

    def generate_seasonal_trends(self, commodity: str) -> list[SeasonalTrend]:
        return self.context.market.seasonal_trends(commodity)

    def generate_volatility_analysis(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> VolatilityAnalysis:
        return self.context.market.volatility(commodity, state, market)

    def generate_supply_demand_analysis(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> SupplyDemandAnalysis:
        return self.context.market.supply_demand(commodity, state, market)

    def generate_export_import_trends(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> ExportImportTrends:
        return self.context.market.export_import(commodity, state, market)

    def generate_analytics_dashboard(
        self,
        commodity: str,
        state: str,
        market: str,
        days: int = 30,
    ) -> AnalyticsDashboard:
        return self.context.market.dashboard(commodity, state, market, days)

    async def get_market_analysis(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> MarketAnalysis:
        return await self.context.market.analysis(commodity, state, market)

    def get_available_commodities(self) -> list[str]:
        return self.context.market.commodities()

    def get_available_states(self) -> list[str]:
        return self.context.market.states()

    def get_available_markets(self, state: str) -> list[str]:
        return self.context.market.markets(state)
