"""Market application services."""

from datetime import UTC, datetime

from loguru import logger

from src.core.config import settings
from src.core.infrastructure.cache import CacheKeys
from src.modules.market.domain import reference_data
from src.modules.market.domain.entities import (
    AnalyticsDashboard,
    ExportImportTrends,
    MarketAnalysis,
    PricePrediction,
    PriceQuery,
    PriceRecord,
    SeasonalTrend,
    SupplyDemandAnalysis,
    VolatilityAnalysis,
)
from src.modules.market.domain.market_analysis import analyze_prices
from src.modules.market.domain.price_model import SyntheticPriceModel
from src.modules.sources.application.snapshot_loader import CatalogSnapshotLoader


class MarketPriceService:
    """市场价格与分析服务。

    近期价格走目录快照（数据源链或合成数据），预测和分析直接由合成模型计算。
    所有操作都不会抛错，也不会返回空列表。
    """

    def __init__(
        self,
        loader: CatalogSnapshotLoader[PriceQuery, PriceRecord],
        model: SyntheticPriceModel,
        history_days: int = settings.PRICE_HISTORY_DAYS,
    ) -> None:
        self.loader = loader
        self.model = model
        self.history_days = history_days
        self.logger = logger.bind(service="MarketPriceService")

    async def get_prices(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> list[PriceRecord]:
        """近期价格，最近的在前。"""
        target = PriceQuery(commodity=commodity, state=state, market=market)
        snapshot = await self.loader.load(
            CacheKeys.prices(commodity, state, market), target
        )
        if snapshot.is_fallback:
            self.logger.debug(f"Serving synthetic prices for {target}")
        records = sorted(snapshot.records, key=lambda r: r.date, reverse=True)
        return records[: self.history_days]

    def predict(
        self,
        commodity: str,
        state: str,
        market: str,
        days: int = 30,
    ) -> list[PricePrediction]:
        return self.model.predict(commodity, state, market, days)

    def seasonal_trends(self, commodity: str) -> list[SeasonalTrend]:
        return self.model.seasonal_trends(commodity)

    def volatility(self, commodity: str, state: str, market: str) -> VolatilityAnalysis:
        return self.model.volatility_analysis(commodity, state, market)

    def supply_demand(
        self, commodity: str, state: str, market: str
    ) -> SupplyDemandAnalysis:
        return self.model.supply_demand_analysis(commodity, state, market)

    def export_import(
        self, commodity: str, state: str, market: str
    ) -> ExportImportTrends:
        return self.model.export_import_trends(commodity, state, market)

    def dashboard(
        self,
        commodity: str,
        state: str,
        market: str,
        days: int = 30,
    ) -> AnalyticsDashboard:
        """一次生成全部分析。"""
        predictions = self.predict(commodity, state, market, days)
        return AnalyticsDashboard(
            commodity=commodity,
            state=state,
            market=market,
            prediction_days=len(predictions),
            price_prediction=predictions,
            seasonal_trends=self.seasonal_trends(commodity),
            volatility_analysis=self.volatility(commodity, state, market),
            supply_demand_analysis=self.supply_demand(commodity, state, market),
            export_import_trends=self.export_import(commodity, state, market),
            generated_at=datetime.now(UTC),
        )

    async def analysis(self, commodity: str, state: str, market: str) -> MarketAnalysis:
        """基于近期价格（快照）的走势、价差与建议。"""
        prices = await self.get_prices(commodity, state, market)
        return analyze_prices(commodity, state, market, prices)

    def commodities(self) -> list[str]:
        return list(reference_data.COMMODITIES)

    def states(self) -> list[str]:
        return list(reference_data.STATES)

    def markets(self, state: str) -> list[str]:
        return list(reference_data.markets_for(state))
