"""合成价格模型。

所有外部数据源都失败时的兜底数据，同时也是预测 / 季节性 / 波动分析的计算核心。

预测模型（第 i 天，i = 1..days）：
    trend      = sin(i * 0.1) * market_trend * 0.05
    seasonal   = seasonal_factor * sin((i + month_index * 30) * 0.02)
    volatility = U(-0.5, 0.5) * volatility_factor * 0.1
    variation  = (trend + seasonal + volatility) * exp(-i * 0.01)
    price      = round(base * (1 + variation))
    confidence = max(0.3, 1 - i * 0.02)

各分量的上界保证 |variation| < 0.25，因此预测价始终在 [0.5 * base, 1.5 * base] 内。
供需分析只看当月：季节因子、是否收获期、节庆需求。
进出口走势为 12 个月的随机量值，价格影响 = (出口需求 - 进口压力) * 0.1。

随机源和"今天"都可注入，测试可以得到确定的结果。
"""

import calendar
import math
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from src.core.config import settings
from src.modules.market.domain import reference_data
from src.modules.market.domain.entities import (
    DemandIndicators,
    ExportImportTrends,
    InternationalFactors,
    InternationalPriceImpact,
    MarketConditions,
    MarketEquilibrium,
    PriceFactors,
    PricePoint,
    PricePrediction,
    PriceRecord,
    SeasonalTrend,
    SupplyDemandAnalysis,
    SupplyIndicators,
    TradeDirection,
    TradeTrend,
    TrendDirection,
    VolatilityAnalysis,
    VolatilityLevel,
)

PEAK_SEASON_FACTOR = 0.15
MIN_CONFIDENCE = 0.3
RECENT_DAYS = 7
VOLATILITY_WINDOW_DAYS = 30
HARVEST_SUPPLY_BOOST = 0.2
INTERNATIONAL_IMPACT_WEIGHT = 0.1


def round_half_up(value: float) -> int:
    """四舍五入（.5 向上取整）。"""
    return math.floor(value + 0.5)


def local_today() -> date:
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


@dataclass(frozen=True)
class PriceBand:
    """近期价格生成参数。

    modal = round(base * (1 + U*base_spread + sin(i*trend_frequency)*trend_amplitude
                          + U*market_spread))
    min   = max(round(modal * min_factor), base * min_floor)，不超过 modal
    max   = round(modal * max_factor)，不低于 modal
    """

    source_tag: str
    min_factor: float
    min_floor: float
    max_factor: float
    base_spread: float
    trend_amplitude: float
    trend_frequency: float
    market_spread: float


MARKET_BAND = PriceBand(
    source_tag="Market Intelligence",
    min_factor=0.92,
    min_floor=0.8,
    max_factor=1.08,
    base_spread=0.12,
    trend_amplitude=0.06,
    trend_frequency=0.4,
    market_spread=0.08,
)


class SyntheticPriceModel:
    """多因子合成价格模型。"""

    def __init__(
        self,
        rng: random.Random | None = None,
        today: Callable[[], date] | None = None,
        max_prediction_days: int | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._today = today or local_today
        self._max_prediction_days = (
            max_prediction_days or settings.PREDICTION_MAX_DAYS
        )

    # ------------------------------------------------------------------ factors

    def seasonal_factor(self, commodity: str, month: int) -> float:
        """当月是旺季 +0.15，淡季 -0.15，其余 0。month 取 1-12。"""
        pattern = reference_data.seasonal_pattern(commodity)
        if month in pattern.peak:
            return PEAK_SEASON_FACTOR
        if month in pattern.low:
            return -PEAK_SEASON_FACTOR
        return 0.0

    def market_trend_factor(self, commodity: str, state: str) -> float:
        return reference_data.market_trend(commodity, state) * 0.05

    def volatility_factor(self, commodity: str) -> float:
        return reference_data.volatility_factor(commodity) * 0.1

    def _noise(self) -> float:
        return self._rng.random() - 0.5

    # -------------------------------------------------------------- predictions

    def predict(
        self,
        commodity: str,
        state: str,
        market: str,
        days: int = 30,
    ) -> list[PricePrediction]:
        """生成未来 days 天（1..上限）的价格预测。"""
        days = max(1, min(days, self._max_prediction_days))
        today = self._today()
        base = reference_data.base_price(commodity)
        seasonal = self.seasonal_factor(commodity, today.month)
        trend_factor = self.market_trend_factor(commodity, state)
        volatility = self.volatility_factor(commodity)
        month_index = today.month - 1

        predictions: list[PricePrediction] = []
        for i in range(1, days + 1):
            trend_component = math.sin(i * 0.1) * trend_factor
            seasonal_component = seasonal * math.sin((i + month_index * 30) * 0.02)
            volatility_component = self._noise() * volatility
            time_decay = math.exp(-i * 0.01)

            variation = (
                trend_component + seasonal_component + volatility_component
            ) * time_decay
            predictions.append(
                PricePrediction(
                    date=today + timedelta(days=i),
                    predicted_price=round_half_up(base * (1 + variation)),
                    confidence=max(MIN_CONFIDENCE, 1 - i * 0.02),
                    factors=PriceFactors(
                        trend=round(trend_component, 2),
                        seasonal=round(seasonal_component, 2),
                        volatility=round(volatility_component, 2),
                    ),
                )
            )
        return predictions

    def recent_prices(
        self,
        commodity: str,
        state: str,
        market: str,
        days: int = RECENT_DAYS,
        band: PriceBand = MARKET_BAND,
    ) -> list[PriceRecord]:
        """生成最近 days 天的价格记录，最近的在前。"""
        days = max(1, days)
        today = self._today()
        base = reference_data.base_price(commodity)

        records: list[PriceRecord] = []
        for i in range(days):
            variation = (
                self._noise() * band.base_spread
                + math.sin(i * band.trend_frequency) * band.trend_amplitude
                + self._noise() * band.market_spread
            )
            modal = round_half_up(base * (1 + variation))
            min_price = min(
                round_half_up(max(modal * band.min_factor, base * band.min_floor)),
                modal,
            )
            max_price = max(round_half_up(modal * band.max_factor), modal)
            records.append(
                PriceRecord(
                    date=today - timedelta(days=i),
                    min_price=min_price,
                    max_price=max_price,
                    modal_price=modal,
                    commodity=commodity,
                    market=market,
                    state=state,
                    source_tag=band.source_tag,
                )
            )
        return records

    # ---------------------------------------------------------------- analytics

    def seasonal_trends(self, commodity: str) -> list[SeasonalTrend]:
        """12 个月的季节性价格走势。"""
        base = reference_data.base_price(commodity)
        trends: list[SeasonalTrend] = []
        for month_index in range(12):
            seasonal_variation = math.sin(month_index * math.pi / 6) * 0.2
            average = round_half_up(
                base * (1 + seasonal_variation + self._noise() * 0.15)
            )
            trends.append(
                SeasonalTrend(
                    month=calendar.month_name[month_index + 1],
                    month_number=month_index + 1,
                    average_price=average,
                    min_price=round_half_up(average * 0.85),
                    max_price=round_half_up(average * 1.15),
                    seasonal_factor=round(seasonal_variation, 2),
                    trend=TrendDirection(
                        reference_data.monthly_trend(commodity, month_index)
                    ),
                )
            )
        return trends

    def volatility_analysis(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> VolatilityAnalysis:
        """基于 30 天合成价格计算波动指标。"""
        today = self._today()
        base = reference_data.base_price(commodity)
        factor = reference_data.volatility_factor(commodity)

        points: list[PricePoint] = []
        for i in range(VOLATILITY_WINDOW_DAYS):
            variation = self._noise() * factor * 0.2 + math.sin(i * 0.2) * 0.05
            points.append(
                PricePoint(
                    date=today - timedelta(days=i),
                    price=round_half_up(base * (1 + variation)),
                )
            )

        prices = [p.price for p in points]
        mean = sum(prices) / len(prices)
        variance = sum((p - mean) ** 2 for p in prices) / len(prices)
        std_deviation = math.sqrt(variance)
        cv = (std_deviation / mean) * 100 if mean else 0.0

        return VolatilityAnalysis(
            commodity=commodity,
            state=state,
            market=market,
            mean_price=round_half_up(mean),
            std_deviation=round_half_up(std_deviation),
            coefficient_of_variation=round(cv, 2),
            volatility_level=self.volatility_level(cv),
            risk_score=round_half_up(
                min(100.0, cv * 2) * reference_data.risk_factor(commodity)
            ),
            price_data=points,
            recommendations=self.volatility_recommendations(cv),
        )

    @staticmethod
    def volatility_level(cv: float) -> VolatilityLevel:
        if cv < 10:
            return VolatilityLevel.LOW
        if cv < 20:
            return VolatilityLevel.MEDIUM
        if cv < 30:
            return VolatilityLevel.HIGH
        return VolatilityLevel.VERY_HIGH

    @staticmethod
    def volatility_recommendations(cv: float) -> list[str]:
        if cv < 10:
            return [
                "Market is stable",
                "Good for long-term planning",
                "Consider bulk storage",
            ]
        if cv < 20:
            return [
                "Moderate volatility",
                "Monitor prices closely",
                "Consider hedging strategies",
            ]
        return [
            "High volatility detected",
            "Consider selling in smaller lots",
            "Monitor daily price movements",
        ]

    def supply_demand_analysis(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> SupplyDemandAnalysis:
        """当月供需平衡分析。"""
        month = self._today().month
        seasonal = self.seasonal_factor(commodity, month)
        in_harvest = month in reference_data.harvest_months(commodity)
        festival = reference_data.festival_demand(month)

        supply = SupplyIndicators(
            overall_score=round(
                0.6 + seasonal + (HARVEST_SUPPLY_BOOST if in_harvest else 0.0), 2
            ),
            seasonal_availability=round(0.7 + seasonal, 2),
            harvest_timing=0.9 if in_harvest else 0.3,
            storage_capacity=0.8,
            transport_availability=0.85,
        )
        demand = DemandIndicators(
            overall_score=round(0.7 - seasonal + festival, 2),
            consumer_demand=round(0.8 - seasonal, 2),
            festival_demand=festival,
            export_demand=0.6,
            processing_demand=0.7,
        )

        ratio = demand.overall_score / supply.overall_score
        return SupplyDemandAnalysis(
            commodity=commodity,
            state=state,
            market=market,
            supply=supply,
            demand=demand,
            equilibrium=self.market_equilibrium(ratio),
            market_conditions=self.market_conditions(ratio),
        )

    @staticmethod
    def market_equilibrium(ratio: float) -> MarketEquilibrium:
        if ratio > 1.2:
            status = "Demand Exceeds Supply"
            impact = "Prices likely to increase"
            recommendation = "Consider holding stock for better prices"
        elif ratio > 0.9:
            status = "Balanced Market"
            impact = "Prices likely to remain stable"
            recommendation = "Market is balanced, sell based on your needs"
        elif ratio > 0.7:
            status = "Supply Exceeds Demand"
            impact = "Prices likely to decrease"
            recommendation = "Consider selling quickly before prices drop further"
        else:
            status = "Oversupply"
            impact = "Prices likely to decrease significantly"
            recommendation = "Consider selling quickly before prices drop further"
        return MarketEquilibrium(
            ratio=round(ratio, 2),
            status=status,
            price_impact=impact,
            recommendation=recommendation,
        )

    @staticmethod
    def market_conditions(ratio: float) -> MarketConditions:
        if ratio > 1.2:
            market_type = "Seller Market"
        elif ratio < 0.8:
            market_type = "Buyer Market"
        else:
            market_type = "Balanced Market"

        if ratio > 1.1:
            direction = "Upward"
        elif ratio < 0.9:
            direction = "Downward"
        else:
            direction = "Stable"

        if ratio > 1.3:
            urgency = "High (Sell)"
        elif ratio < 0.7:
            urgency = "High (Sell Fast)"
        else:
            urgency = "Normal"
        return MarketConditions(
            market_type=market_type, price_direction=direction, urgency=urgency
        )

    def export_import_trends(
        self,
        commodity: str,
        state: str,
        market: str,
    ) -> ExportImportTrends:
        """12 个月进出口走势及其对本地价格的影响。"""
        factors = reference_data.trade_factors(commodity)
        base = reference_data.base_price(commodity)
        impact = (
            factors.export_demand - factors.import_pressure
        ) * INTERNATIONAL_IMPACT_WEIGHT

        if factors.export_demand > 0.5:
            recommendations = [
                "High export demand",
                "Consider export opportunities",
                "Monitor global prices",
            ]
        elif factors.import_pressure > 0.3:
            recommendations = [
                "High import competition",
                "Focus on quality differentiation",
                "Monitor import trends",
            ]
        else:
            recommendations = [
                "Stable international market",
                "Focus on domestic demand",
                "Regular market monitoring",
            ]

        return ExportImportTrends(
            commodity=commodity,
            state=state,
            market=market,
            international_factors=InternationalFactors(
                export_demand=factors.export_demand,
                import_pressure=factors.import_pressure,
                global_price=factors.global_price,
            ),
            export_trends=self._trade_trends(volume=(500, 1000), value=(2e6, 5e6)),
            import_trends=self._trade_trends(volume=(200, 500), value=(1e6, 2e6)),
            price_impact=InternationalPriceImpact(
                percentage=round(impact * 100, 2),
                absolute=round_half_up(base * impact),
                direction="Positive" if impact > 0 else "Negative",
            ),
            recommendations=recommendations,
        )

    def _trade_trends(
        self,
        volume: tuple[float, float],
        value: tuple[float, float],
    ) -> list[TradeTrend]:
        """volume / value 为 (下限, 跨度)。"""
        trends: list[TradeTrend] = []
        for month in range(1, 13):
            trends.append(
                TradeTrend(
                    month=month,
                    volume=round_half_up(self._rng.random() * volume[1] + volume[0]),
                    value=round_half_up(self._rng.random() * value[1] + value[0]),
                    trend=(
                        TradeDirection.INCREASING
                        if self._rng.random() > 0.5
                        else TradeDirection.DECREASING
                    ),
                )
            )
        return trends
