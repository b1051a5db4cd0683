"""Market domain entities."""

from dataclasses import dataclass
import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


@dataclass(frozen=True)
class PriceQuery:
    """价格查询目标（数据源链的 target）。"""

    commodity: str
    state: str
    market: str

    def __str__(self) -> str:
        return f"{self.commodity}@{self.market}, {self.state}"


class PriceRecord(BaseModel):
    """单日市场价格记录（卢比/公斤）。"""

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(..., description="价格日期")
    min_price: int = Field(..., ge=0, description="最低价")
    max_price: int = Field(..., ge=0, description="最高价")
    modal_price: int = Field(..., ge=0, description="众数价（成交最多的价格）")
    commodity: str = Field(..., description="品种")
    market: str = Field(..., description="市场")
    state: str = Field(default="", description="邦")
    source_tag: str = Field(..., description="数据来源标记")

    @model_validator(mode="after")
    def _check_bounds(self) -> "PriceRecord":
        if not self.min_price <= self.modal_price <= self.max_price:
            raise ValueError(
                f"price bounds violated: min={self.min_price} "
                f"modal={self.modal_price} max={self.max_price}"
            )
        return self


class PriceFactors(BaseModel):
    """预测价格的组成因子（已四舍五入到 2 位小数）。"""

    model_config = ConfigDict(frozen=True)

    trend: float
    seasonal: float
    volatility: float


class PricePrediction(BaseModel):
    """单日价格预测。"""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    predicted_price: int = Field(..., ge=0)
    confidence: float = Field(..., gt=0, le=1)
    factors: PriceFactors


class TrendDirection(str, Enum):
    RISING = "Rising"
    FALLING = "Falling"
    STABLE = "Stable"
    PEAK = "Peak"


class SeasonalTrend(BaseModel):
    """单月季节性价格统计。"""

    model_config = ConfigDict(frozen=True)

    month: str
    month_number: int = Field(..., ge=1, le=12)
    average_price: int
    min_price: int
    max_price: int
    seasonal_factor: float
    trend: TrendDirection


class VolatilityLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class PricePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    price: int


class VolatilityAnalysis(BaseModel):
    """近 30 天价格波动分析。"""

    model_config = ConfigDict(frozen=True)

    commodity: str
    state: str
    market: str
    mean_price: int
    std_deviation: int
    coefficient_of_variation: float
    volatility_level: VolatilityLevel
    risk_score: int = Field(..., ge=0)
    price_data: list[PricePoint] = Field(default_factory=list, description="最近在前")
    recommendations: list[str] = Field(default_factory=list)


class SupplyIndicators(BaseModel):
    """供给指标（0-1 之间的评分，已四舍五入到 2 位小数）。"""

    model_config = ConfigDict(frozen=True)

    overall_score: float
    seasonal_availability: float
    harvest_timing: float
    storage_capacity: float
    transport_availability: float


class DemandIndicators(BaseModel):
    """需求指标。"""

    model_config = ConfigDict(frozen=True)

    overall_score: float
    consumer_demand: float
    festival_demand: float
    export_demand: float
    processing_demand: float


class MarketEquilibrium(BaseModel):
    """供需平衡：ratio = 需求评分 / 供给评分。"""

    model_config = ConfigDict(frozen=True)

    ratio: float
    status: str
    price_impact: str
    recommendation: str


class MarketConditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    market_type: str
    price_direction: str
    urgency: str


class SupplyDemandAnalysis(BaseModel):
    """当月供需分析。"""

    model_config = ConfigDict(frozen=True)

    commodity: str
    state: str
    market: str
    supply: SupplyIndicators
    demand: DemandIndicators
    equilibrium: MarketEquilibrium
    market_conditions: MarketConditions


class TradeDirection(str, Enum):
    INCREASING = "Increasing"
    DECREASING = "Decreasing"


class TradeTrend(BaseModel):
    """单月进出口量（吨）与金额（卢比）。"""

    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    volume: int = Field(..., ge=0)
    value: int = Field(..., ge=0)
    trend: TradeDirection


class InternationalFactors(BaseModel):
    model_config = ConfigDict(frozen=True)

    export_demand: float
    import_pressure: float
    global_price: float


class InternationalPriceImpact(BaseModel):
    """国际贸易对本地价格的影响。"""

    model_config = ConfigDict(frozen=True)

    percentage: float
    absolute: int
    direction: str


class ExportImportTrends(BaseModel):
    """进出口走势分析。"""

    model_config = ConfigDict(frozen=True)

    commodity: str
    state: str
    market: str
    international_factors: InternationalFactors
    export_trends: list[TradeTrend]
    import_trends: list[TradeTrend]
    price_impact: InternationalPriceImpact
    recommendations: list[str] = Field(default_factory=list)


class AnalyticsDashboard(BaseModel):
    """一次请求汇总全部分析结果。"""

    model_config = ConfigDict(frozen=True)

    commodity: str
    state: str
    market: str
    prediction_days: int
    price_prediction: list[PricePrediction]
    seasonal_trends: list[SeasonalTrend]
    volatility_analysis: VolatilityAnalysis
    supply_demand_analysis: SupplyDemandAnalysis
    export_import_trends: ExportImportTrends
    generated_at: dt.datetime


class PriceTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class PriceSpread(str, Enum):
    """近期日内价差（(max - min) / min）的水平。"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MarketAnalysis(BaseModel):
    """基于近期价格的市场分析。"""

    model_config = ConfigDict(frozen=True)

    commodity: str
    state: str
    market: str
    price_trend: PriceTrend
    volatility: PriceSpread
    recommendation: str
    insights: list[str] = Field(default_factory=list)
    prices: list[PriceRecord] = Field(default_factory=list, description="最近在前")
