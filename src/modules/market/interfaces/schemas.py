"""Market API schemas."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from src.modules.market.domain.entities import (
    PriceSpread,
    PriceTrend,
    TradeDirection,
    TrendDirection,
    VolatilityLevel,
)


class PriceRecordResponse(BaseModel):
    """Daily price response (₹/kg)."""

    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    min_price: int = Field(..., description="最低价")
    max_price: int = Field(..., description="最高价")
    modal_price: int = Field(..., description="众数价")
    commodity: str
    market: str
    state: str
    source_tag: str = Field(..., description="数据来源标记")


class PriceFactorsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    trend: float
    seasonal: float
    volatility: float


class PricePredictionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    predicted_price: int
    confidence: float
    factors: PriceFactorsSchema


class SeasonalTrendResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str
    month_number: int
    average_price: int
    min_price: int
    max_price: int
    seasonal_factor: float
    trend: TrendDirection


class PricePointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    price: int


class VolatilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    commodity: str
    state: str
    market: str
    mean_price: int
    std_deviation: int
    coefficient_of_variation: float
    volatility_level: VolatilityLevel
    risk_score: int
    price_data: list[PricePointSchema]
    recommendations: list[str]


class SupplyIndicatorsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    overall_score: float
    seasonal_availability: float
    harvest_timing: float
    storage_capacity: float
    transport_availability: float


class DemandIndicatorsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    overall_score: float
    consumer_demand: float
    festival_demand: float
    export_demand: float
    processing_demand: float


class MarketEquilibriumSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ratio: float = Field(..., description="需求评分 / 供给评分")
    status: str
    price_impact: str
    recommendation: str


class MarketConditionsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    market_type: str
    price_direction: str
    urgency: str


class SupplyDemandResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    commodity: str
    state: str
    market: str
    supply: SupplyIndicatorsSchema
    demand: DemandIndicatorsSchema
    equilibrium: MarketEquilibriumSchema
    market_conditions: MarketConditionsSchema


class TradeTrendSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    volume: int = Field(..., description="吨")
    value: int = Field(..., description="卢比")
    trend: TradeDirection


class InternationalFactorsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    export_demand: float
    import_pressure: float
    global_price: float


class InternationalPriceImpactSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    percentage: float
    absolute: int
    direction: str


class ExportImportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    commodity: str
    state: str
    market: str
    international_factors: InternationalFactorsSchema
    export_trends: list[TradeTrendSchema]
    import_trends: list[TradeTrendSchema]
    price_impact: InternationalPriceImpactSchema
    recommendations: list[str]


class AnalyticsDashboardResponse(BaseModel):
    """Combined analytics for one commodity / market."""

    model_config = ConfigDict(from_attributes=True)

    commodity: str
    state: str
    market: str
    prediction_days: int
    price_prediction: list[PricePredictionResponse]
    seasonal_trends: list[SeasonalTrendResponse]
    volatility_analysis: VolatilityResponse
    supply_demand_analysis: SupplyDemandResponse
    export_import_trends: ExportImportResponse
    generated_at: dt.datetime


class MarketAnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    commodity: str
    state: str
    market: str
    price_trend: PriceTrend
    volatility: PriceSpread = Field(..., description="近期日内价差水平")
    recommendation: str
    insights: list[str]
    prices: list[PriceRecordResponse] = Field(..., description="最近在前")
