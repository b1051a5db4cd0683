"""Price analytics API routes."""

from fastapi import APIRouter, Depends, Query

from src.core.config import settings
from src.core.interfaces.http.response import ApiResponse
from src.modules.catalog.application.dependencies import get_resilient_catalog
from src.modules.catalog.application.resilient_catalog import ResilientCatalog
from src.modules.market.interfaces.schemas import (
    AnalyticsDashboardResponse,
    ExportImportResponse,
    PricePredictionResponse,
    SeasonalTrendResponse,
    SupplyDemandResponse,
    VolatilityResponse,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get(
    "/price-prediction",
    response_model=ApiResponse[list[PricePredictionResponse]],
    summary="价格预测",
    description="多因子模型预测未来 1-90 天价格，置信度随天数递减",
)
async def price_prediction(
    commodity: str = Query(..., min_length=1, description="品种"),
    state: str = Query(..., min_length=1, description="邦"),
    market: str = Query(..., min_length=1, description="市场"),
    days: int = Query(30, ge=1, le=settings.PREDICTION_MAX_DAYS, description="天数"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[list[PricePredictionResponse]]:
    predictions = catalog.generate_price_prediction(commodity, state, market, days)
    return ApiResponse.success(
        data=[PricePredictionResponse.model_validate(p) for p in predictions]
    )


@router.get(
    "/seasonal-trends",
    response_model=ApiResponse[list[SeasonalTrendResponse]],
    summary="季节性走势",
)
async def seasonal_trends(
    commodity: str = Query(..., min_length=1, description="品种"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[list[SeasonalTrendResponse]]:
    trends = catalog.generate_seasonal_trends(commodity)
    return ApiResponse.success(
        data=[SeasonalTrendResponse.model_validate(t) for t in trends]
    )


@router.get(
    "/volatility",
    response_model=ApiResponse[VolatilityResponse],
    summary="价格波动分析",
)
async def volatility(
    commodity: str = Query(..., min_length=1, description="品种"),
    state: str = Query(..., min_length=1, description="邦"),
    market: str = Query(..., min_length=1, description="市场"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[VolatilityResponse]:
    analysis = catalog.generate_volatility_analysis(commodity, state, market)
    return ApiResponse.success(data=VolatilityResponse.model_validate(analysis))


@router.get(
    "/supply-demand",
    response_model=ApiResponse[SupplyDemandResponse],
    summary="供需分析",
    description="按当月季节因子、收获期和节庆需求评估供需平衡",
)
async def supply_demand(
    commodity: str = Query(..., min_length=1, description="品种"),
    state: str = Query(..., min_length=1, description="邦"),
    market: str = Query(..., min_length=1, description="市场"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[SupplyDemandResponse]:
    analysis = catalog.generate_supply_demand_analysis(commodity, state, market)
    return ApiResponse.success(data=SupplyDemandResponse.model_validate(analysis))


@router.get(
    "/export-import",
    response_model=ApiResponse[ExportImportResponse],
    summary="进出口走势",
)
async def export_import(
    commodity: str = Query(..., min_length=1, description="品种"),
    state: str = Query(..., min_length=1, description="邦"),
    market: str = Query(..., min_length=1, description="市场"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[ExportImportResponse]:
    trends = catalog.generate_export_import_trends(commodity, state, market)
    return ApiResponse.success(data=ExportImportResponse.model_validate(trends))


@router.get(
    "/dashboard",
    response_model=ApiResponse[AnalyticsDashboardResponse],
    summary="分析汇总",
    description="一次返回价格预测、季节性、波动、供需和进出口分析",
)
async def dashboard(
    commodity: str = Query(..., min_length=1, description="品种"),
    state: str = Query(..., min_length=1, description="邦"),
    market: str = Query(..., min_length=1, description="市场"),
    days: int = Query(30, ge=1, le=settings.PREDICTION_MAX_DAYS, description="预测天数"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[AnalyticsDashboardResponse]:
    result = catalog.generate_analytics_dashboard(commodity, state, market, days)
    return ApiResponse.success(data=AnalyticsDashboardResponse.model_validate(result))
