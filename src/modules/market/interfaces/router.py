"""Market price API routes."""

from fastapi import APIRouter, Depends, Query

from src.core.interfaces.http.response import ApiResponse
from src.modules.catalog.application.dependencies import get_resilient_catalog
from src.modules.catalog.application.resilient_catalog import ResilientCatalog
from src.modules.market.interfaces.schemas import (
    MarketAnalysisResponse,
    PriceRecordResponse,
)

router = APIRouter(prefix="/market", tags=["market"])


@router.get(
    "/prices",
    response_model=ApiResponse[list[PriceRecordResponse]],
    summary="获取近期市场价格",
    description="返回最近 7 天价格（最近的在前）；数据源不可用时返回合成数据",
)
async def get_market_prices(
    commodity: str = Query(..., min_length=1, description="品种"),
    state: str = Query(..., min_length=1, description="邦"),
    market: str = Query(..., min_length=1, description="市场"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[list[PriceRecordResponse]]:
    records = await catalog.get_market_prices(commodity, state, market)
    return ApiResponse.success(
        data=[PriceRecordResponse.model_validate(r) for r in records],
        meta={"source_tag": records[0].source_tag if records else None},
    )


@router.get(
    "/analysis",
    response_model=ApiResponse[MarketAnalysisResponse],
    summary="近期价格分析",
    description="基于近期价格给出走势、价差水平、建议和文字解读",
)
async def get_market_analysis(
    commodity: str = Query(..., min_length=1, description="品种"),
    state: str = Query(..., min_length=1, description="邦"),
    market: str = Query(..., min_length=1, description="市场"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[MarketAnalysisResponse]:
    analysis = await catalog.get_market_analysis(commodity, state, market)
    return ApiResponse.success(data=MarketAnalysisResponse.model_validate(analysis))


@router.get(
    "/commodities",
    response_model=ApiResponse[list[str]],
    summary="可查询的品种",
)
async def list_commodities(
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[list[str]]:
    return ApiResponse.success(data=catalog.get_available_commodities())


@router.get(
    "/states",
    response_model=ApiResponse[list[str]],
    summary="可查询的邦",
)
async def list_states(
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[list[str]]:
    return ApiResponse.success(data=catalog.get_available_states())


@router.get(
    "/markets",
    response_model=ApiResponse[list[str]],
    summary="某邦的市场列表",
)
async def list_markets(
    state: str = Query(..., min_length=1, description="邦"),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[list[str]]:
    return ApiResponse.success(data=catalog.get_available_markets(state))
