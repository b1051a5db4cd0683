"""Scheme API routes."""

from fastapi import APIRouter, Depends, Query

from src.core.config import settings
from src.core.interfaces.http.response import ApiResponse, PaginatedResponse
from src.modules.catalog.application.dependencies import get_resilient_catalog
from src.modules.catalog.application.resilient_catalog import ResilientCatalog
from src.modules.schemes.domain.entities import FarmerProfile
from src.modules.schemes.interfaces.schemas import (
    ApplicationGuideResponse,
    CategoryResponse,
    EligibilityRequest,
    EligibilityResponse,
    SchemeDetailResponse,
    SchemeResponse,
)

router = APIRouter(prefix="/schemes", tags=["schemes"])


@router.get(
    "/search",
    response_model=PaginatedResponse[SchemeResponse],
    summary="检索政府方案",
    description="按关键词检索方案，支持类别 / 状态过滤；数据源不可用时返回内置方案集",
)
async def search_schemes(
    q: str | None = Query(None, description="关键词"),
    category: str | None = Query(None, description="类别过滤"),
    status: str | None = Query(None, description="状态过滤"),
    page: int = Query(settings.DEFAULT_PAGE, ge=1, description="页码"),
    page_size: int = Query(
        settings.SCHEMES_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="每页数量",
    ),
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> PaginatedResponse[SchemeResponse]:
    """Search schemes."""
    result = await catalog.search_schemes(
        query=q,
        filters={"category": category, "status": status},
        page=page,
        page_size=page_size,
    )
    return PaginatedResponse.create(
        items=[SchemeResponse.model_validate(s) for s in result.schemes],
        pagination=result.pagination,
        source_used=result.source_used,
        is_fallback=result.is_fallback,
    )


@router.get(
    "/categories",
    response_model=ApiResponse[list[CategoryResponse]],
    summary="获取方案类别",
)
async def list_categories(
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[list[CategoryResponse]]:
    categories = await catalog.get_categories()
    return ApiResponse.success(
        data=[CategoryResponse(name=c.name, count=c.count) for c in categories]
    )


@router.get(
    "/{scheme_id}",
    response_model=ApiResponse[SchemeDetailResponse],
    summary="获取方案详情",
)
async def get_scheme(
    scheme_id: str,
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[SchemeDetailResponse]:
    """Get scheme details by ID."""
    scheme = await catalog.get_scheme_details(scheme_id)
    return ApiResponse.success(data=SchemeDetailResponse.model_validate(scheme))


@router.post(
    "/{scheme_id}/eligibility",
    response_model=ApiResponse[EligibilityResponse],
    summary="检查申请资格",
)
async def check_eligibility(
    scheme_id: str,
    request: EligibilityRequest,
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[EligibilityResponse]:
    profile = FarmerProfile(
        land_ownership=request.land_ownership,
        farm_size=request.farm_size,
        annual_income=request.annual_income,
        state=request.state,
    )
    result = await catalog.check_eligibility(scheme_id, profile)
    return ApiResponse.success(data=EligibilityResponse.model_validate(result))


@router.get(
    "/{scheme_id}/application-guide",
    response_model=ApiResponse[ApplicationGuideResponse],
    summary="获取申请指引",
)
async def get_application_guide(
    scheme_id: str,
    catalog: ResilientCatalog = Depends(get_resilient_catalog),
) -> ApiResponse[ApplicationGuideResponse]:
    guide = await catalog.get_application_guide(scheme_id)
    return ApiResponse.success(data=ApplicationGuideResponse.model_validate(guide))
