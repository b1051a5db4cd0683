"""Scheme application services."""

from loguru import logger

from src.core.application.pagination import SearchPaginator
from src.core.config import settings
from src.core.infrastructure.cache import CacheKeys, TTLCache
from src.modules.schemes.application.models import SchemeCategory, SchemeSearchResult
from src.modules.schemes.domain.eligibility import (
    EligibilityChecker,
    build_application_guide,
)
from src.modules.schemes.domain.entities import (
    ApplicationGuide,
    EligibilityResult,
    FarmerProfile,
    Scheme,
    SchemeQuery,
)
from src.modules.schemes.domain.exceptions import SchemeNotFoundError
from src.modules.schemes.infrastructure.fallback_schemes import find_fallback_scheme
from src.modules.sources.application.snapshot_loader import CatalogSnapshotLoader
from src.modules.sources.domain.entities import CatalogSnapshot


class SchemeCatalogService:
    """政府方案目录服务。

    列表走目录快照（数据源链或内置方案集），详情走单独的长 TTL 缓存。
    列表检索从不抛错；只有详情查询在 id 不存在时抛 SchemeNotFoundError。
    """

    def __init__(
        self,
        loader: CatalogSnapshotLoader[SchemeQuery, Scheme],
        detail_cache: TTLCache[str, Scheme],
        paginator: SearchPaginator | None = None,
        checker: EligibilityChecker | None = None,
        max_page_size: int = settings.MAX_PAGE_SIZE,
    ) -> None:
        self.loader = loader
        self.detail_cache = detail_cache
        self.paginator = paginator or SearchPaginator()
        self.checker = checker or EligibilityChecker()
        self.max_page_size = max_page_size
        self.logger = logger.bind(service="SchemeCatalogService")

    @property
    def listing_key(self) -> str:
        return CacheKeys.scheme_listing()

    async def listing(self) -> CatalogSnapshot[Scheme]:
        """当前方案目录快照（必要时刷新）。"""
        return await self.loader.load(self.listing_key, SchemeQuery())

    async def search(
        self,
        query: str | None = None,
        category: str | None = None,
        status: str | None = None,
        page: int = settings.DEFAULT_PAGE,
        page_size: int = settings.SCHEMES_PAGE_SIZE,
    ) -> SchemeSearchResult:
        """检索方案。

        Args:
            query: 对名称 / 简介 / 类别的子串检索
            category: 类别过滤
            status: 状态过滤
            page: 页码（小于 1 按 1 处理）
            page_size: 每页条数（截断到 1..上限）
        """
        snapshot = await self.listing()
        result = self.paginator.paginate(
            snapshot.records,
            query=query,
            filters={"category": category, "status": status},
            page=page,
            page_size=max(1, min(page_size, self.max_page_size)),
        )
        return SchemeSearchResult(
            schemes=result.items,
            pagination=result.pagination,
            source_used=snapshot.source_used,
            is_fallback=snapshot.is_fallback,
        )

    async def get_details(self, scheme_id: str) -> Scheme:
        """获取方案详情。

        Raises:
            SchemeNotFoundError: 目录和内置方案集中都没有该 id
        """
        key = CacheKeys.scheme_detail(scheme_id)
        cached = self.detail_cache.get(key)
        if cached is not None:
            return cached

        snapshot = await self.listing()
        scheme = next((s for s in snapshot.records if s.id == scheme_id), None)
        if scheme is None:
            scheme = find_fallback_scheme(scheme_id)
        if scheme is None:
            self.logger.info(f"Scheme not found: {scheme_id}")
            raise SchemeNotFoundError(scheme_id)

        detail = scheme.with_default_details()
        self.detail_cache.set(key, detail)
        return detail

    async def check_eligibility(
        self,
        scheme_id: str,
        profile: FarmerProfile,
    ) -> EligibilityResult:
        scheme = await self.get_details(scheme_id)
        return self.checker.check(scheme, profile)

    async def get_application_guide(self, scheme_id: str) -> ApplicationGuide:
        scheme = await self.get_details(scheme_id)
        return build_application_guide(scheme)

    async def get_categories(self) -> list[SchemeCategory]:
        """按首次出现顺序返回类别及方案数。"""
        snapshot = await self.listing()
        counts: dict[str, int] = {}
        for scheme in snapshot.records:
            counts[scheme.category] = counts.get(scheme.category, 0) + 1
        return [SchemeCategory(name=name, count=count) for name, count in counts.items()]
