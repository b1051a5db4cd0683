"""farmAssist Backend - 农户方案与市场价格服务入口。"""

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from src.core.config import settings
from src.core.domain.exceptions import DomainException
from src.core.infrastructure.logging import setup_logging
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from src.core.interfaces.http.routers import api_router
from src.modules.catalog.application import dependencies as catalog_app_deps
from src.modules.catalog.application.context import build_catalog_context
from src.modules.catalog.application.resilient_catalog import ResilientCatalog
from src.modules.catalog.infrastructure import dependencies as catalog_infra_deps


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting farmAssist backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    catalog = ResilientCatalog(build_catalog_context())
    app.state.catalog = catalog
    await catalog.start()

    yield

    logger.info("Shutting down farmAssist backend...")
    await catalog.stop()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "农户助手后端 - 政府方案检索、资格检查、市场价格与价格分析\n\n"
        "外部数据源不可用时自动降级为内置方案集与合成价格数据。"
    ),
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[catalog_app_deps.get_resilient_catalog] = (
    catalog_infra_deps.get_resilient_catalog
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check(request: Request):
    """Health check endpoint.

    - 共享浏览器：未启动视为正常（按需启动）
    - 目录缓存：任一 key 处于合成兜底状态时为 degraded

    Returns:
        健康检查结果，包含整体状态和各组件状态
    """
    catalog: ResilientCatalog | None = getattr(request.app.state, "catalog", None)
    if catalog is None:
        return {
            "status": "starting",
            "environment": settings.ENVIRONMENT,
            "version": "0.1.0",
            "components": {},
        }

    components = catalog.health()
    degraded = any(c["status"] == "degraded" for c in components["catalogs"])

    return {
        "status": "degraded" if degraded else "healthy",
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
        "components": components,
        "feature_flags": {
            "background_refresh": settings.CATALOG_REFRESH_ENABLED,
            "enabled_scheme_sources": sum(s.enabled for s in settings.SCHEME_SOURCES),
            "enabled_price_sources": sum(s.enabled for s in settings.PRICE_SOURCES),
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to farmAssist API",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
