"""Catalog module dependencies."""

from fastapi import Request

from src.modules.catalog.application.resilient_catalog import ResilientCatalog


async def get_resilient_catalog(request: Request) -> ResilientCatalog:
    """lifespan 中创建的目录实例。"""
    return request.app.state.catalog
