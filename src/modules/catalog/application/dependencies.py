"""Catalog module application dependencies."""

from src.core.application.dependencies import missing_dependency
from src.modules.catalog.application.resilient_catalog import ResilientCatalog


async def get_resilient_catalog() -> ResilientCatalog:
    missing_dependency("ResilientCatalog")
