"""API router configuration."""

from fastapi import APIRouter

from src.modules.market.interfaces.analytics_router import router as analytics_router
from src.modules.market.interfaces.router import router as market_router
from src.modules.schemes.interfaces.router import router as schemes_router

api_router = APIRouter()

# Government schemes
api_router.include_router(schemes_router)

# Market prices
api_router.include_router(market_router)

# Price analytics
api_router.include_router(analytics_router)
