"""API route modules."""
from .dashboard import router as dashboard_router
from .forecast import router as forecast_router

__all__ = [
    "dashboard_router",
    "forecast_router",
]
