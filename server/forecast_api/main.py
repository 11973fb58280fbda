"""Goal Forecast API - FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routes import dashboard, forecast

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

settings = get_settings()

app = FastAPI(
    title="Goal Forecast API",
    description="Stateless API computing yearly goal progress and forecasts",
    version="1.0.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(dashboard.router)
app.include_router(forecast.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    return {"status": "healthy", "service": "forecast-api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.forecast_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
