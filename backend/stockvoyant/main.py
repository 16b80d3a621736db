import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockvoyant.api.endpoints import insights
from stockvoyant.config import Settings, get_settings
from stockvoyant.schemas.health import HealthResponse, ProviderStatus

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="StockVoyant API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(insights.router)


@app.get("/api/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)):
    return HealthResponse(
        providers=ProviderStatus(
            market_data=settings.alpha_vantage_configured,
            news=settings.news_configured,
            ai=settings.openai_configured,
        )
    )
