from pydantic import BaseModel


class ProviderStatus(BaseModel):
    market_data: bool
    news: bool
    ai: bool


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "StockVoyant"
    providers: ProviderStatus
