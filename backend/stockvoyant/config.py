from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Provider credentials; all optional, missing keys degrade functionality
    alpha_vantage_api_key: str = ""
    newsapi_key: str = ""
    openai_api_key: str = ""
    openai_model: str = "gpt-5.1"

    http_timeout: float = 15.0
    alpha_vantage_outputsize: str = "compact"  # "full" for 20+ years

    # News
    news_lookback_days: int = 30
    news_page_size: int = 15
    max_articles: int = 6

    # History
    history_limit: int = 365

    # Content caps for AI prompts (characters)
    article_content_limit: int = 30000
    summary_content_limit: int = 4000
    sentiment_content_limit: int = 1000

    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def alpha_vantage_configured(self) -> bool:
        return bool(self.alpha_vantage_api_key)

    @property
    def news_configured(self) -> bool:
        return bool(self.newsapi_key)

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
