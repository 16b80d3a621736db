import json
import logging

from stockvoyant.config import Settings, get_settings
from stockvoyant.schemas.news import SENTIMENTS, NewsArticleInput
from stockvoyant.schemas.stock import YearRange
from stockvoyant.services.errors import AIServiceError

logger = logging.getLogger(__name__)

MAX_PROMPT_CONTENT = 30000
NARRATIVE_SNIPPET_CHARS = 1000

NO_SUMMARY_GENERATED = (
    "Could not generate a financial summary based on the provided data. "
    "The information might be insufficient or an error occurred."
)

ARTICLE_SUMMARY_PROMPT = """You summarize financial news for investors following a specific stock.
Write a 2-3 sentence summary of the article focused on what matters for the given stock.
Use only the provided article text.

Respond ONLY with valid JSON in this exact format:
{"summary": "..."}
"""

SENTIMENT_PROMPT = """Analyze the sentiment of the following news article content.
Classify the sentiment as "Positive", "Neutral", or "Negative". If the sentiment is unclear or cannot be
determined, classify it as "Unknown".

Respond ONLY with valid JSON in this exact format:
{"sentiment": "Positive|Neutral|Negative|Unknown"}
"""

FINANCIAL_SUMMARY_PROMPT = """You are a Senior Financial Analyst. Provide a concise financial summary and outlook
for the company described by the user. Base your analysis solely on:
1. News articles published in the last month.
2. Key stock performance metrics from the past year.

Analyze the sentiment, key events and potential impacts discussed in the news, and correlate them with the
stock's performance where appropriate. Highlight recurring themes, positive or negative trends and significant
developments. Do not invent information or use external knowledge. If data is sparse or unclear, say that the
summary is limited.

Respond ONLY with valid JSON in this exact format:
{"summary": "..."}
"""


def _price_line(label: str, value: float | None) -> str:
    return f"{label}: ${value}" if value is not None else f"{label}: N/A"


def build_financial_summary_prompt(
    ticker: str,
    company_name: str,
    articles: list[NewsArticleInput],
    year_range: YearRange,
) -> str:
    parts = [
        f"Company: {company_name} ({ticker})",
        "Past Year Performance Overview:\n" + "\n".join([
            _price_line("Starting Price (approx. 1yr ago)", year_range.year_start_price),
            _price_line("Most Recent Price", year_range.year_end_price),
            _price_line("52-Week High", year_range.year_high),
            _price_line("52-Week Low", year_range.year_low),
        ]),
    ]

    if articles:
        lines = []
        for a in articles:
            snippet = a.article_content[:NARRATIVE_SNIPPET_CHARS]
            if len(a.article_content) > NARRATIVE_SNIPPET_CHARS:
                snippet += "..."
            lines.append(
                f'- Title: "{a.title}" (Source: {a.source}, Published: {a.published_at})\n'
                f'  Content Snippet: "{snippet}"'
            )
        parts.append("Recent News Articles (Last Month):\n" + "\n---\n".join(lines))
    else:
        parts.append("Recent News Articles (Last Month):\nNo news articles from the past month were provided.")

    return "\n\n".join(parts)


def parse_sentiment(raw) -> str:
    """Normalize model output to one of SENTIMENTS; anything else is Unknown."""
    if not isinstance(raw, str):
        return "Unknown"
    word = raw.strip().strip(".!\"'").capitalize()
    return word if word in SENTIMENTS else "Unknown"


class OpenAIService:
    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.api_key = settings.openai_api_key
        self.model = settings.openai_model
        self._client = None

    @property
    def client(self):
        if self._client is None:
            import openai
            self._client = openai.AsyncOpenAI(api_key=self.api_key)
        return self._client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _complete_json(self, system_prompt: str, user_prompt: str, max_tokens: int) -> dict:
        if not self.is_configured:
            raise AIServiceError("OPENAI_API_KEY not configured")

        response = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        raw = response.choices[0].message.content
        try:
            data = json.loads(raw or "{}")
        except json.JSONDecodeError as e:
            raise AIServiceError(f"Model returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise AIServiceError("Model returned a non-object JSON payload")
        return data

    async def summarize_article(self, title: str, url: str, content: str, ticker: str) -> str:
        user_prompt = (
            f"Stock: {ticker}\nTitle: {title}\nURL: {url}\n\n"
            f"Article Content:\n{content[:MAX_PROMPT_CONTENT]}"
        )
        data = await self._complete_json(ARTICLE_SUMMARY_PROMPT, user_prompt, max_tokens=400)
        summary = data.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            raise AIServiceError(f"Empty summary for article '{title}'")
        return summary.strip()

    async def analyze_sentiment(self, content: str) -> str:
        user_prompt = f"Article Content:\n{content[:MAX_PROMPT_CONTENT]}"
        data = await self._complete_json(SENTIMENT_PROMPT, user_prompt, max_tokens=20)
        return parse_sentiment(data.get("sentiment"))

    async def generate_financial_summary(
        self,
        ticker: str,
        company_name: str,
        articles: list[NewsArticleInput],
        year_range: YearRange,
    ) -> str:
        user_prompt = build_financial_summary_prompt(ticker, company_name, articles, year_range)
        data = await self._complete_json(FINANCIAL_SUMMARY_PROMPT, user_prompt, max_tokens=1500)
        summary = data.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            logger.warning(f"Empty financial summary returned for {ticker}")
            return NO_SUMMARY_GENERATED
        return summary.strip()
