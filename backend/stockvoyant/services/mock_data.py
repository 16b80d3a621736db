"""
Static demo data for running without provider credentials.

Prices here are placeholders, not market data. The tables are read-only;
every call builds fresh records from them.
"""
import math
import random
from datetime import datetime, timedelta, timezone
from urllib.parse import quote

from stockvoyant.schemas.news import NewsArticle
from stockvoyant.schemas.stock import HistoricalDataPoint, StockData, StockDetails

DEMO_STOCKS: dict[str, dict] = {
    "AAPL": {
        "name": "Apple Inc.",
        "price": 170.34,
        "market_cap": "2.62T",
        "volume": "50.2M",
        "pe_ratio": 26.5,
        "eps": 6.43,
        # history shape: base + amplitude * sin(i / period) + noise
        "walk": (150.0, 10.0, 50, 5.0),
    },
    "GOOGL": {
        "name": "Alphabet Inc.",
        "price": 135.67,
        "market_cap": "1.70T",
        "volume": "25.1M",
        "pe_ratio": 20.8,
        "eps": 6.52,
        "walk": (120.0, 15.0, 40, 8.0),
    },
    "MSFT": {
        "name": "Microsoft Corp.",
        "price": 420.72,
        "market_cap": "3.12T",
        "volume": "18.9M",
        "pe_ratio": 37.1,
        "eps": 11.34,
        "walk": (380.0, 20.0, 60, 10.0),
    },
}

DEMO_TICKERS = tuple(DEMO_STOCKS)

# (title, source, content, days ago)
MOCK_NEWS: dict[str, list[tuple[str, str, str, int]]] = {
    "AAPL": [
        ("Apple Vision Pro Sees Strong Pre-Orders Amidst High Price Point", "TechCrunch",
         "Apple's new Vision Pro mixed reality headset is reportedly seeing strong pre-order numbers despite "
         "its premium $3,499 price tag. Analysts are watching closely to see if it can carve out a significant "
         "niche in the burgeoning spatial computing market. Early reviews praise the immersive experience but "
         "note the cost as a barrier for mass adoption.", 2),
        ("iPhone 16 Supply Chain Ramping Up for September Launch", "Bloomberg",
         "Key Apple suppliers like Foxconn and Pegatron are increasing production capacity in anticipation of "
         "the iPhone 16 series, expected to be unveiled in September. Rumors suggest new AI features and camera "
         "improvements.", 5),
        ("Apple Faces New Antitrust Scrutiny in Europe Over App Store Policies", "Reuters",
         "European Union regulators are intensifying their investigation into Apple's App Store policies, "
         "particularly concerning developer fees and restrictions on alternative payment systems. This could "
         "lead to significant fines or mandated changes.", 10),
        ("Analysts Bullish on Apple Services Growth Trajectory", "MarketWatch",
         "Several financial analysts have reiterated their buy ratings for Apple stock (AAPL), citing strong "
         "continued growth in its services division, which includes the App Store, Apple Music, iCloud, and "
         "Apple TV+. This segment is seen as a key driver for future profitability.", 15),
        ("Apple Invests Further in AI R&D, Potentially Developing Own Search Engine", "The Verge",
         "Apple is reportedly significantly increasing its investment in artificial intelligence research and "
         "development. Speculation is rife that this includes efforts to develop its own search engine to "
         "reduce reliance on Google, and to integrate more advanced AI capabilities across its ecosystem.", 25),
        ("Apple's Wearables Market Share Remains Strong Despite Competition", "IDC",
         "According to recent market data from IDC, Apple continues to lead the wearables market with its "
         "Apple Watch and AirPods. While competition is increasing, Apple's ecosystem and brand loyalty provide "
         "a strong moat.", 28),
    ],
    "GOOGL": [
        ("Google AI Unveils 'Gemini Advanced' Capabilities at I/O Conference", "TechRadar",
         "Google AI has announced significant upgrades to its 'Gemini' large language model series during its "
         "annual I/O conference. 'Gemini Advanced' promises enhanced reasoning, coding, and multimodal "
         "understanding, positioning it as a direct competitor to OpenAI's latest offerings.", 3),
        ("Alphabet's Waymo Expands Robotaxi Service to New Cities", "CNBC",
         "Waymo, Alphabet's self-driving car unit, is expanding its fully autonomous robotaxi service to Austin "
         "and Dallas, signaling growing confidence in its technology and regulatory approvals.", 8),
        ("Google Cloud Revenue Growth Meets Expectations, Focus on AI Integration", "Wall Street Journal",
         "Google Cloud Platform reported quarterly revenue figures that met analyst expectations. The company "
         "emphasized its strategy of integrating advanced AI capabilities, powered by Gemini, into its cloud "
         "offerings to attract enterprise clients.", 12),
        ("Pixel 9 Series to Feature Tensor G4 Chip and Satellite Connectivity", "9to5Google",
         "Leaks suggest the upcoming Google Pixel 9 series will be powered by the new Tensor G4 chip, with a "
         "focus on on-device AI processing. Emergency satellite connectivity is rumored to be a new feature.", 20),
        ("YouTube Ad Revenue Up, Shorts Monetization Improving Steadily", "Variety",
         "Google reported an increase in YouTube advertising revenue, driven by both traditional video ads and "
         "improvements in monetizing YouTube Shorts. The company is optimistic about Shorts' contribution to "
         "future growth.", 28),
    ],
    "MSFT": [
        ("Microsoft Q3 Earnings Beat Expectations Driven by Cloud and AI", "Bloomberg",
         "Microsoft reported strong Q3 earnings, surpassing analyst expectations, largely driven by continued "
         "robust growth in its Azure cloud platform and increasing contributions from AI-powered services like "
         "Copilot.", 4),
        ("Microsoft Completes Acquisition of 'GameMakers Inc.' to Bolster Xbox Portfolio", "IGN",
         "Microsoft has finalized its acquisition of 'GameMakers Inc.', a prominent game development studio. "
         "This move is expected to bolster the Xbox Game Studios portfolio and bring exclusive titles to the "
         "Game Pass subscription service.", 9),
        ("Copilot AI Expanding to More Microsoft 365 Services, New Tier Announced", "ZDNet",
         "Microsoft announced plans to integrate its Copilot AI assistant into additional Microsoft 365 "
         "services, including Outlook and PowerPoint. A new premium tier, 'Copilot Pro', was also unveiled for "
         "individual users.", 14),
        ("Microsoft Increases Investment in Renewable Energy for Data Centers", "TechCrunch",
         "Microsoft is significantly increasing its investment in renewable energy projects to power its "
         "global network of data centers, aligning with its goal to be carbon negative by 2030.", 22),
        ("New Surface Laptop 7 and Surface Pro 10 Announced with Snapdragon X Elite Chips", "Windows Central",
         "Microsoft unveiled its latest Surface Laptop 7 and Surface Pro 10 devices, with select models "
         "featuring Qualcomm Snapdragon X Elite ARM-based processors, promising improved performance and "
         "battery life for Windows on ARM.", 29),
    ],
}


def placeholder_image(ticker: str, index: int | None = None) -> str:
    text = f"{quote(ticker)}+News" if index is None else f"{quote(ticker)}+News+{index}"
    return f"https://placehold.co/300x200.png?text={text}"


def mock_news(ticker: str, limit: int = 6, now: datetime | None = None) -> list[NewsArticle]:
    now = now or datetime.now(timezone.utc)
    articles = []
    for i, (title, source, content, days_ago) in enumerate(MOCK_NEWS.get(ticker, [])[:limit]):
        articles.append(NewsArticle(
            id=f"{ticker}-news-mock-{i + 1}",
            title=title,
            source=source,
            article_url="#",
            article_content=content,
            published_at=(now - timedelta(days=days_ago)).isoformat(),
            image_url=placeholder_image(ticker, i + 1),
        ))
    return articles


def _synthetic_history(ticker: str, last_price: float, days: int, today) -> list[HistoricalDataPoint]:
    base, amplitude, period, noise = DEMO_STOCKS[ticker]["walk"]
    points = []
    for i in range(days):
        day = today - timedelta(days=days - 1 - i)
        close = round(base + math.sin(i / period) * amplitude + random.random() * noise, 2)
        if i == days - 1:
            close = last_price
        spread = close * 0.01
        points.append(HistoricalDataPoint(
            date=day.isoformat(),
            price=close,
            open=round(close - spread / 2 + random.random() * spread, 2),
            high=round(close + random.random() * spread, 2),
            low=round(close - random.random() * spread, 2),
            volume=random.randint(10_000_000, 60_000_000),
        ))
    return points


def synthetic_stock_details(ticker: str, days: int = 365, now: datetime | None = None) -> StockDetails | None:
    """Demo quote and history for a ticker in DEMO_STOCKS; None for anything else."""
    stock = DEMO_STOCKS.get(ticker)
    if stock is None:
        return None

    now = now or datetime.now(timezone.utc)
    prev_close = stock["price"]
    fluctuation = (random.random() - 0.5) * (prev_close * 0.005)
    price = round(prev_close + fluctuation, 2)
    change = round(price - prev_close, 2)
    change_percent = round(change / prev_close * 100, 2)

    # at least today's point
    history = _synthetic_history(ticker, price, max(days, 1), now.date())
    closes = [p.price for p in history]

    stock_data = StockData(
        ticker=ticker,
        name=stock["name"],
        price=price,
        change=change,
        change_percent=change_percent,
        market_cap=stock["market_cap"],
        volume=stock["volume"],
        pe_ratio=stock["pe_ratio"],
        eps=stock["eps"],
        week52_high=round(max(closes), 2),
        week52_low=round(min(closes), 2),
        previous_close=prev_close,
        last_updated=now.isoformat(),
    )
    return StockDetails(stock_data=stock_data, historical_data=history)
