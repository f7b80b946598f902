"""Configuration settings for the application."""
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class HackerNewsSettings:
    base_url: str = os.getenv("HN_BASE_URL", "https://hacker-news.firebaseio.com/v0/")
    timeout_seconds: float = float(os.getenv("HN_TIMEOUT_SECONDS", 10))
    max_retries: int = int(os.getenv("HN_MAX_RETRIES", 2))
    user_agent: str = os.getenv("HN_USER_AGENT", "hn-stories/1.0")


@dataclass
class AggregationSettings:
    max_concurrent_fetches: int = int(os.getenv("HN_MAX_CONCURRENT_FETCHES", 10))
    search_window: int = int(os.getenv("HN_SEARCH_WINDOW", 500))


@dataclass
class ServerSettings:
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", 8000))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_origins: List[str] = field(
        default_factory=lambda: _csv(os.getenv("HN_CORS_ORIGINS", "http://localhost:4200"))
    )


class Settings:
    hacker_news = HackerNewsSettings()
    aggregation = AggregationSettings()
    server = ServerSettings()


settings = Settings()
