"""
Hacker News Firebase API adapter implementing ItemSource.

Transport resilience lives here, not in the aggregation core: transient
failures are retried with exponential backoff and jitter, and a circuit
breaker fails fast while the upstream keeps erroring.
"""

import asyncio
import logging
import random
from typing import Any, List, Optional

import httpx

from hn_stories.config.settings import settings
from hn_stories.core.circuit_breaker import CircuitBreaker
from hn_stories.core.errors import UpstreamError
from hn_stories.core.metrics import metrics
from hn_stories.core.schemas import Story

logger = logging.getLogger(__name__)

RETRY_DELAY_BASE = 1.0
JITTER_MAX = 0.1
RETRYABLE_STATUS = {408, 429}


def normalize_base_url(base_url: str) -> str:
    """Ensure the base URL ends with /v0/."""
    url = base_url.rstrip("/")
    if not url.endswith("/v0"):
        url += "/v0"
    return url + "/"


def to_story(payload: Any) -> Optional[Story]:
    """Map an item payload to a Story, or None when it is not a live story."""
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != "story" or payload.get("dead") or payload.get("deleted"):
        return None
    url = payload.get("url")
    if url is not None and not str(url).strip():
        url = None
    return Story(
        id=payload["id"],
        title=payload.get("title"),
        url=url,
        author=payload.get("by") or "",
        created_at=int(payload.get("time") or 0),
    )


class HackerNewsClient:
    def __init__(
        self,
        base_url: str = settings.hacker_news.base_url,
        timeout: float = settings.hacker_news.timeout_seconds,
        max_retries: int = settings.hacker_news.max_retries,
        retry_delay: float = RETRY_DELAY_BASE,
        breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = normalize_base_url(base_url)
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.breaker = breaker or CircuitBreaker()
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "User-Agent": settings.hacker_news.user_agent,
                "Accept": "application/json",
            },
            transport=transport,
        )
        logger.debug("HackerNewsClient configured with base_url=%s timeout=%ss", self.base_url, timeout)

    async def _backoff(self, attempt: int, reason: str, endpoint: str) -> None:
        delay = self.retry_delay * (2 ** attempt) + random.uniform(0, JITTER_MAX)
        logger.warning("%s for %s, attempt %d, retrying in %.2fs", reason, endpoint, attempt + 1, delay)
        await asyncio.sleep(delay)

    async def _get(self, endpoint: str) -> Optional[httpx.Response]:
        """GET with retries. Returns None on 404; raises UpstreamError otherwise."""
        if not self.breaker.allow():
            raise UpstreamError(endpoint, "circuit open")

        last_error = ""
        for attempt in range(self.max_retries + 1):
            try:
                response = await self._client.get(endpoint)
            except httpx.TimeoutException as e:
                last_error = f"timeout: {e}"
            except httpx.RequestError as e:
                last_error = f"{type(e).__name__}: {e}"
            else:
                if response.status_code == 404:
                    metrics.record_upstream_call()
                    self.breaker.record_success()
                    return None
                if response.status_code < 400:
                    metrics.record_upstream_call()
                    self.breaker.record_success()
                    return response
                last_error = f"status {response.status_code}"
                if response.status_code < 500 and response.status_code not in RETRYABLE_STATUS:
                    break

            metrics.record_upstream_call(ok=False)
            if attempt < self.max_retries:
                await self._backoff(attempt, last_error, endpoint)

        self.breaker.record_failure()
        logger.error("Upstream request failed for %s: %s", endpoint, last_error)
        raise UpstreamError(endpoint, last_error)

    @staticmethod
    def _json(response: httpx.Response, endpoint: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error("JSON parse error for %s: %s", endpoint, e)
            raise UpstreamError(endpoint, "invalid JSON") from e

    async def list_newest_ids(self) -> List[int]:
        endpoint = "newstories.json"
        logger.info("Fetching newest story IDs from %s", endpoint)
        response = await self._get(endpoint)
        if response is None:
            raise UpstreamError(endpoint, "not found")
        data = self._json(response, endpoint)
        if data is None:
            return []
        if not isinstance(data, list) or not all(isinstance(i, int) for i in data):
            raise UpstreamError(endpoint, "expected a list of integer ids")
        logger.info("Retrieved %d story IDs", len(data))
        return data

    async def get_item(self, item_id: int) -> Optional[Story]:
        endpoint = f"item/{item_id}.json"
        response = await self._get(endpoint)
        if response is None:
            logger.debug("Story %s not found (404)", item_id)
            return None
        payload = self._json(response, endpoint)
        try:
            story = to_story(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(endpoint, f"malformed item: {e}") from e
        if story is None:
            logger.debug("Story %s filtered out", item_id)
        return story

    async def aclose(self) -> None:
        await self._client.aclose()
