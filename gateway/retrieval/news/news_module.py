"""News search adapter for `mode=news` requests.

Architectural role:
    Builds a provider-specific query, issues one HTTP call and maps the result
    into the canonical `{query, totalResults, articles, source}` envelope.

Provider strategy:
    - `newsapi`: GET `https://newsapi.org/v2/everything` with `q`, `apiKey`,
      `language`, `sortBy`, `pageSize` as query parameters.
    - `rapidapi`: GET `https://<host>/search` with `query`, `limit`, `lang`,
      `country`, `time_published` plus `X-RapidAPI-Key` / `X-RapidAPI-Host`.

    The provider is selected once by `build_news_provider`; callers depend only on
    the `NewsProvider` protocol.

Schema drift:
    Article arrays, total counts and error messages are located through ordered
    candidate lists per provider, so a renamed field means a new list entry.

Failure model:
    Every failure is returned as an `Outcome` error; no retries are attempted.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from gateway.core.types import ErrorKind, Outcome
from gateway.retrieval.news.articles import Accessor, field_path, first_text, normalize_article


logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "News search requires a query."
MISSING_KEY_MESSAGE = "Server is missing news provider credentials."
UNREACHABLE_MESSAGE = "News service is unreachable."
UNREADABLE_MESSAGE = "News service returned an unreadable response."
FAILURE_PREFIX = "News service request failed: "


@dataclass(frozen=True)
class NewsModuleConfig:
    """Runtime configuration for the news providers.

    Relevant environment variables:
        - `NEWS_PROVIDER`
        - `NEWS_API_KEY`
        - `NEWS_PAGE_SIZE`
        - `NEWS_LANGUAGE`
        - `NEWS_SORT_BY`
        - `NEWS_COUNTRY`
        - `NEWS_TIME_PUBLISHED`
        - `NEWS_RAPIDAPI_HOST`
        - `NEWS_TIMEOUT_SECONDS`
    """

    provider: str = "newsapi"
    api_key: str = ""
    page_size: int = 5
    language: str = "zh"
    sort_by: str = "publishedAt"
    country: str = "CN"
    time_published: str = "anytime"
    rapidapi_host: str = "real-time-news-data.p.rapidapi.com"
    timeout_seconds: float = 12.0

    @classmethod
    def from_env(cls) -> NewsModuleConfig:
        return cls(
            provider=os.getenv("NEWS_PROVIDER", "newsapi").strip().lower(),
            api_key=os.getenv("NEWS_API_KEY", "").strip(),
            page_size=int(os.getenv("NEWS_PAGE_SIZE", "5")),
            language=os.getenv("NEWS_LANGUAGE", "zh").strip(),
            sort_by=os.getenv("NEWS_SORT_BY", "publishedAt").strip(),
            country=os.getenv("NEWS_COUNTRY", "CN").strip(),
            time_published=os.getenv("NEWS_TIME_PUBLISHED", "anytime").strip(),
            rapidapi_host=os.getenv("NEWS_RAPIDAPI_HOST", "real-time-news-data.p.rapidapi.com").strip(),
            timeout_seconds=float(os.getenv("NEWS_TIMEOUT_SECONDS", "12")),
        )


class NewsProvider(Protocol):
    """Async interface the dispatcher requires for news search."""

    source: str

    async def search(self, query: str) -> Outcome:
        """Search for `query` and return the canonical envelope as an `Outcome`."""
        ...


class HttpNewsProvider:
    """Shared request/response handling for JSON news APIs.

    Subclasses supply the endpoint, query parameters, headers and the candidate
    field lists for their schema.
    """

    source = ""
    article_fields: tuple[Accessor, ...] = ()
    total_fields: tuple[Accessor, ...] = ()
    error_fields: tuple[Accessor, ...] = ()

    def __init__(self, config: NewsModuleConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport

    def _endpoint(self) -> str:
        raise NotImplementedError

    def _params(self, query: str) -> dict[str, Any]:
        raise NotImplementedError

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    async def search(self, query: str) -> Outcome:
        """Run one provider query.

        Edge cases:
            - Empty/whitespace query -> 400 before any network call.
            - Missing API key -> 500 before any network call.
            - Non-2xx -> upstream status with the provider's message when present.
        """
        query = (query or "").strip()
        if not query:
            return Outcome.failure(ErrorKind.VALIDATION, EMPTY_QUERY_MESSAGE, 400)

        if not self.config.api_key:
            return Outcome.failure(ErrorKind.CONFIGURATION, MISSING_KEY_MESSAGE, 500)

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                follow_redirects=True,
                headers=self._headers(),
                transport=self._transport,
            ) as client:
                response = await client.get(self._endpoint(), params=self._params(query))
        except httpx.RequestError as exc:
            logger.error("News API request failed: %s", exc)
            return Outcome.failure(ErrorKind.UPSTREAM, UNREACHABLE_MESSAGE, 502)

        if not response.is_success:
            message = self._error_message(response)
            logger.error("News API error (%s): %s", response.status_code, message)
            return Outcome.failure(ErrorKind.UPSTREAM, message, response.status_code)

        try:
            payload = response.json()
        except ValueError:
            logger.error("News API returned a non-JSON body")
            return Outcome.failure(ErrorKind.UPSTREAM, UNREADABLE_MESSAGE, 502)

        if not isinstance(payload, dict):
            payload = {}

        articles = [normalize_article(item) for item in self._raw_articles(payload)]

        return Outcome.success({
            "query": query,
            "totalResults": self._total(payload, len(articles)),
            "articles": articles,
            "source": self.source,
        })

    def _error_message(self, response: httpx.Response) -> str:
        """Provider error message when the body carries one, else a status-based message."""
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            detail = first_text(payload, self.error_fields)
            if detail:
                return f"{FAILURE_PREFIX}{detail}"

        return f"{FAILURE_PREFIX}{response.status_code}"

    def _raw_articles(self, payload: dict) -> list:
        for accessor in self.article_fields:
            value = accessor(payload)
            if isinstance(value, list):
                return value
        return []

    def _total(self, payload: dict, fallback: int) -> int:
        for accessor in self.total_fields:
            value = accessor(payload)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        return fallback


class NewsApiProvider(HttpNewsProvider):
    """newsapi.org `/v2/everything` schema."""

    source = "newsapi.org"
    ENDPOINT = "https://newsapi.org/v2/everything"

    article_fields = (field_path("articles"), field_path("data"), field_path("results"))
    total_fields = (field_path("totalResults"), field_path("total_results"), field_path("total"))
    error_fields = (field_path("message"), field_path("error", "message"), field_path("error"))

    def _endpoint(self) -> str:
        return self.ENDPOINT

    def _params(self, query: str) -> dict[str, Any]:
        return {
            "q": query,
            "apiKey": self.config.api_key,
            "language": self.config.language,
            "sortBy": self.config.sort_by,
            "pageSize": str(self.config.page_size),
        }


class RapidApiNewsProvider(HttpNewsProvider):
    """Real-Time News Data (RapidAPI) `/search` schema."""

    source = "real-time-news-data"

    article_fields = (field_path("data"), field_path("articles"), field_path("news"), field_path("results"))
    total_fields = (field_path("total"), field_path("count"), field_path("totalResults"))
    error_fields = (field_path("error", "message"), field_path("error"), field_path("message"))

    def _endpoint(self) -> str:
        return f"https://{self.config.rapidapi_host}/search"

    def _params(self, query: str) -> dict[str, Any]:
        return {
            "query": query,
            "limit": str(self.config.page_size),
            "lang": self.config.language,
            "country": self.config.country,
            "time_published": self.config.time_published,
        }

    def _headers(self) -> dict[str, str]:
        return {
            **super()._headers(),
            "X-RapidAPI-Key": self.config.api_key,
            "X-RapidAPI-Host": self.config.rapidapi_host,
        }


NEWS_PROVIDERS: dict[str, type[HttpNewsProvider]] = {
    "newsapi": NewsApiProvider,
    "rapidapi": RapidApiNewsProvider,
}


def build_news_provider(
    config: NewsModuleConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HttpNewsProvider:
    """Instantiate the provider named by `config.provider`.

    Raises:
        ValueError: For unsupported provider names.
    """
    provider_cls = NEWS_PROVIDERS.get(config.provider)
    if provider_cls is None:
        raise ValueError(f"Unsupported NEWS_PROVIDER: {config.provider}")
    return provider_cls(config, transport=transport)
