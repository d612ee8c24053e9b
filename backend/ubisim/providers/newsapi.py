from __future__ import annotations

import datetime

from ubisim.config.settings import ProviderSettings
from ubisim.providers.base import ProviderClient
from ubisim.providers.http import build_url, get_json
from ubisim.schemas.news import NewsArticle


_EVERYTHING_PATH = "/v2/everything"


def _parse_published_at(raw: object) -> datetime.datetime | None:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return datetime.datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


class NewsApiClient(ProviderClient):
    """Economic news search. The signal id is the search query."""

    name = "news_api"

    def __init__(self, provider_settings: ProviderSettings) -> None:
        super().__init__(timeout=provider_settings.timeout_seconds)
        self._settings = provider_settings

    def fetch_sync(self, signal_id: str) -> list[NewsArticle]:
        api_key = self._settings.news_api_key
        if not api_key:
            raise self._missing_key(signal_id)

        url = build_url(
            self._settings.news_api_base_url,
            _EVERYTHING_PATH,
            {
                "q": signal_id,
                "language": self._settings.news_language,
                "sortBy": "publishedAt",
                "pageSize": str(self._settings.news_page_size),
            },
        )
        payload = get_json(
            url, self.name, signal_id, self._timeout, headers={"X-Api-Key": api_key}
        )
        if not isinstance(payload, dict):
            raise self._empty(signal_id, "NewsAPI payload is not an object")

        raw_articles = payload.get("articles") or []
        if not isinstance(raw_articles, list) or not raw_articles:
            raise self._empty(signal_id, "NewsAPI returned no articles")

        articles: list[NewsArticle] = []
        for raw in raw_articles:
            if not isinstance(raw, dict):
                continue
            source = raw.get("source")
            articles.append(
                NewsArticle(
                    title=raw.get("title") or None,
                    description=raw.get("description") or None,
                    source=source.get("name") if isinstance(source, dict) else None,
                    published_at=_parse_published_at(raw.get("publishedAt")),
                )
            )
        return articles
