from __future__ import annotations

import datetime
from typing import Iterable

from ubisim.config.settings import SentimentSettings
from ubisim.schemas.news import ArticleSummary, NewsArticle, SentimentResult
from ubisim.sentiment.lexicon import LexiconScorer


_OLDEST = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)


def clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _recency_key(summary: ArticleSummary) -> datetime.datetime:
    published = summary.published_at
    if published is None:
        return _OLDEST
    if published.tzinfo is None:
        return published.replace(tzinfo=datetime.timezone.utc)
    return published


class SentimentAggregator:
    def __init__(self, sentiment_settings: SentimentSettings | None = None) -> None:
        self._settings = sentiment_settings or SentimentSettings()
        self._scorer = LexiconScorer(
            extra_words=self._settings.extra_words,
            negators=self._settings.negators,
        )

    def normalize(self, raw_score: float) -> float:
        return clamp(raw_score * self._settings.damping)

    def analyze(self, articles: Iterable[NewsArticle]) -> SentimentResult:
        summaries: list[ArticleSummary] = []
        for article in articles:
            if not article.title or not article.description:
                continue
            raw_score = (
                self._scorer.score(article.title) + self._scorer.score(article.description)
            ) / 2
            summaries.append(
                ArticleSummary(
                    title=article.title,
                    description=article.description,
                    source=article.source,
                    published_at=article.published_at,
                    raw_score=raw_score,
                    sentiment=self.normalize(raw_score),
                )
            )

        count = len(summaries)
        if count == 0:
            return SentimentResult()

        per_article = [summary.raw_score for summary in summaries]
        aggregate = self.normalize(sum(per_article) / count)
        retained = sorted(summaries, key=_recency_key, reverse=True)
        return SentimentResult(
            per_article=per_article,
            aggregate=aggregate,
            count=count,
            retained=retained[: self._settings.retained_articles],
        )
