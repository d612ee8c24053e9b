from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NewsArticle(BaseModel):
    """An article as returned by the news provider."""

    title: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    published_at: Optional[datetime.datetime] = None


class ArticleSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    source: Optional[str] = None
    published_at: Optional[datetime.datetime] = None
    raw_score: float
    sentiment: float = Field(ge=-1.0, le=1.0)


class SentimentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    per_article: list[float] = Field(default_factory=list)
    aggregate: float = 0.0
    count: int = 0
    retained: list[ArticleSummary] = Field(default_factory=list)


class NewsSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    sentiment: float = Field(default=0.0, ge=-1.0, le=1.0)
    articles: list[ArticleSummary] = Field(default_factory=list)
    news_count: int = 0
    last_updated: Optional[datetime.datetime] = None
