import datetime

import pytest

from ubisim.config.settings import SentimentSettings
from ubisim.schemas.news import NewsArticle
from ubisim.sentiment.aggregator import SentimentAggregator
from ubisim.sentiment.lexicon import LexiconScorer


def article(title, description, day: int = 1, source: str = "Wire") -> NewsArticle:
    return NewsArticle(
        title=title,
        description=description,
        source=source,
        published_at=datetime.datetime(2026, 3, day, 9, 0, tzinfo=datetime.timezone.utc),
    )


def test_lexicon_sums_word_scores() -> None:
    scorer = LexiconScorer()
    assert scorer.score("Strong growth in hiring") == 2 + 2 + 1
    assert scorer.score("Recession fears deepen") == -2 - 2
    assert scorer.score("Nothing to see here") == 0


def test_negation_flips_next_word() -> None:
    scorer = LexiconScorer(negators=["not"])
    assert scorer.score("not good") == -3
    assert scorer.score("good, not bad") == 3 + 3


def test_extra_words_extend_the_lexicon() -> None:
    scorer = LexiconScorer(extra_words={"Stagflation": -4})
    assert scorer.score("stagflation returns") == -4


def test_articles_missing_fields_are_excluded() -> None:
    aggregator = SentimentAggregator()
    result = aggregator.analyze(
        [
            article("Strong growth", "Hiring gains continue"),
            article(None, "Recession fears"),
            article("Markets crash", None),
            article("", "empty title"),
        ]
    )

    assert result.count == 1
    assert len(result.per_article) == 1
    assert [summary.title for summary in result.retained] == ["Strong growth"]


def test_aggregate_is_damped_mean_of_article_scores() -> None:
    aggregator = SentimentAggregator()
    # (4 + 0) / 2 = 2 and (4 + 4) / 2 = 4
    result = aggregator.analyze(
        [
            article("strong growth", "quiet day"),
            article("strong growth", "robust recovery"),
        ]
    )

    assert result.per_article == [2.0, 4.0]
    assert result.aggregate == pytest.approx(0.3)
    assert result.retained[0].sentiment == pytest.approx(result.retained[0].raw_score * 0.1)


def test_aggregate_stays_bounded_for_extreme_scores() -> None:
    aggregator = SentimentAggregator(SentimentSettings(extra_words={"catastrophe": -5}))
    doom = " ".join(["catastrophe"] * 200)
    result = aggregator.analyze([article(doom, doom), article("crisis", doom)])

    assert result.aggregate == -1.0
    assert all(-1.0 <= summary.sentiment <= 1.0 for summary in result.retained)

    boom = aggregator.analyze([article("great " * 100, "best " * 100)])
    assert boom.aggregate == 1.0


def test_only_five_most_recent_are_retained_but_all_are_counted() -> None:
    aggregator = SentimentAggregator()
    articles = [article(f"Story {day} growth", "steady gains", day=day) for day in (3, 7, 1, 5, 2, 6, 4)]

    result = aggregator.analyze(articles)

    assert result.count == 7
    assert len(result.per_article) == 7
    assert [summary.title for summary in result.retained] == [
        "Story 7 growth",
        "Story 6 growth",
        "Story 5 growth",
        "Story 4 growth",
        "Story 3 growth",
    ]


def test_no_articles_gives_empty_result() -> None:
    result = SentimentAggregator().analyze([])
    assert result.count == 0
    assert result.aggregate == 0.0
    assert result.retained == []
