from __future__ import annotations

import re
from typing import Iterable, Mapping

# AFINN-style integer valences (-5..5), trimmed to vocabulary that shows up
# in economic and labour-market headlines.
LEXICON: dict[str, int] = {
    # positive
    "gain": 2, "gains": 2, "growth": 2, "grow": 2, "grows": 2, "growing": 2,
    "rise": 1, "rises": 1, "rising": 1, "rally": 2, "rallies": 2, "rebound": 2,
    "recover": 2, "recovers": 2, "recovery": 2, "boom": 2, "booming": 3,
    "strong": 2, "stronger": 2, "strength": 2, "robust": 2, "solid": 2,
    "improve": 2, "improves": 2, "improved": 2, "improvement": 2,
    "optimism": 2, "optimistic": 2, "confidence": 2, "confident": 2,
    "stable": 2, "stability": 2, "steady": 2, "resilient": 2, "resilience": 2,
    "surge": 2, "surges": 2, "soar": 2, "soars": 2, "record": 1,
    "hire": 1, "hires": 1, "hiring": 1, "jobs": 1, "employment": 1,
    "profit": 2, "profits": 2, "profitable": 2, "success": 2, "successful": 3,
    "boost": 1, "boosts": 1, "benefit": 2, "benefits": 2, "support": 2,
    "good": 3, "great": 3, "better": 2, "best": 3, "positive": 2,
    "win": 4, "wins": 4, "upbeat": 2, "cool": 1, "cools": 1, "easing": 1,
    "relief": 1, "opportunity": 2, "opportunities": 2, "progress": 2,
    # negative
    "loss": -3, "losses": -3, "lose": -3, "loses": -3, "lost": -3,
    "fall": -2, "falls": -2, "falling": -2, "drop": -1, "drops": -1,
    "decline": -1, "declines": -1, "declining": -1, "slump": -2, "slumps": -2,
    "plunge": -2, "plunges": -2, "tumble": -2, "tumbles": -2, "crash": -3,
    "recession": -2, "crisis": -3, "downturn": -2, "slowdown": -2, "stagnation": -2,
    "weak": -2, "weaker": -2, "weakness": -2, "fragile": -2,
    "fear": -2, "fears": -2, "worry": -3, "worries": -3, "worried": -3,
    "concern": -2, "concerns": -2, "anxiety": -2, "uncertain": -1, "uncertainty": -1,
    "risk": -2, "risks": -2, "threat": -2, "threats": -2, "warning": -3, "warns": -2,
    "layoff": -2, "layoffs": -2, "unemployed": -2, "jobless": -2, "fired": -2,
    "cut": -1, "cuts": -1, "debt": -2, "default": -2, "bankrupt": -3, "bankruptcy": -3,
    "inflation": -1, "shortage": -2, "shortages": -2, "struggle": -2, "struggles": -2,
    "bad": -3, "worse": -3, "worst": -3, "negative": -2, "poor": -2, "poverty": -2,
    "hit": -1, "hurt": -2, "hurts": -2, "pain": -2, "painful": -2, "damage": -3,
    "turmoil": -2, "volatile": -2, "volatility": -1, "collapse": -2, "collapses": -2,
    "strike": -1, "strikes": -1, "war": -2, "tariff": -1, "tariffs": -1,
}

_TOKEN_RE = re.compile(r"[a-z']+")


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text.lower())


class LexiconScorer:
    """Sums word valences; a negator flips the valence of the next word."""

    def __init__(
        self,
        extra_words: Mapping[str, int] | None = None,
        negators: Iterable[str] = ("not", "no", "never"),
    ) -> None:
        self._lexicon = dict(LEXICON)
        if extra_words:
            self._lexicon.update({word.lower(): int(score) for word, score in extra_words.items()})
        self._negators = {word.lower() for word in negators}

    def score(self, text: str) -> int:
        total = 0
        previous = ""
        for token in tokenize(text):
            valence = self._lexicon.get(token)
            if valence is not None:
                total += -valence if previous in self._negators else valence
            previous = token
        return total
