"""Keyword-based industry classification."""

from scout.profile.enums import Industry
from scout.profile.lexicon import INDUSTRY_KEYWORDS
from scout.profile.models import AlternativeClassification, IndustryClassification
from scout.profile.text import find_terms

MAX_CONFIDENCE = 0.8
NO_MATCH_CONFIDENCE = 0.1
MAX_ALTERNATIVES = 3


def _keyword_weight(keyword: str) -> float:
    """Multi-word keywords are more specific and weigh more."""
    return 1.0 + 0.5 * keyword.count(" ")


def classify_industry(text: str) -> IndustryClassification:
    """Score every industry in the taxonomy against text.

    The top industry wins on weighted score; ties are broken by the raw
    number of matched keywords, then by taxonomy declaration order.
    Confidence is the winner's share of all weighted matches, capped.
    """
    order = list(Industry)
    matches: dict[Industry, list[str]] = {
        industry: find_terms(text, keywords) for industry, keywords in INDUSTRY_KEYWORDS.items()
    }
    scores = {
        industry: sum(_keyword_weight(k) for k in found) for industry, found in matches.items()
    }
    total = sum(scores.values())

    if total == 0:
        return IndustryClassification(
            industry=Industry.GENERAL,
            confidence=NO_MATCH_CONFIDENCE,
            reasoning="No industry keywords found",
        )

    ranked = sorted(
        (industry for industry in order if scores[industry] > 0),
        key=lambda i: (-scores[i], -len(matches[i]), order.index(i)),
    )
    top = ranked[0]

    alternatives = [
        AlternativeClassification(
            value=industry.value,
            confidence=min(MAX_CONFIDENCE, scores[industry] / total),
            matches=len(matches[industry]),
        )
        for industry in ranked[1 : 1 + MAX_ALTERNATIVES]
    ]

    return IndustryClassification(
        industry=top,
        confidence=min(MAX_CONFIDENCE, scores[top] / total),
        keywords=matches[top],
        alternatives=alternatives,
        reasoning=f"{len(matches[top])} keyword matches for {top.value}: {', '.join(matches[top])}",
    )
