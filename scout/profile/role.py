"""Role classification from technical, business and hybrid indicators."""

import re
from collections.abc import Sequence

from scout.profile import lexicon
from scout.profile.enums import UserRole
from scout.profile.models import RoleClassification, RoleIndicatorMatches
from scout.profile.text import clamp, find_terms

# Each family must hold at least this share of the evidence for a hybrid call
HYBRID_JOINT_THRESHOLD = 0.35
UNKNOWN_CONFIDENCE = 0.1
PHRASE_WEIGHT = 2.0


def _score_family(
    text: str,
    keywords: Sequence[str],
    patterns: Sequence[re.Pattern[str]],
    phrases: Sequence[str],
) -> tuple[float, list[str]]:
    found_keywords = find_terms(text, keywords)
    found_phrases = find_terms(text, phrases)
    pattern_hits: list[str] = []
    for pattern in patterns:
        pattern_hits.extend(m.group(0) for m in pattern.finditer(text))

    score = len(found_keywords) + len(pattern_hits) + PHRASE_WEIGHT * len(found_phrases)
    return score, found_keywords + found_phrases + pattern_hits


def classify_role(text: str) -> RoleClassification:
    """Classify how the text frames the problem.

    Hybrid when both technical and business evidence each hold a large
    enough share, or when bridge indicators dominate. Unknown when there is
    no evidence at all.
    """
    technical, technical_hits = _score_family(
        text, lexicon.TECHNICAL_KEYWORDS, lexicon.TECHNICAL_PATTERNS, lexicon.TECHNICAL_PHRASES
    )
    business, business_hits = _score_family(
        text, lexicon.BUSINESS_KEYWORDS, lexicon.BUSINESS_PATTERNS, lexicon.BUSINESS_PHRASES
    )
    hybrid, hybrid_hits = _score_family(
        text, lexicon.HYBRID_KEYWORDS, lexicon.HYBRID_PATTERNS, lexicon.HYBRID_PHRASES
    )
    indicators = RoleIndicatorMatches(
        technical=technical_hits, business=business_hits, hybrid=hybrid_hits
    )
    scores = {"technical": technical, "business": business, "hybrid": hybrid}
    total = technical + business + hybrid

    if total == 0:
        return RoleClassification(
            role=UserRole.UNKNOWN,
            confidence=UNKNOWN_CONFIDENCE,
            indicators=indicators,
            scores=scores,
            reasoning="No role indicators found",
        )

    technical_share = technical / total
    business_share = business / total
    both_present = technical > 0 and business > 0

    if (
        both_present
        and technical_share >= HYBRID_JOINT_THRESHOLD
        and business_share >= HYBRID_JOINT_THRESHOLD
    ) or (hybrid > technical and hybrid > business):
        confidence = hybrid / total + min(technical_share, business_share)
        if not both_present:
            confidence *= 0.7
        role = UserRole.HYBRID
    elif technical >= business:
        role = UserRole.TECHNICAL
        confidence = technical_share + (0.2 if technical > 3 else 0.0)
    else:
        role = UserRole.BUSINESS
        confidence = business_share + (0.15 if business > 2 else 0.0)

    return RoleClassification(
        role=role,
        confidence=clamp(confidence, 0.1, 0.9),
        indicators=indicators,
        scores=scores,
        reasoning=(
            f"technical={technical:g} business={business:g} hybrid={hybrid:g}"
        ),
    )
