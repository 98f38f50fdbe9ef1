"""Sophistication scoring over five named factors."""

from scout.profile import lexicon
from scout.profile.enums import Industry, SophisticationLevel, UserRole
from scout.profile.models import SophisticationAssessment, SophisticationFactors
from scout.profile.text import clamp, count_syllables, find_terms, sentences, tokenize

FACTOR_WEIGHTS: dict[str, float] = {
    "vocabulary_complexity": 0.20,
    "domain_expertise": 0.30,
    "conceptual_depth": 0.20,
    "professional_terminology": 0.15,
    "communication_clarity": 0.15,
}

NOVICE_PENALTY = 0.5

# (basic, advanced) anchors for the linguistic metrics
SENTENCE_LENGTH_ANCHORS = (12.0, 25.0)
UNIQUE_RATIO_ANCHORS = (0.5, 0.7)
SYLLABLE_ANCHORS = (1.5, 2.5)


def _score_metric(value: float, anchors: tuple[float, float]) -> float:
    """Map a raw metric onto [0, 1] piecewise: basic -> 0.33, advanced -> 0.67."""
    basic, advanced = anchors
    if value <= basic:
        return 0.33 * value / basic
    if value <= advanced:
        return 0.33 + 0.34 * (value - basic) / (advanced - basic)
    return min(1.0, 0.67 + 0.33 * (value - advanced) / advanced)


def vocabulary_complexity(text: str) -> float:
    words = tokenize(text)
    if not words:
        return 0.0
    parts = sentences(text) or [text]
    avg_sentence_length = len(words) / len(parts)
    unique_ratio = len(set(words)) / len(words)
    avg_syllables = sum(count_syllables(w) for w in words) / len(words)
    return (
        _score_metric(avg_sentence_length, SENTENCE_LENGTH_ANCHORS)
        + _score_metric(unique_ratio, UNIQUE_RATIO_ANCHORS)
        + _score_metric(avg_syllables, SYLLABLE_ANCHORS)
    ) / 3


def abstract_concept_score(text: str) -> float:
    score = 0.0
    for concepts, weight in lexicon.ABSTRACT_CONCEPTS:
        score += weight * len(find_terms(text, concepts))
    return clamp(score)


def clarity_components(text: str) -> tuple[float, float, float]:
    """Return (specificity, structured_thinking, completeness) for text."""
    words = tokenize(text)
    hedges = len(find_terms(text, lexicon.HEDGE_MARKERS))
    specific_terms = (
        len(find_terms(text, lexicon.ALL_TECHNICAL_TERMS))
        + len(find_terms(text, lexicon.ALL_INDUSTRY_KEYWORDS))
        + sum(1 for w in words if w.isdigit())
    )
    specificity = clamp(0.2 + 0.1 * specific_terms - 0.1 * hedges)

    connectives = len(find_terms(text, lexicon.CONNECTIVES))
    extra_sentences = max(0, len(sentences(text)) - 1)
    structured = clamp(0.3 + 0.15 * connectives + 0.1 * extra_sentences)

    completeness = clamp(len(words) / 20)
    return specificity, structured, completeness


def communication_clarity(text: str) -> float:
    return sum(clarity_components(text)) / 3


def is_self_declared_novice(text: str) -> bool:
    return bool(find_terms(text, lexicon.NOVICE_MARKERS))


def score_sophistication(
    text: str,
    industry: Industry = Industry.GENERAL,
    role: UserRole = UserRole.UNKNOWN,
    role_indicator_count: float = 0.0,
) -> SophisticationAssessment:
    """Score text on the five factors and bucket the weighted result.

    Domain expertise looks at the detected industry's advanced terminology
    (every industry's when the industry is general); professional
    terminology looks at the detected role's vocabulary likewise.
    """
    words = tokenize(text)
    per_ten_words = max(1.0, len(words) / 10)

    if industry is Industry.GENERAL:
        advanced_vocabulary = lexicon.ALL_ADVANCED_TERMINOLOGY
    else:
        advanced_vocabulary = lexicon.ADVANCED_TERMINOLOGY[industry]
    advanced_terms = find_terms(text, advanced_vocabulary)
    technical_terms = find_terms(text, lexicon.ALL_TECHNICAL_TERMS)
    domain_density = (2 * len(advanced_terms) + len(technical_terms)) / per_ten_words

    if role is UserRole.UNKNOWN:
        professional_vocabulary = tuple(
            term for terms in lexicon.PROFESSIONAL_TERMINOLOGY.values() for term in terms
        )
    else:
        professional_vocabulary = lexicon.PROFESSIONAL_TERMINOLOGY[role]
    professional_terms = find_terms(text, professional_vocabulary)

    factors = SophisticationFactors(
        vocabulary_complexity=clamp(vocabulary_complexity(text)),
        domain_expertise=clamp(domain_density * 0.25),
        conceptual_depth=clamp(
            abstract_concept_score(text)
            + 0.05 * len(find_terms(text, lexicon.CONNECTIVES))
        ),
        professional_terminology=clamp(
            0.2 * len(professional_terms) + 0.08 * role_indicator_count
        ),
        communication_clarity=clamp(communication_clarity(text)),
    )

    score = sum(getattr(factors, name) * weight for name, weight in FACTOR_WEIGHTS.items())
    if is_self_declared_novice(text):
        score *= NOVICE_PENALTY
    score = clamp(score)

    confidence = clamp(0.3 + len(words) / 50, 0.1, 0.9)
    if advanced_terms:
        confidence = clamp(confidence + 0.1)

    return SophisticationAssessment(
        level=SophisticationLevel.from_score(score),
        score=score,
        confidence=confidence,
        factors=factors,
        advanced_terms=advanced_terms,
    )
