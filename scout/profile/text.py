"""Small text utilities shared by the scorers."""

import re
from collections.abc import Iterable
from functools import lru_cache

_WORD = re.compile(r"[a-z0-9']+")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_VOWEL_GROUPS = re.compile(r"[aeiouy]+")


def normalize(text: str) -> str:
    """Lowercase and straighten quotes so markers match consistently."""
    return text.replace("’", "'").replace("‘", "'").lower().strip()


def tokenize(text: str) -> list[str]:
    return _WORD.findall(normalize(text))


def sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def count_syllables(word: str) -> int:
    """Rough syllable count: vowel groups, ignoring a trailing silent e."""
    word = word.lower()
    if len(word) <= 3:
        return 1
    if word.endswith("e") and not word.endswith("le"):
        word = word[:-1]
    return max(1, len(_VOWEL_GROUPS.findall(word)))


@lru_cache(maxsize=2048)
def _term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(r"(?<!\w)" + re.escape(term.lower()) + r"(?!\w)")


def find_terms(text: str, terms: Iterable[str]) -> list[str]:
    """Return the distinct terms that occur in text as whole words.

    Matching is case-insensitive; terms are returned in the order given.
    """
    normalized = normalize(text)
    found: list[str] = []
    for term in terms:
        if term not in found and _term_pattern(term).search(normalized):
            found.append(term)
    return found


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
