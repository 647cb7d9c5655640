"""Small text helpers shared by the heuristic pipeline stages."""

from __future__ import annotations

import re
from functools import lru_cache


def word_count(text: str) -> int:
    return len(text.split())


@lru_cache(maxsize=1024)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Whole words only, with an optional plural "s", so "app" does not match "apply".
    return re.compile(rf"(?<![\w-]){re.escape(keyword)}s?(?![\w-])")


def contains(lowered: str, keyword: str) -> bool:
    """True when keyword appears in already lower-cased text as a whole word or phrase."""
    return _keyword_pattern(keyword).search(lowered) is not None


def count_matches(lowered: str, keywords: tuple[str, ...]) -> int:
    """Number of distinct keywords present in lowered text."""
    return sum(1 for keyword in keywords if contains(lowered, keyword))


def contains_any(lowered: str, keywords: tuple[str, ...]) -> bool:
    return any(contains(lowered, keyword) for keyword in keywords)
