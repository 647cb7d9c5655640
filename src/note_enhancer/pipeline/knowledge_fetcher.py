"""Knowledge Fetcher - looks up a short factual snippet for one candidate term.

Lookup order, first hit wins:

1. Wikipedia page summary by exact title.
2. Wikipedia full-text search, then the summary of the top hit.
3. DuckDuckGo Instant Answer abstract.

Encyclopedia prose is truncated to 4 sentences, instant answers to 2. The
specificity filter below decides which of those sentences may reach a
generation prompt at all.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from note_enhancer.cache.fact_cache import FactCache, limits_key
from note_enhancer.clients.knowledge_client import KnowledgeClient
from note_enhancer.models.enhancement import FactSnippet

logger = logging.getLogger(__name__)

PRIMARY_SENTENCES = 4
SECONDARY_SENTENCES = 2
MAX_FACT_SENTENCES = 3

# Signals of a named, verifiable fact. Replaceable through KnowledgeConfig.
SPECIFICITY_PATTERNS: tuple[str, ...] = (
    # Named products and technologies: CamelCase or alphanumeric model names
    r"\b[A-Z][a-z]+[A-Z][A-Za-z]*\b",
    r"\b[A-Z][A-Za-z]*\d+[A-Za-z0-9]*\b",
    # Acronyms, except legal suffixes and country codes
    r"\b(?!(?:LLC|LLP|LTD|PLC|INC|CORP|CO|GMBH|AG|SA|NV|US|USA|UK|EU|UN|UAE)s?\b)[A-Z]{2,6}s?\b",
    # Competitions and awards
    r"\b(?:Olympiad|Hackathon|Championships?|Challenge|Cup|Prize|Award|Competition|Science Fair)\b",
    # Course codes (CS 229, MATH55)
    r"\b[A-Z]{2,5}\s?\d{2,4}[A-Z]?\b",
    # Percentages and money
    r"\d+(?:\.\d+)?\s?(?:%|percent\b)",
    r"[$€£]\s?\d[\d,]*(?:\.\d+)?(?:\s?(?:thousand|million|billion|trillion))?",
    # Ranks
    r"(?:#|\bNo\.\s?)\d+\b",
    r"\branked\s+(?:#?\d+|first|second|third|top)\b",
)

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9\"'(])")
_PARENTHESISED_ACRONYM = re.compile(r"\(\s*[A-Z]{2,6}\s*\)")


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(text.strip()) if s.strip()]


def truncate_sentences(text: str, limit: int) -> str:
    """Keep at most ``limit`` sentences of text."""
    return " ".join(split_sentences(text)[:limit])


def compile_patterns(patterns: Iterable[str] | None = None) -> list[re.Pattern[str]]:
    return [re.compile(p) for p in (patterns if patterns is not None else SPECIFICITY_PATTERNS)]


def _own_names(term: str) -> list[str]:
    words = term.split()
    if not words:
        return []
    names = [term.strip()] + [w for w in words if len(w) >= 2 and w.isupper()]
    initials = "".join(w[0] for w in words if w[0].isupper())
    if len(initials) >= 2:
        names.append(initials)
    return names


def mask_own_names(sentence: str, term: str) -> str:
    """Blank out the term, its acronym and any parenthesised acronym in sentence.

    "The Massachusetts Institute of Technology (MIT) is ..." restates the
    subject's own name; none of that may count as a specific signal.
    """
    masked = _PARENTHESISED_ACRONYM.sub(" ", sentence)
    for name in _own_names(term):
        masked = re.sub(rf"(?<!\w){re.escape(name)}(?!\w)", " ", masked, flags=re.IGNORECASE)
    return masked


def filter_specific_facts(
    snippets: Sequence[FactSnippet],
    patterns: Sequence[re.Pattern[str]] | None = None,
    max_sentences: int = MAX_FACT_SENTENCES,
) -> list[str]:
    """Return up to ``max_sentences`` "term: sentence" lines that carry a specific signal.

    Patterns run over the sentence with the snippet's own names masked, so
    a lead sentence that only names its subject is dropped.
    """
    compiled = list(patterns) if patterns is not None else compile_patterns()
    kept: list[str] = []
    for snippet in snippets:
        for sentence in split_sentences(snippet.text):
            body = mask_own_names(sentence, snippet.term)
            if any(p.search(body) for p in compiled):
                kept.append(f"{snippet.term}: {sentence}")
                if len(kept) >= max_sentences:
                    return kept
    return kept


class KnowledgeFetcher:
    """Best-effort factual lookup for a single candidate term."""

    def __init__(
        self,
        client: KnowledgeClient,
        cache: FactCache | None = None,
        *,
        primary_sentences: int = PRIMARY_SENTENCES,
        secondary_sentences: int = SECONDARY_SENTENCES,
    ):
        self.client = client
        self.cache = cache
        self.primary_sentences = primary_sentences
        self.secondary_sentences = secondary_sentences

    async def fetch(self, term: str) -> FactSnippet | None:
        """Return a FactSnippet for term, or None when nothing was found."""
        limits = limits_key(self.primary_sentences, self.secondary_sentences)
        if self.cache is not None:
            cached = await self.cache.alookup(term, limits)
            if cached is not None:
                logger.debug("Fact cache hit: %s", term)
                return cached

        snippet = await self._lookup(term)
        if snippet is not None and self.cache is not None:
            await self.cache.astore(snippet, limits)
        return snippet

    async def _lookup(self, term: str) -> FactSnippet | None:
        summary = await self.client.wikipedia_summary(term)
        if summary is None:
            title = await self.client.wikipedia_search(term)
            if title:
                summary = await self.client.wikipedia_summary(title)
        if summary:
            text = truncate_sentences(summary, self.primary_sentences)
            if text:
                return FactSnippet(term=term, text=text, source="wikipedia")

        abstract = await self.client.instant_answer(term)
        if abstract:
            text = truncate_sentences(abstract, self.secondary_sentences)
            if text:
                return FactSnippet(term=term, text=text, source="duckduckgo")

        logger.debug("No knowledge found for %s", term)
        return None
