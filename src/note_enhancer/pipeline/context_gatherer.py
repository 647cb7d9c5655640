"""Context Gatherer - turns candidate terms into a verified-facts prompt block."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from note_enhancer.models.enhancement import FactSnippet
from note_enhancer.pipeline.entity_extractor import MAX_TERMS, extract_terms
from note_enhancer.pipeline.knowledge_fetcher import (
    MAX_FACT_SENTENCES,
    KnowledgeFetcher,
    compile_patterns,
    filter_specific_facts,
)

logger = logging.getLogger(__name__)

CONTEXT_HEADER = """\
VERIFIED FACTS (use ONLY the exact names and numbers below; never invent \
additional facts, and if none of them are relevant to the user's text, add nothing):"""


def render_context_block(facts: list[str]) -> str:
    """Wrap fact lines in the instruction block, or return "" when there are none."""
    if not facts:
        return ""
    lines = "\n".join(f"- {fact}" for fact in facts)
    return f"{CONTEXT_HEADER}\n{lines}"


@dataclass
class GatheredContext:
    """Outcome of one gather: the prompt block and the terms that were looked up."""

    block: str = ""
    terms: list[str] = field(default_factory=list)


class ContextGatherer:
    """Runs entity extraction and concurrent knowledge lookups for one text."""

    def __init__(
        self,
        fetcher: KnowledgeFetcher,
        *,
        max_terms: int = MAX_TERMS,
        max_fact_sentences: int = MAX_FACT_SENTENCES,
        specificity_patterns: Iterable[str] | None = None,
    ):
        self.fetcher = fetcher
        self.max_terms = max_terms
        self.max_fact_sentences = max_fact_sentences
        self.patterns = compile_patterns(specificity_patterns)

    async def gather(self, text: str) -> str:
        """Return a verified-facts block for text, or "" when nothing specific was found."""
        return (await self.collect(text)).block

    async def collect(self, text: str) -> GatheredContext:
        terms = extract_terms(text, max_terms=self.max_terms)
        if not terms:
            return GatheredContext()

        logger.info("Searching for context on: %s", ", ".join(terms))
        snippets = await self.fetch_all(terms)
        facts = filter_specific_facts(
            snippets, self.patterns, max_sentences=self.max_fact_sentences
        )
        if not facts:
            logger.info("No specific facts survived filtering (%d snippets)", len(snippets))
            return GatheredContext(terms=terms)
        logger.info("Context gathered: %d facts from %d snippets", len(facts), len(snippets))
        return GatheredContext(block=render_context_block(facts), terms=terms)

    async def fetch_all(self, terms: list[str]) -> list[FactSnippet]:
        """Look up all terms concurrently; failed or empty lookups are dropped."""
        results = await asyncio.gather(
            *(self.fetcher.fetch(term) for term in terms),
            return_exceptions=True,
        )
        snippets: list[FactSnippet] = []
        for term, result in zip(terms, results):
            if isinstance(result, BaseException):
                logger.debug("Lookup for %s failed: %r", term, result)
                continue
            if result is not None:
                snippets.append(result)
        return snippets
