"""Entity Extractor - finds organizations, schools and proper nouns worth a lookup."""

from __future__ import annotations

import re

MAX_TERMS = 8

COMPANIES: tuple[str, ...] = (
    "Google", "Apple", "Microsoft", "Amazon", "Meta", "Facebook", "Netflix",
    "Tesla", "OpenAI", "Anthropic", "IBM", "Oracle", "Salesforce", "Adobe",
    "Nvidia", "Intel", "AMD", "Spotify", "Twitter", "LinkedIn", "Uber",
    "Airbnb", "Stripe", "Shopify", "Slack", "Zoom", "Discord", "GitHub",
    "GitLab", "SpaceX", "Boeing", "Lockheed Martin", "Goldman Sachs",
    "JPMorgan", "Morgan Stanley", "BlackRock", "Citadel", "Jane Street",
    "Palantir", "Databricks", "Snowflake", "Samsung", "Sony", "Qualcomm",
    "Cisco", "Dell", "HP", "Walmart", "Target", "Disney", "Pfizer",
    "Johnson & Johnson",
)

UNIVERSITIES: tuple[str, ...] = (
    "Harvard", "Stanford", "MIT", "Yale", "Princeton", "Columbia",
    "Cornell", "Caltech", "UC Berkeley", "UCLA", "Carnegie Mellon",
    "Duke", "Northwestern", "University of Chicago", "University of Pennsylvania",
    "Brown University", "Dartmouth", "Johns Hopkins", "Georgia Tech",
    "University of Michigan", "NYU", "Oxford", "Cambridge",
    "Imperial College", "ETH Zurich", "University of Toronto",
)

CONSULTANCIES: tuple[str, ...] = (
    "McKinsey", "Boston Consulting Group", "BCG", "Bain", "Deloitte",
    "Accenture", "PwC", "KPMG", "Ernst & Young", "EY",
)

RESEARCH_LABS: tuple[str, ...] = (
    "DeepMind", "NASA", "CERN", "Bell Labs", "Los Alamos",
    "Lawrence Livermore", "NIH", "Allen Institute", "Xerox PARC",
)

GAZETTEER: tuple[str, ...] = COMPANIES + UNIVERSITIES + CONSULTANCIES + RESEARCH_LABS
_EMPLOYERS: frozenset[str] = frozenset(COMPANIES + CONSULTANCIES)

# Names that are also everyday words; these only match when capitalized.
AMBIGUOUS_NAMES: frozenset[str] = frozenset({
    "Apple", "Meta", "Oracle", "Target", "Stripe", "Slack", "Zoom",
    "Discord", "Snowflake", "Citadel", "Bain", "Duke",
})

# Subject/program keywords used to sharpen lookups ("MIT Mathematics").
PROGRAM_KEYWORDS: tuple[str, ...] = (
    "computer science", "mathematics", "engineering", "physics", "chemistry",
    "biology", "economics", "business", "finance", "medicine", "nursing",
    "law", "architecture", "psychology", "data science", "statistics",
)

STOP_WORDS: frozenset[str] = frozenset({
    "The", "And", "For", "But", "Not", "You", "All", "Can", "Had", "Her",
    "Was", "One", "Our", "Out", "This", "That", "These", "Those", "Then",
    "There", "They", "What", "When", "Where", "Which", "While", "Who", "Why",
    "How", "With", "From", "Into", "Also", "After", "Before", "Because",
    "Dear", "Hello", "Hey", "Thanks", "Thank", "Sincerely", "Regards", "Best",
    "Today", "Tomorrow", "Yesterday", "Monday", "Tuesday", "Wednesday",
    "Thursday", "Friday", "Saturday", "Sunday", "Just", "Maybe", "Some",
    "Any", "She", "His", "Its", "Their", "Your", "Yes", "Okay", "Well",
    "Let", "Please", "Hope", "Here", "Next", "Last", "Each", "Every",
})

_PROPER_NOUN_RUN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")
_GAZETTEER_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (
        name,
        re.compile(
            rf"(?<![\w&]){re.escape(name)}(?![\w&])",
            0 if name in AMBIGUOUS_NAMES else re.IGNORECASE,
        ),
    )
    for name in GAZETTEER
)


def find_gazetteer_entities(text: str) -> list[str]:
    """Return gazetteer names found in text, in first-appearance order."""
    hits: list[tuple[int, str]] = []
    for name, pattern in _GAZETTEER_PATTERNS:
        match = pattern.search(text)
        if match:
            hits.append((match.start(), name))
    hits.sort(key=lambda h: h[0])
    return [name for _, name in hits]


def mentions_company(text: str) -> bool:
    """True when text names a known company or consultancy."""
    return any(name in _EMPLOYERS for name in find_gazetteer_entities(text))


def _proper_nouns(text: str) -> list[str]:
    found: list[str] = []
    for match in _PROPER_NOUN_RUN.finditer(text):
        words = match.group(0).split()
        while words and words[0] in STOP_WORDS:
            words.pop(0)
        phrase = " ".join(words)
        if len(phrase) >= 3 and phrase not in STOP_WORDS:
            found.append(phrase)
    return found


def _program_keyword(lowered: str) -> str | None:
    for keyword in PROGRAM_KEYWORDS:
        if re.search(rf"\b{re.escape(keyword)}\b", lowered):
            return keyword.title()
    return None


def extract_terms(text: str, max_terms: int = MAX_TERMS) -> list[str]:
    """Extract deduplicated candidate terms (at most ``max_terms``, capped at 8).

    Order is discovery order: gazetteer hits, then other proper nouns, then
    "<entity> <program>" compounds when a subject keyword is present.
    """
    if not text or not text.strip():
        return []
    limit = min(max_terms, MAX_TERMS)

    terms: list[str] = []
    seen: set[str] = set()

    def _add(term: str) -> None:
        key = term.lower()
        if key not in seen:
            seen.add(key)
            terms.append(term)

    entities = find_gazetteer_entities(text)
    for name in entities:
        _add(name)
    for noun in _proper_nouns(text):
        _add(noun)

    program = _program_keyword(text.lower())
    if program:
        for name in entities:
            _add(f"{name} {program}")

    return terms[:limit]
