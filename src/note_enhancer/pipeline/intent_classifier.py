"""Intent Classifier - maps raw text to exactly one ContentIntent.

The cascade is an ordered table of (intent, predicate) pairs, most specific
first; the first predicate that holds wins and ``general`` is the fallback.
Single generic words are too weak to decide an intent on their own, so most
keyword checks require two distinct hits.
"""

from __future__ import annotations

from collections.abc import Callable

from note_enhancer.models.enhancement import ContentIntent
from note_enhancer.pipeline.entity_extractor import mentions_company
from note_enhancer.utils.text import count_matches

Predicate = Callable[[str], bool]

COVER_LETTER_PHRASES = (
    "dear hiring", "i am writing to apply", "i'm writing to apply",
    "i am writing to express my interest", "cover letter",
    "to whom it may concern", "thank you for considering my application",
)
SCHOLARSHIP_KEYWORDS = (
    "scholarship", "financial aid", "grant application", "fellowship",
    "tuition assistance", "bursary",
)
PERSONAL_STATEMENT_PHRASES = (
    "personal statement", "statement of purpose",
)
ESSAY_KEYWORDS = (
    "college essay", "common app", "supplemental essay", "why this college",
    "why this school", "admissions essay", "application essay",
)
COLLEGE_KEYWORDS = (
    "college", "university", "admission", "campus", "freshman", "major in",
    "undergraduate", "gpa", "high school", "ap classes", "extracurricular",
)
COMPETITION_KEYWORDS = (
    "competition", "hackathon", "olympiad", "contest", "science fair",
    "pitch competition", "tournament", "challenge entry",
)
CLUB_KEYWORDS = (
    "club", "society", "membership", "join the", "officer", "chapter",
    "student council", "captain", "meetings every",
)
APPLY_PHRASES = (
    "apply for", "applying for", "apply to", "applying to", "application for",
    "interested in the position", "interested in the role",
)
JOB_KEYWORDS = (
    "job", "position", "role", "hiring", "internship", "resume", "career",
    "experience", "interview", "salary", "recruiter", "employer",
)
PROJECT_KEYWORDS = (
    "project", "built", "developed", "app", "website", "prototype",
    "feature", "users", "deployed", "github", "database", "api",
)
EMAIL_MARKERS = ("dear", "sincerely", "best regards", "email")
MEETING_MARKERS = ("meeting", "agenda", "action items", "discussed")


def any_of(keywords: tuple[str, ...]) -> Predicate:
    return lambda text: count_matches(text.lower(), keywords) >= 1


def at_least(n: int, keywords: tuple[str, ...]) -> Predicate:
    return lambda text: count_matches(text.lower(), keywords) >= n


def either(*predicates: Predicate) -> Predicate:
    return lambda text: any(p(text) for p in predicates)


def both(*predicates: Predicate) -> Predicate:
    return lambda text: all(p(text) for p in predicates)


INTENT_RULES: tuple[tuple[ContentIntent, Predicate], ...] = (
    (ContentIntent.COVER_LETTER, any_of(COVER_LETTER_PHRASES)),
    (ContentIntent.SCHOLARSHIP_APPLICATION, any_of(SCHOLARSHIP_KEYWORDS)),
    (ContentIntent.PERSONAL_STATEMENT, any_of(PERSONAL_STATEMENT_PHRASES)),
    (ContentIntent.COLLEGE_ESSAY, either(any_of(ESSAY_KEYWORDS), at_least(2, COLLEGE_KEYWORDS))),
    (ContentIntent.COMPETITION_ENTRY, any_of(COMPETITION_KEYWORDS)),
    (ContentIntent.CLUB_APPLICATION, at_least(2, CLUB_KEYWORDS)),
    (
        ContentIntent.JOB_APPLICATION,
        either(both(any_of(APPLY_PHRASES), mentions_company), at_least(2, JOB_KEYWORDS)),
    ),
    (ContentIntent.PROJECT_DESCRIPTION, at_least(2, PROJECT_KEYWORDS)),
    (ContentIntent.EMAIL_DRAFT, any_of(EMAIL_MARKERS)),
    (ContentIntent.MEETING_NOTES, any_of(MEETING_MARKERS)),
)


def classify_intent(text: str) -> ContentIntent:
    """Return the first matching intent for text, defaulting to GENERAL."""
    text = text or ""
    if not text.strip():
        return ContentIntent.GENERAL
    for intent, predicate in INTENT_RULES:
        if predicate(text):
            return intent
    return ContentIntent.GENERAL
