"""Suggestion Engine - advisory, intent-specific improvement tips.

Each intent owns a handful of independent rules; a rule fires when its
predicate holds over the note text. All firing rules are collected,
sorted by priority (stable within a tier) and capped at three.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from note_enhancer.models.enhancement import (
    MAX_SUGGESTIONS,
    PRIORITY_ORDER,
    ContentIntent,
    Suggestion,
    SuggestionPriority,
    SuggestionType,
)
from note_enhancer.pipeline.entity_extractor import UNIVERSITIES, mentions_company
from note_enhancer.utils.text import contains_any, word_count

Predicate = Callable[[str], bool]

SHORT_TEXT_WORDS = 50
LONG_TEXT_WORDS = 150

TECH_TERMS = (
    "python", "javascript", "typescript", "java", "react", "node", "node.js",
    "sql", "aws", "docker", "kubernetes", "swift", "kotlin", "c++", "rust",
    "django", "flask", "tensorflow", "pytorch", "figma", "excel", "tableau",
    "firebase", "postgresql", "mongodb", "arduino", "unity", "html", "css",
)
BUILD_WORDS = (
    "built", "build", "created", "developed", "designed", "coded",
    "project", "app", "website", "prototype",
)
METRIC_WORDS = (
    "increased", "reduced", "improved", "grew", "saved", "percent",
    "users", "customers", "revenue", "doubled", "tripled", "hours",
)
PASSION_WORDS = (
    "passion", "passionate", "excited", "love", "interested", "inspired",
    "motivated", "fascinated", "dream", "eager",
)
COMPANY_DETAIL_WORDS = ("your company", "your team", "your mission", "mission", "values")
GREETING_WORDS = ("dear", "hi", "hello", "good morning", "good afternoon")
CLOSING_WORDS = ("sincerely", "regards", "best", "thank you", "thanks", "cheers")
STORY_WORDS = ("i remember", "when i", "moment", "one day", "the day", "that summer", "i was")
REFLECTION_WORDS = ("learned", "realized", "taught me", "changed", "grew", "discovered", "understand")
CLICHE_PHRASES = (
    "ever since i was", "since i was young", "passionate about", "dictionary defines",
    "changed my life", "make a difference", "for as long as i can remember",
)
SCHOOL_DETAIL_WORDS = ("your program", "your university", "your college", "your school", "campus")
GOAL_WORDS = ("goal", "career", "plan to", "future", "hope to", "aspire", "dream")
ACHIEVEMENT_WORDS = ("gpa", "award", "honor", "honors", "dean's list", "ranked", "won", "placed")
COMMUNITY_WORDS = ("community", "volunteer", "volunteered", "give back", "help others", "mentor")
PROBLEM_WORDS = ("problem", "challenge", "issue", "solve", "solves", "pain point", "so that", "to help")
NOVELTY_WORDS = ("novel", "unique", "first", "innovative", "new approach", "unlike")
ROLE_WORDS = ("my role", "i led", "i was responsible", "i designed", "i built", "i wrote")
WHY_WORDS = ("why", "because", "interested", "passion", "excited", "love")
CONTRIBUTION_WORDS = ("contribute", "bring", "help", "organize", "lead", "plan", "teach")
EXPERIENCE_WORDS = ("experience", "previously", "before", "member of", "participated", "years")
LINK_WORDS = ("github", "demo", "link", "http", "https", "website", "app store")
ASK_WORDS = ("could you", "can you", "please", "let me know", "would you", "i'd like to", "request")
ACTION_WORDS = ("action item", "todo", "to do", "to-do", "follow up", "follow-up", "next step", "will")
OWNER_WORDS = ("deadline", "due", "by monday", "by tuesday", "by wednesday", "by thursday", "by friday", "owner", "assigned")
DECISION_WORDS = ("decided", "agreed", "decision", "approved", "concluded")
FILLER_WORDS = ("um", "uh", "you know", "basically", "kind of", "sort of")

_DIGIT = re.compile(r"\d")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SCHOOL_TERMS = tuple(u.lower() for u in UNIVERSITIES) + SCHOOL_DETAIL_WORDS


def has(words: tuple[str, ...]) -> Predicate:
    return lambda text: contains_any(text.lower(), words)


def lacks(words: tuple[str, ...]) -> Predicate:
    return lambda text: not contains_any(text.lower(), words)


def lacks_metrics(text: str) -> bool:
    return not (_DIGIT.search(text) or contains_any(text.lower(), METRIC_WORDS))


def lacks_company_detail(text: str) -> bool:
    return not (mentions_company(text) or contains_any(text.lower(), COMPANY_DETAIL_WORDS))


def lacks_school_detail(text: str) -> bool:
    return not contains_any(text.lower(), _SCHOOL_TERMS)


def builds_without_stack(text: str) -> bool:
    lowered = text.lower()
    return contains_any(lowered, BUILD_WORDS) and not contains_any(lowered, TECH_TERMS)


def lacks_owners(text: str) -> bool:
    return not (_DIGIT.search(text) or contains_any(text.lower(), OWNER_WORDS))


def long_without_paragraphs(text: str) -> bool:
    return word_count(text) > LONG_TEXT_WORDS and not _PARAGRAPH_BREAK.search(text)


@dataclass(frozen=True)
class SuggestionRule:
    applies: Predicate
    suggestion: Suggestion


def rule(
    applies: Predicate,
    type_: SuggestionType,
    title: str,
    description: str,
    priority: SuggestionPriority,
) -> SuggestionRule:
    return SuggestionRule(
        applies=applies,
        suggestion=Suggestion(type=type_, title=title, description=description, priority=priority),
    )


IMPROVEMENT = SuggestionType.IMPROVEMENT
ADDITION = SuggestionType.ADDITION
STRUCTURE = SuggestionType.STRUCTURE
TIP = SuggestionType.TIP
HIGH = SuggestionPriority.HIGH
MEDIUM = SuggestionPriority.MEDIUM
LOW = SuggestionPriority.LOW

ADD_DETAIL = Suggestion(
    type=ADDITION,
    title="Add more detail",
    description="Your note is short. Add specifics such as names, numbers and outcomes "
    "so the enhanced version has real substance to work with.",
    priority=MEDIUM,
)

_TELL_A_STORY = rule(
    lacks(STORY_WORDS), IMPROVEMENT, "Anchor it in a specific moment",
    "Open with one concrete experience instead of general statements about yourself.", HIGH,
)
_SHOW_GROWTH = rule(
    lacks(REFLECTION_WORDS), ADDITION, "Show what you learned",
    "Reflect on how the experience changed your thinking or what it taught you.", HIGH,
)
_QUANTIFY = rule(
    lacks_metrics, IMPROVEMENT, "Quantify your impact",
    "Add numbers: users reached, time saved, percentage improvements or money raised.", HIGH,
)
_NAME_STACK = rule(
    builds_without_stack, IMPROVEMENT, "Name your tech stack",
    "You mention building something but not the tools. Name the languages, "
    "frameworks or platforms you used.", HIGH,
)

INTENT_SUGGESTION_RULES: dict[ContentIntent, tuple[SuggestionRule, ...]] = {
    ContentIntent.JOB_APPLICATION: (
        _NAME_STACK,
        _QUANTIFY,
        rule(lacks(PASSION_WORDS), ADDITION, "Explain your motivation",
             "Say why this role excites you; recruiters look for genuine interest.", MEDIUM),
        rule(lacks_company_detail, TIP, "Connect to the company",
             "Mention the company by name and tie your experience to its work.", LOW),
    ),
    ContentIntent.COVER_LETTER: (
        rule(lacks_company_detail, ADDITION, "Reference the company specifically",
             "Name the company and something concrete about its mission or products.", HIGH),
        _QUANTIFY,
        rule(lacks(GREETING_WORDS), STRUCTURE, "Add a proper greeting",
             "Open with a greeting such as \"Dear Hiring Manager\".", MEDIUM),
        rule(lacks(CLOSING_WORDS), STRUCTURE, "Close with a call to action",
             "End by thanking the reader and inviting a conversation.", MEDIUM),
    ),
    ContentIntent.COLLEGE_ESSAY: (
        _TELL_A_STORY,
        _SHOW_GROWTH,
        rule(has(CLICHE_PHRASES), TIP, "Avoid cliched openings",
             "Phrases like \"ever since I was young\" are common in essays; "
             "replace them with something only you could write.", MEDIUM),
        rule(lacks_school_detail, TIP, "Mention the school specifically",
             "If this is a supplemental essay, reference a program, professor or "
             "opportunity at the school.", LOW),
    ),
    ContentIntent.SCHOLARSHIP_APPLICATION: (
        rule(lacks(GOAL_WORDS), ADDITION, "State your goals",
             "Explain what the scholarship will help you achieve academically or in your career.", HIGH),
        rule(lambda text: not (_DIGIT.search(text) or contains_any(text.lower(), ACHIEVEMENT_WORDS)),
             IMPROVEMENT, "Highlight achievements",
             "Include awards, honors, GPA or other measurable accomplishments.", HIGH),
        rule(lacks(COMMUNITY_WORDS), ADDITION, "Show community impact",
             "Committees value applicants who give back; describe service or mentoring.", MEDIUM),
    ),
    ContentIntent.COMPETITION_ENTRY: (
        rule(lacks(PROBLEM_WORDS), STRUCTURE, "State the problem first",
             "Judges need to know what problem you tackled before how you solved it.", HIGH),
        _QUANTIFY,
        rule(lacks(NOVELTY_WORDS), TIP, "Highlight what's novel",
             "Point out what makes your approach different from existing solutions.", MEDIUM),
        rule(lacks(ROLE_WORDS), TIP, "Clarify your role",
             "If you worked in a team, say exactly which parts you owned.", LOW),
    ),
    ContentIntent.CLUB_APPLICATION: (
        rule(lacks(WHY_WORDS), ADDITION, "Explain why you want to join",
             "Share what draws you to this club in particular.", HIGH),
        rule(lacks(CONTRIBUTION_WORDS), ADDITION, "Say what you'll contribute",
             "Describe the skills, ideas or time you will bring to the group.", MEDIUM),
        rule(lacks(EXPERIENCE_WORDS), TIP, "Mention relevant experience",
             "Related activities or past memberships make your interest credible.", LOW),
    ),
    ContentIntent.PERSONAL_STATEMENT: (
        _TELL_A_STORY,
        rule(lacks(GOAL_WORDS), ADDITION, "Connect to your future goals",
             "Tie your story to what you want to study or do next.", HIGH),
        _SHOW_GROWTH,
    ),
    ContentIntent.PROJECT_DESCRIPTION: (
        rule(lacks(TECH_TERMS), IMPROVEMENT, "Name the technologies",
             "List the languages, frameworks and services the project uses.", HIGH),
        rule(lacks(PROBLEM_WORDS), STRUCTURE, "Lead with the problem",
             "Start with the problem the project solves and who it is for.", HIGH),
        rule(lacks_metrics, IMPROVEMENT, "Quantify the impact",
             "Add usage numbers, performance gains or other measurable results.", MEDIUM),
        rule(lacks(LINK_WORDS), TIP, "Link to a demo",
             "A repository or live demo link lets readers verify your work.", LOW),
    ),
    ContentIntent.EMAIL_DRAFT: (
        rule(lacks(ASK_WORDS), IMPROVEMENT, "Make the ask explicit",
             "State clearly what you need from the recipient and by when.", HIGH),
        rule(lacks(GREETING_WORDS), STRUCTURE, "Add a greeting",
             "Open with the recipient's name.", MEDIUM),
        rule(lacks(CLOSING_WORDS), STRUCTURE, "Add a sign-off",
             "Close with a short sign-off and your name.", LOW),
    ),
    ContentIntent.MEETING_NOTES: (
        rule(lacks(ACTION_WORDS), STRUCTURE, "List action items",
             "Capture who will do what after the meeting.", HIGH),
        rule(lacks_owners, IMPROVEMENT, "Add owners and deadlines",
             "Each action item should have an owner and a due date.", MEDIUM),
        rule(lacks(DECISION_WORDS), TIP, "Record decisions",
             "Note what was decided so absent attendees are not left guessing.", MEDIUM),
    ),
    ContentIntent.GENERAL: (
        rule(has(FILLER_WORDS), TIP, "Trim filler words",
             "Spoken fillers like \"um\" and \"you know\" weaken written text.", LOW),
        rule(long_without_paragraphs, STRUCTURE, "Break it into paragraphs",
             "Long unbroken text is hard to scan; group related ideas together.", LOW),
    ),
}


def sort_and_cap(suggestions: list[Suggestion], limit: int = MAX_SUGGESTIONS) -> list[Suggestion]:
    """Stable sort by priority (high first) and keep the first ``limit``."""
    return sorted(suggestions, key=lambda s: PRIORITY_ORDER[s.priority])[:limit]


def generate_suggestions(text: str, intent: ContentIntent) -> list[Suggestion]:
    """Return at most three prioritized suggestions for text of the given intent."""
    text = text or ""
    suggestions: list[Suggestion] = []
    if word_count(text) < SHORT_TEXT_WORDS:
        suggestions.append(ADD_DETAIL)
    for entry in INTENT_SUGGESTION_RULES.get(intent, ()):
        if entry.applies(text):
            suggestions.append(entry.suggestion)
    return sort_and_cap(suggestions)
