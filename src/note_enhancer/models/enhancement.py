"""Pydantic models and enums for the content enhancement pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from note_enhancer.errors import InvalidInputError

MAX_SUGGESTIONS = 3


class ToneType(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    CONCISE = "concise"
    EMAIL = "email"
    MEETING_NOTES = "meeting_notes"
    ORIGINAL = "original"

    @classmethod
    def parse(cls, value: str | ToneType) -> ToneType:
        """Parse a tone name, raising InvalidInputError on unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise InvalidInputError(f"Invalid tone. Must be one of: {valid}") from None


class ContentIntent(str, Enum):
    JOB_APPLICATION = "job_application"
    COLLEGE_ESSAY = "college_essay"
    SCHOLARSHIP_APPLICATION = "scholarship_application"
    COMPETITION_ENTRY = "competition_entry"
    CLUB_APPLICATION = "club_application"
    COVER_LETTER = "cover_letter"
    PERSONAL_STATEMENT = "personal_statement"
    PROJECT_DESCRIPTION = "project_description"
    EMAIL_DRAFT = "email_draft"
    MEETING_NOTES = "meeting_notes"
    GENERAL = "general"


class InputComplexity(str, Enum):
    SIMPLE = "simple"
    SUBSTANTIAL = "substantial"


class SuggestionType(str, Enum):
    IMPROVEMENT = "improvement"
    ADDITION = "addition"
    STRUCTURE = "structure"
    TIP = "tip"


class SuggestionPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER: dict[SuggestionPriority, int] = {
    SuggestionPriority.HIGH: 0,
    SuggestionPriority.MEDIUM: 1,
    SuggestionPriority.LOW: 2,
}


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FactSnippet(_Frozen):
    """A short, attributed fact about a candidate term."""

    term: str
    text: str
    source: str = "wikipedia"  # "wikipedia" | "duckduckgo"


class Suggestion(_Frozen):
    type: SuggestionType
    title: str
    description: str
    priority: SuggestionPriority


class TranscriptionResult(_Frozen):
    text: str
    language: str = "en"
    duration_seconds: float = 0.0


class RephrasingResult(_Frozen):
    original_text: str
    rephrased_text: str
    tone: ToneType
    detected_intent: ContentIntent
    suggestions: list[Suggestion] = Field(default_factory=list)

    @field_validator("suggestions")
    @classmethod
    def _cap_suggestions(cls, value: list[Suggestion]) -> list[Suggestion]:
        if len(value) > MAX_SUGGESTIONS:
            raise ValueError(f"at most {MAX_SUGGESTIONS} suggestions allowed, got {len(value)}")
        return value


class AudioEnhancementResult(_Frozen):
    """Payload of the combined transcribe + rephrase operation."""

    transcription: TranscriptionResult
    rephrasing: RephrasingResult
