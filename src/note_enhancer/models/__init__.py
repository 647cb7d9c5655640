"""Data models for the note enhancement pipeline."""

from note_enhancer.models.enhancement import (
    MAX_SUGGESTIONS,
    PRIORITY_ORDER,
    AudioEnhancementResult,
    ContentIntent,
    FactSnippet,
    InputComplexity,
    RephrasingResult,
    Suggestion,
    SuggestionPriority,
    SuggestionType,
    ToneType,
    TranscriptionResult,
)

__all__ = [
    "AudioEnhancementResult",
    "ContentIntent",
    "FactSnippet",
    "InputComplexity",
    "MAX_SUGGESTIONS",
    "PRIORITY_ORDER",
    "RephrasingResult",
    "Suggestion",
    "SuggestionPriority",
    "SuggestionType",
    "ToneType",
    "TranscriptionResult",
]
