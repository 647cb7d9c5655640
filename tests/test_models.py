"""Tests for Pydantic data models."""

import pytest
from pydantic import ValidationError

from note_enhancer.errors import InvalidInputError
from note_enhancer.models.enhancement import (
    AudioEnhancementResult,
    ContentIntent,
    RephrasingResult,
    Suggestion,
    SuggestionPriority,
    SuggestionType,
    ToneType,
    TranscriptionResult,
)


def _suggestion(title: str = "Tip") -> Suggestion:
    return Suggestion(
        type=SuggestionType.TIP,
        title=title,
        description="Do the thing.",
        priority=SuggestionPriority.LOW,
    )


class TestToneType:
    def test_parse_value(self):
        assert ToneType.parse("casual") is ToneType.CASUAL

    def test_parse_is_case_insensitive(self):
        assert ToneType.parse(" Meeting_Notes ") is ToneType.MEETING_NOTES

    def test_parse_passthrough(self):
        assert ToneType.parse(ToneType.EMAIL) is ToneType.EMAIL

    def test_parse_unknown(self):
        with pytest.raises(InvalidInputError, match="Invalid tone. Must be one of: professional"):
            ToneType.parse("pirate")


class TestRephrasingResult:
    def test_camel_case_serialization(self):
        result = RephrasingResult(
            original_text="hi",
            rephrased_text="Hello.",
            tone=ToneType.PROFESSIONAL,
            detected_intent=ContentIntent.GENERAL,
        )
        data = result.model_dump(mode="json", by_alias=True)
        assert data == {
            "originalText": "hi",
            "rephrasedText": "Hello.",
            "tone": "professional",
            "detectedIntent": "general",
            "suggestions": [],
        }

    def test_accepts_aliases(self):
        result = RephrasingResult.model_validate({
            "originalText": "a",
            "rephrasedText": "b",
            "tone": "casual",
            "detectedIntent": "email_draft",
        })
        assert result.detected_intent is ContentIntent.EMAIL_DRAFT

    def test_rejects_more_than_three_suggestions(self):
        with pytest.raises(ValidationError, match="at most 3"):
            RephrasingResult(
                original_text="a",
                rephrased_text="b",
                tone=ToneType.CASUAL,
                detected_intent=ContentIntent.GENERAL,
                suggestions=[_suggestion(str(i)) for i in range(4)],
            )

    def test_frozen(self):
        result = RephrasingResult(
            original_text="a",
            rephrased_text="b",
            tone=ToneType.CASUAL,
            detected_intent=ContentIntent.GENERAL,
        )
        with pytest.raises(ValidationError):
            result.rephrased_text = "c"


class TestTranscriptionResult:
    def test_defaults(self):
        result = TranscriptionResult(text="hello")
        assert result.language == "en"
        assert result.duration_seconds == 0.0

    def test_duration_alias(self):
        result = TranscriptionResult(text="hello", duration_seconds=3.5)
        assert result.model_dump(by_alias=True)["durationSeconds"] == 3.5

    def test_audio_result_nests(self):
        rephrasing = RephrasingResult(
            original_text="a",
            rephrased_text="b",
            tone=ToneType.CONCISE,
            detected_intent=ContentIntent.GENERAL,
        )
        combined = AudioEnhancementResult(
            transcription=TranscriptionResult(text="a"), rephrasing=rephrasing
        )
        assert combined.model_dump(by_alias=True)["rephrasing"]["rephrasedText"] == "b"
