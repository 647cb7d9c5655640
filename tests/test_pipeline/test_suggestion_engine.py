"""Tests for the suggestion engine."""

import pytest

from note_enhancer.models.enhancement import (
    MAX_SUGGESTIONS,
    PRIORITY_ORDER,
    ContentIntent,
    Suggestion,
    SuggestionPriority,
    SuggestionType,
)
from note_enhancer.pipeline.suggestion_engine import (
    ADD_DETAIL,
    INTENT_SUGGESTION_RULES,
    generate_suggestions,
    sort_and_cap,
)

LONG_TEXT = " ".join(["word"] * 60)

SAMPLE_TEXTS = [
    "",
    "hey how are you doing",
    "I'm applying for the internship at Google. I built a website.",
    "um so basically I went to the store and you know bought stuff",
    "Dear team, we decided in the meeting that Ana will send the report by Friday.",
    LONG_TEXT,
]


class TestGenerateSuggestions:
    def test_job_application_priorities(self):
        text = "I'm applying for the internship at Google. I built a website."
        titles = [s.title for s in generate_suggestions(text, ContentIntent.JOB_APPLICATION)]
        assert titles == ["Name your tech stack", "Quantify your impact", "Add more detail"]

    def test_short_general_text(self):
        assert generate_suggestions("hey how are you doing", ContentIntent.GENERAL) == [ADD_DETAIL]

    def test_filler_words(self):
        text = "um so basically I went to the store"
        titles = [s.title for s in generate_suggestions(text, ContentIntent.GENERAL)]
        assert titles == ["Add more detail", "Trim filler words"]

    def test_long_text_skips_add_detail(self):
        assert ADD_DETAIL not in generate_suggestions(LONG_TEXT, ContentIntent.GENERAL)

    def test_satisfied_rules_do_not_fire(self, sample_job_text):
        suggestions = generate_suggestions(sample_job_text, ContentIntent.JOB_APPLICATION)
        titles = {s.title for s in suggestions}
        assert "Name your tech stack" not in titles
        assert "Quantify your impact" not in titles
        assert "Connect to the company" not in titles

    @pytest.mark.parametrize("intent", list(ContentIntent))
    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_capped_and_sorted(self, intent, text):
        suggestions = generate_suggestions(text, intent)
        assert len(suggestions) <= MAX_SUGGESTIONS
        ranks = [PRIORITY_ORDER[s.priority] for s in suggestions]
        assert ranks == sorted(ranks)

    def test_every_intent_has_rules(self):
        assert set(INTENT_SUGGESTION_RULES) == set(ContentIntent)


class TestSortAndCap:
    def test_stable_within_tier(self):
        def make(title, priority):
            return Suggestion(
                type=SuggestionType.TIP, title=title, description="", priority=priority
            )

        items = [
            make("low", SuggestionPriority.LOW),
            make("med-1", SuggestionPriority.MEDIUM),
            make("high", SuggestionPriority.HIGH),
            make("med-2", SuggestionPriority.MEDIUM),
        ]
        assert [s.title for s in sort_and_cap(items)] == ["high", "med-1", "med-2"]
