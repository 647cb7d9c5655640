"""Tests for the prompt composer and complexity classification."""

import pytest

from note_enhancer.config import PipelineConfig
from note_enhancer.models.enhancement import ContentIntent, InputComplexity, ToneType
from note_enhancer.pipeline.prompt_composer import (
    INTENT_GUIDANCE,
    SIMPLE_INPUT_GUIDANCE,
    TONE_TEMPLATES,
    PromptComposer,
    classify_input_complexity,
    compute_token_budget,
)


def _words(n: int) -> str:
    return " ".join(["word"] * n)


class TestComplexity:
    def test_short_general_is_simple(self, sample_greeting_text):
        assert classify_input_complexity(sample_greeting_text, ContentIntent.GENERAL) == InputComplexity.SIMPLE

    def test_short_with_intent_is_substantial(self):
        assert classify_input_complexity("quick email", ContentIntent.EMAIL_DRAFT) == InputComplexity.SUBSTANTIAL

    def test_threshold_is_exclusive(self):
        assert classify_input_complexity(_words(10), ContentIntent.GENERAL) == InputComplexity.SUBSTANTIAL
        assert classify_input_complexity(_words(9), ContentIntent.GENERAL) == InputComplexity.SIMPLE


class TestTokenBudget:
    def test_simple_scales_with_length(self, sample_greeting_text):
        assert compute_token_budget(sample_greeting_text, InputComplexity.SIMPLE) == 20

    def test_simple_floor(self):
        assert compute_token_budget("hi", InputComplexity.SIMPLE) == 16

    @pytest.mark.parametrize("words, expected", [(5, 500), (200, 800), (1000, 2000)])
    def test_substantial_clamped(self, words, expected):
        assert compute_token_budget(_words(words), InputComplexity.SUBSTANTIAL) == expected

    def test_custom_config(self):
        config = PipelineConfig(tokens_per_word=2, min_tokens=100, max_tokens=300)
        assert compute_token_budget(_words(80), InputComplexity.SUBSTANTIAL, config) == 160


class TestPromptComposer:
    def test_tables_are_complete(self):
        assert set(TONE_TEMPLATES) == set(ToneType)
        assert set(INTENT_GUIDANCE) == set(ContentIntent)

    def test_includes_tone_guidance_and_context(self):
        prompt = PromptComposer().compose(
            "I'm applying for the internship at Google, I built a web app with React",
            ToneType.CASUAL,
            ContentIntent.JOB_APPLICATION,
            context="VERIFIED FACTS:\n- Google: fact",
        )
        assert prompt.system.startswith(TONE_TEMPLATES[ToneType.CASUAL])
        assert INTENT_GUIDANCE[ContentIntent.JOB_APPLICATION] in prompt.system
        assert prompt.system.endswith("- Google: fact")
        assert prompt.complexity == InputComplexity.SUBSTANTIAL
        assert prompt.max_tokens == 500

    def test_general_simple_prompt(self, sample_greeting_text):
        prompt = PromptComposer().compose(
            sample_greeting_text, ToneType.PROFESSIONAL, ContentIntent.GENERAL
        )
        assert prompt.complexity == InputComplexity.SIMPLE
        assert SIMPLE_INPUT_GUIDANCE in prompt.system
        assert "VERIFIED FACTS" not in prompt.system
        assert prompt.max_tokens == 20

    def test_no_simple_guidance_for_substantial(self):
        prompt = PromptComposer().compose(_words(40), ToneType.CONCISE, ContentIntent.GENERAL)
        assert SIMPLE_INPUT_GUIDANCE not in prompt.system
