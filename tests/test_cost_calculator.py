"""Tests for CostCalculator."""

from __future__ import annotations

import pytest

from note_enhancer.logging.cost_calculator import (
    MODEL_PRICING,
    TRANSCRIPTION_COST_PER_MINUTE,
    calculate_cost,
)


class TestCostCalculator:
    def test_haiku_cost(self):
        # 1M input + 1M output for Haiku: $1.00 + $5.00 = $6.00
        cost = calculate_cost([("claude-haiku-4-5-20251001", 1_000_000, 1_000_000)])
        assert cost == pytest.approx(6.00)

    def test_sonnet_cost(self):
        cost = calculate_cost([("claude-sonnet-4-5-20250929", 1_000_000, 1_000_000)])
        assert cost == pytest.approx(18.00)

    def test_small_token_count(self):
        cost = calculate_cost([("claude-haiku-4-5-20251001", 500, 200)])
        expected = (500 / 1_000_000) * 1.00 + (200 / 1_000_000) * 5.00
        assert cost == pytest.approx(expected)

    def test_unknown_model_is_free(self):
        assert calculate_cost([("some-other-model", 1000, 1000)]) == 0.0

    def test_audio_cost(self):
        cost = calculate_cost([], audio_seconds=120)
        assert cost == pytest.approx(2 * TRANSCRIPTION_COST_PER_MINUTE)

    def test_combined(self):
        calls = [("claude-haiku-4-5-20251001", 1000, 100)] * 2
        pricing = MODEL_PRICING["claude-haiku-4-5-20251001"]
        expected = 2 * (1000 / 1_000_000 * pricing["input"] + 100 / 1_000_000 * pricing["output"])
        assert calculate_cost(calls) == pytest.approx(expected)

    def test_empty(self):
        assert calculate_cost([]) == 0.0
