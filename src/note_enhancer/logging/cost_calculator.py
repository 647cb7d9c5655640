"""Cost calculator for Claude API and Whisper transcription usage."""

from __future__ import annotations

# Pricing per 1M tokens (USD)
MODEL_PRICING: dict[str, dict[str, float]] = {
    "claude-haiku-4-5-20251001": {"input": 1.00, "output": 5.00},
    "claude-sonnet-4-5-20250929": {"input": 3.00, "output": 15.00},
}

# Groq whisper-large-v3 is $0.111 per audio hour
TRANSCRIPTION_COST_PER_MINUTE = 0.111 / 60


def calculate_cost(
    calls: list[tuple[str, int, int]],
    audio_seconds: float = 0.0,
) -> float:
    """Calculate total cost for a set of API calls and transcribed audio.

    Args:
        calls: List of (model_id, input_tokens, output_tokens) tuples.
        audio_seconds: Seconds of audio sent to the transcription API.

    Returns:
        Total estimated cost in USD. Knowledge lookups are free.
    """
    total = 0.0
    for model_id, input_tokens, output_tokens in calls:
        pricing = MODEL_PRICING.get(model_id)
        if pricing is None:
            continue
        total += (input_tokens / 1_000_000) * pricing["input"]
        total += (output_tokens / 1_000_000) * pricing["output"]
    total += (audio_seconds / 60) * TRANSCRIPTION_COST_PER_MINUTE
    return total
