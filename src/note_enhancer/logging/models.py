"""Usage logging and quota data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

FREE_TIER = "free"
PREMIUM_TIER = "premium"


class CallerUsage(BaseModel):
    """Monthly quota state for one caller."""

    caller_id: str
    tier: str = FREE_TIER  # "free" | "premium"
    monthly_usage: int = 0
    usage_reset_at: datetime | None = None


class UsageLog(BaseModel):
    """Single usage log entry for a pipeline run."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    caller_id: str = "anonymous"
    timestamp: datetime = Field(default_factory=datetime.now)
    mode: str  # "enhance" | "process_audio" | "transcribe"
    tone: str | None = None
    detected_intent: str | None = None
    input_words: int = 0
    context_used: bool = False
    elapsed_seconds: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    knowledge_lookups: int = 0
    audio_seconds: float = 0.0
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_message: str | None = None
