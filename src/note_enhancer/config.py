"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if value < low or (high is not None and value > high):
        bound = f"between {low} and {high}" if high is not None else f">= {low}"
        raise ValueError(f"{name} must be {bound}, got {value!r}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    temperature: float = 0.7
    timeout: int = 120
    max_retries: int = 0

    def __post_init__(self) -> None:
        _check_range("temperature", self.temperature, 0.0, 1.0)
        _check_range("timeout", self.timeout, 1)
        _check_range("max_retries", self.max_retries, 0, 5)


@dataclass(frozen=True)
class TranscriptionConfig:
    base_url: str = "https://api.groq.com/openai/v1"
    model: str = "whisper-large-v3"
    timeout: int = 120
    max_upload_mb: int = 25

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 1)
        _check_range("max_upload_mb", self.max_upload_mb, 1, 100)


@dataclass(frozen=True)
class KnowledgeConfig:
    timeout: float = 10.0
    user_agent: str = "NoteEnhancer/0.1 (knowledge lookup)"
    max_terms: int = 8
    primary_sentences: int = 4
    secondary_sentences: int = 2
    max_fact_sentences: int = 3
    # Regexes replacing the built-in specificity patterns when set.
    specificity_patterns: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 0.5)
        _check_range("max_terms", self.max_terms, 1, 8)
        _check_range("primary_sentences", self.primary_sentences, 1, 4)
        _check_range("secondary_sentences", self.secondary_sentences, 1, 2)
        _check_range("max_fact_sentences", self.max_fact_sentences, 1, 3)
        if self.specificity_patterns is not None:
            object.__setattr__(self, "specificity_patterns", tuple(self.specificity_patterns))


@dataclass(frozen=True)
class PipelineConfig:
    simple_word_threshold: int = 10
    context_min_words: int = 25
    max_input_chars: int = 10_000
    simple_tokens_per_word: int = 4
    simple_min_tokens: int = 16
    tokens_per_word: int = 4
    min_tokens: int = 500
    max_tokens: int = 2000

    def __post_init__(self) -> None:
        _check_range("simple_word_threshold", self.simple_word_threshold, 1, 100)
        _check_range("context_min_words", self.context_min_words, 0)
        _check_range("max_input_chars", self.max_input_chars, 1)
        _check_range("simple_tokens_per_word", self.simple_tokens_per_word, 1, 20)
        _check_range("tokens_per_word", self.tokens_per_word, 1, 20)
        _check_range("min_tokens", self.min_tokens, 1)
        _check_range("max_tokens", self.max_tokens, 1, 8192)
        if self.min_tokens > self.max_tokens:
            raise ValueError(
                f"min_tokens ({self.min_tokens}) must not exceed max_tokens ({self.max_tokens})"
            )


@dataclass(frozen=True)
class QuotaConfig:
    free_tier_limit: int = 5
    db_path: str = "~/.note-enhancer/usage.db"

    def __post_init__(self) -> None:
        _check_range("free_tier_limit", self.free_tier_limit, 0)

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class CacheConfig:
    ttl_days: int = 7
    db_path: str = "~/.note-enhancer/facts.db"

    def __post_init__(self) -> None:
        _check_range("ttl_days", self.ttl_days, 1, 365)

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    transcription: TranscriptionConfig = field(default_factory=TranscriptionConfig)
    knowledge: KnowledgeConfig = field(default_factory=KnowledgeConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    quota: QuotaConfig = field(default_factory=QuotaConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        transcription=TranscriptionConfig(**raw.get("transcription", {})),
        knowledge=KnowledgeConfig(**raw.get("knowledge", {})),
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        quota=QuotaConfig(**raw.get("quota", {})),
        cache=CacheConfig(**raw.get("cache", {})),
    )
