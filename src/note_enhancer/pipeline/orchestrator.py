"""Main pipeline orchestrator - coordinates the enhancement stages."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from note_enhancer.clients.llm_client import DEFAULT_MODEL, LLMClient
from note_enhancer.clients.transcription_client import TranscriptionClient
from note_enhancer.config import PipelineConfig
from note_enhancer.errors import ConfigurationError, InvalidInputError, QuotaExceededError
from note_enhancer.logging.models import FREE_TIER
from note_enhancer.logging.usage_store import UsageStore
from note_enhancer.models.enhancement import (
    AudioEnhancementResult,
    ContentIntent,
    InputComplexity,
    RephrasingResult,
    ToneType,
    TranscriptionResult,
)
from note_enhancer.pipeline.context_gatherer import ContextGatherer, GatheredContext
from note_enhancer.pipeline.entity_extractor import extract_terms
from note_enhancer.pipeline.intent_classifier import classify_intent
from note_enhancer.pipeline.prompt_composer import PromptComposer, classify_input_complexity
from note_enhancer.pipeline.suggestion_engine import generate_suggestions
from note_enhancer.utils.audio import audio_suffix, temporary_audio_file, validate_audio
from note_enhancer.utils.text import word_count

logger = logging.getLogger(__name__)

PhaseCallback = Callable[[str, str], None]


@dataclass
class RunStats:
    """Diagnostics for one pipeline run."""

    intent: ContentIntent
    complexity: InputComplexity
    input_words: int
    context_used: bool = False
    max_tokens: int = 0
    fell_back: bool = False
    elapsed_seconds: float = 0.0
    model: str = DEFAULT_MODEL
    input_tokens: int = 0
    output_tokens: int = 0
    knowledge_lookups: int = 0
    audio_seconds: float = 0.0

    @property
    def calls(self) -> list[tuple[str, int, int]]:
        """(model, input_tokens, output_tokens) per generation call, for cost estimates."""
        return [(self.model, self.input_tokens, self.output_tokens)]


@dataclass
class PipelineRun:
    """A result together with the diagnostics of the run that produced it."""

    result: RephrasingResult | AudioEnhancementResult
    stats: RunStats


class EnhancementOrchestrator:
    """Runs classify -> gather -> compose -> generate -> suggest for one note."""

    def __init__(
        self,
        llm: LLMClient,
        gatherer: ContextGatherer,
        transcriber: TranscriptionClient | None = None,
        *,
        config: PipelineConfig | None = None,
        usage_store: UsageStore | None = None,
        free_tier_limit: int = 5,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_upload_mb: int = 25,
    ):
        self.llm = llm
        self.gatherer = gatherer
        self.transcriber = transcriber
        self.config = config or PipelineConfig()
        self.composer = PromptComposer(self.config)
        self.usage_store = usage_store
        self.free_tier_limit = free_tier_limit
        self.model = model
        self.temperature = temperature
        self.max_upload_mb = max_upload_mb

    # --- Public operations ---

    async def enhance(
        self,
        text: str,
        tone: ToneType | str = ToneType.PROFESSIONAL,
        *,
        caller_id: str | None = None,
        on_phase: PhaseCallback | None = None,
    ) -> RephrasingResult:
        """Rephrase text in the requested tone.

        Args:
            text: Raw or transcribed note text.
            tone: Output tone, as a ToneType or its string value.
            caller_id: Identified caller whose monthly quota applies.
            on_phase: Optional callback(phase_name, detail) for progress.

        Raises:
            InvalidInputError: Empty or oversized text, or an unknown tone.
            QuotaExceededError: The caller's monthly allowance is used up.
            UpstreamServiceError: The generation call failed.
        """
        run = await self.run_enhance(text, tone, caller_id=caller_id, on_phase=on_phase)
        return run.result

    async def run_enhance(
        self,
        text: str,
        tone: ToneType | str = ToneType.PROFESSIONAL,
        *,
        caller_id: str | None = None,
        on_phase: PhaseCallback | None = None,
    ) -> PipelineRun:
        """enhance, returning the run's diagnostics alongside the result."""
        self._validate_text(text)
        tone = ToneType.parse(tone)
        await asyncio.to_thread(self._check_quota, caller_id)

        run = await self._run(text, tone, on_phase)
        await asyncio.to_thread(self._record_usage, caller_id)
        return run

    async def transcribe(
        self, audio_path: str | Path, language: str | None = None
    ) -> TranscriptionResult:
        """Speech-to-text only; no quota and no rephrasing."""
        return await self._require_transcriber().transcribe(audio_path, language)

    async def process_audio(
        self,
        audio_path: str | Path,
        tone: ToneType | str = ToneType.PROFESSIONAL,
        *,
        caller_id: str | None = None,
        language: str | None = None,
        on_phase: PhaseCallback | None = None,
    ) -> AudioEnhancementResult:
        """Transcribe a recording and enhance the transcript.

        The quota is checked before the transcription call and the caller's
        counter moves once for the combined operation.
        """
        run = await self.run_process_audio(
            audio_path, tone, caller_id=caller_id, language=language, on_phase=on_phase
        )
        return run.result

    async def run_process_audio(
        self,
        audio_path: str | Path,
        tone: ToneType | str = ToneType.PROFESSIONAL,
        *,
        caller_id: str | None = None,
        language: str | None = None,
        on_phase: PhaseCallback | None = None,
    ) -> PipelineRun:
        tone = ToneType.parse(tone)
        transcriber = self._require_transcriber()
        await asyncio.to_thread(self._check_quota, caller_id)

        _notify(on_phase, "transcribe", str(audio_path))
        transcription = await transcriber.transcribe(audio_path, language)
        _notify(on_phase, "transcribe_done", f"{transcription.duration_seconds:.1f}s of audio")

        text = transcription.text.strip()
        if not text:
            raise InvalidInputError("No speech detected in the recording")
        self._validate_text(text)

        run = await self._run(text, tone, on_phase)
        run.stats.audio_seconds = transcription.duration_seconds
        await asyncio.to_thread(self._record_usage, caller_id)
        return PipelineRun(
            result=AudioEnhancementResult(transcription=transcription, rephrasing=run.result),
            stats=run.stats,
        )

    async def process_audio_bytes(
        self,
        data: bytes,
        filename: str,
        tone: ToneType | str = ToneType.PROFESSIONAL,
        *,
        caller_id: str | None = None,
        language: str | None = None,
        on_phase: PhaseCallback | None = None,
    ) -> AudioEnhancementResult:
        """process_audio for an in-memory upload; unknown tones fall back to professional."""
        run = await self.run_process_audio_bytes(
            data, filename, tone, caller_id=caller_id, language=language, on_phase=on_phase
        )
        return run.result

    async def run_process_audio_bytes(
        self,
        data: bytes,
        filename: str,
        tone: ToneType | str = ToneType.PROFESSIONAL,
        *,
        caller_id: str | None = None,
        language: str | None = None,
        on_phase: PhaseCallback | None = None,
    ) -> PipelineRun:
        validate_audio(filename, len(data), self.max_upload_mb)
        try:
            tone = ToneType.parse(tone)
        except InvalidInputError:
            logger.warning("Unknown tone %r for audio upload, using professional", tone)
            tone = ToneType.PROFESSIONAL

        with temporary_audio_file(data, suffix=audio_suffix(filename)) as path:
            return await self.run_process_audio(
                path,
                tone,
                caller_id=caller_id,
                language=language,
                on_phase=on_phase,
            )

    # --- Pipeline ---

    async def _run(
        self,
        text: str,
        tone: ToneType,
        on_phase: PhaseCallback | None,
    ) -> PipelineRun:
        start = time.monotonic()
        words = word_count(text)

        intent = classify_intent(text)
        complexity = classify_input_complexity(text, intent, self.config.simple_word_threshold)
        logger.info("Detected intent: %s (%s, %d words)", intent.value, complexity.value, words)
        _notify(on_phase, "classify_done", f"{intent.value} / {complexity.value}")

        gathered = GatheredContext()
        if self._should_gather(text, complexity, words):
            _notify(on_phase, "context", "Looking up names and places")
            gathered = await self.gatherer.collect(text)
            if gathered.block:
                logger.info("Using verified context (%d chars)", len(gathered.block))
        context = gathered.block
        _notify(on_phase, "context_done", "context added" if context else "no context")

        prompt = self.composer.compose(text, tone, intent, context, complexity)
        _notify(on_phase, "generate", f"tone={tone.value} max_tokens={prompt.max_tokens}")
        response = await self.llm.generate(
            prompt=text,
            system=prompt.system,
            model=self.model,
            temperature=self.temperature,
            max_tokens=prompt.max_tokens,
        )

        rephrased = response.text.strip()
        fell_back = not rephrased
        if fell_back:
            logger.warning("Model returned no text; returning the original input")
            rephrased = text

        suggestions = generate_suggestions(text, intent)
        elapsed = time.monotonic() - start
        stats = RunStats(
            intent=intent,
            complexity=complexity,
            input_words=words,
            context_used=bool(context),
            max_tokens=prompt.max_tokens,
            fell_back=fell_back,
            elapsed_seconds=elapsed,
            model=self.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            knowledge_lookups=len(gathered.terms),
        )
        _notify(on_phase, "done", f"{elapsed:.1f}s")

        result = RephrasingResult(
            original_text=text,
            rephrased_text=rephrased,
            tone=tone,
            detected_intent=intent,
            suggestions=suggestions,
        )
        return PipelineRun(result=result, stats=stats)

    def _should_gather(self, text: str, complexity: InputComplexity, words: int) -> bool:
        if complexity == InputComplexity.SIMPLE:
            return False
        if words >= self.config.context_min_words:
            return True
        return bool(extract_terms(text, max_terms=self.gatherer.max_terms))

    def _validate_text(self, text: str) -> None:
        if not text or not text.strip():
            raise InvalidInputError("Text is required")
        if len(text) > self.config.max_input_chars:
            raise InvalidInputError(
                f"Text too long (max {self.config.max_input_chars} characters)"
            )

    def _require_transcriber(self) -> TranscriptionClient:
        if self.transcriber is None:
            raise ConfigurationError(
                "Transcription is not configured. Set GROQ_API_KEY in your .env file."
            )
        return self.transcriber

    # --- Quota ---

    def _check_quota(self, caller_id: str | None) -> None:
        """Reset a free caller's month if due, then reject when the allowance is spent.

        Callers without a usage row (never registered) and non-free tiers are
        not limited.
        """
        if caller_id is None or self.usage_store is None:
            return
        usage = self.usage_store.get_usage(caller_id)
        if usage is None or usage.tier != FREE_TIER:
            return
        self.usage_store.reset_if_due(caller_id)
        usage = self.usage_store.get_usage(caller_id)
        if usage.monthly_usage >= self.free_tier_limit:
            logger.info(
                "Quota exhausted for %s (%d/%d)",
                caller_id, usage.monthly_usage, self.free_tier_limit,
            )
            raise QuotaExceededError(limit=self.free_tier_limit, used=usage.monthly_usage)

    def _record_usage(self, caller_id: str | None) -> None:
        if caller_id is None or self.usage_store is None:
            return
        if self.usage_store.get_usage(caller_id) is None:
            logger.debug("Caller %s is not registered; usage not counted", caller_id)
            return
        used = self.usage_store.increment_usage(caller_id)
        logger.debug("Usage for %s is now %d", caller_id, used)


def _notify(on_phase: PhaseCallback | None, phase: str, detail: str = "") -> None:
    if on_phase:
        on_phase(phase, detail)
