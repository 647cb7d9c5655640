"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from note_enhancer.cache.fact_cache import FactCache
from note_enhancer.clients.knowledge_client import KnowledgeClient
from note_enhancer.clients.llm_client import LLMClient
from note_enhancer.clients.transcription_client import TranscriptionClient
from note_enhancer.config import AppConfig, load_config
from note_enhancer.errors import EnhancementError, QuotaExceededError
from note_enhancer.logging.cost_calculator import calculate_cost
from note_enhancer.logging.models import FREE_TIER, PREMIUM_TIER, UsageLog
from note_enhancer.logging.usage_store import UsageStore
from note_enhancer.models.enhancement import RephrasingResult, ToneType
from note_enhancer.pipeline.context_gatherer import ContextGatherer
from note_enhancer.pipeline.entity_extractor import extract_terms
from note_enhancer.pipeline.intent_classifier import classify_intent
from note_enhancer.pipeline.knowledge_fetcher import KnowledgeFetcher
from note_enhancer.pipeline.orchestrator import EnhancementOrchestrator, PipelineRun
from note_enhancer.pipeline.prompt_composer import (
    classify_input_complexity,
    compute_token_budget,
)
from note_enhancer.pipeline.suggestion_engine import generate_suggestions
from note_enhancer.utils.text import word_count

app = typer.Typer(
    name="note-enhancer",
    help="Turn rough voice notes into polished writing",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)

TONE_HELP = "Output tone: " + ", ".join(t.value for t in ToneType)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _read_text(text: str | None, file: Path | None) -> str:
    if file is not None:
        if not file.exists():
            console.print(f"[red]File not found: {file}[/red]")
            raise typer.Exit(1)
        return file.read_text(encoding="utf-8")
    if text is None:
        console.print("[red]Provide TEXT or --file[/red]")
        raise typer.Exit(1)
    return text


def _fail(exc: EnhancementError) -> None:
    console.print(f"[red]{escape(exc.message)}[/red]")
    if isinstance(exc, QuotaExceededError):
        console.print(f"[yellow]Used {exc.used} of {exc.limit} this month.[/yellow]")
    raise typer.Exit(1)


class _Services:
    """Collaborators for one CLI run, created inside the running event loop."""

    def __init__(self, config: AppConfig, *, with_transcriber: bool = False):
        self.config = config
        self.llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
        self.transcriber = (
            TranscriptionClient(
                base_url=config.transcription.base_url,
                model=config.transcription.model,
                timeout=config.transcription.timeout,
            )
            if with_transcriber
            else None
        )
        self.knowledge = KnowledgeClient(
            timeout=config.knowledge.timeout,
            user_agent=config.knowledge.user_agent,
        )
        self.usage_store = UsageStore(config.quota.resolved_db_path)
        cache = FactCache(db_path=config.cache.resolved_db_path, ttl_days=config.cache.ttl_days)
        fetcher = KnowledgeFetcher(
            self.knowledge,
            cache,
            primary_sentences=config.knowledge.primary_sentences,
            secondary_sentences=config.knowledge.secondary_sentences,
        )
        gatherer = ContextGatherer(
            fetcher,
            max_terms=config.knowledge.max_terms,
            max_fact_sentences=config.knowledge.max_fact_sentences,
            specificity_patterns=config.knowledge.specificity_patterns,
        )
        self.orchestrator = EnhancementOrchestrator(
            self.llm,
            gatherer,
            self.transcriber,
            config=config.pipeline,
            usage_store=self.usage_store,
            free_tier_limit=config.quota.free_tier_limit,
            model=config.llm.model,
            temperature=config.llm.temperature,
            max_upload_mb=config.transcription.max_upload_mb,
        )

    async def aclose(self) -> None:
        await self.knowledge.aclose()
        if self.transcriber is not None:
            await self.transcriber.aclose()

    def save_log(
        self,
        mode: str,
        caller_id: str | None,
        tone: str,
        start: float,
        run: PipelineRun | None = None,
        error: EnhancementError | None = None,
    ) -> None:
        """Persist a UsageLog for this run; a store failure never fails the command."""
        stats = run.stats if run is not None else None
        log = UsageLog(
            caller_id=caller_id or "anonymous",
            mode=mode,
            tone=tone,
            detected_intent=stats.intent.value if stats else None,
            input_words=stats.input_words if stats else 0,
            context_used=bool(stats and stats.context_used),
            elapsed_seconds=time.monotonic() - start,
            total_input_tokens=stats.input_tokens if stats else 0,
            total_output_tokens=stats.output_tokens if stats else 0,
            knowledge_lookups=stats.knowledge_lookups if stats else 0,
            audio_seconds=stats.audio_seconds if stats else 0.0,
            estimated_cost_usd=calculate_cost(stats.calls, stats.audio_seconds) if stats else 0.0,
            success=error is None,
            error_message=error.message if error else None,
        )
        try:
            self.usage_store.save_log(log)
        except Exception:
            logger.exception("Failed to save usage log")


def _print_result(result: RephrasingResult, output: Path | None) -> None:
    console.print(Panel(escape(result.rephrased_text), title=f"Enhanced ({result.tone.value})"))
    console.print(f"[dim]Detected intent: {result.detected_intent.value}[/dim]")
    if result.suggestions:
        console.print("\n[yellow]Suggestions:[/yellow]")
        for s in result.suggestions:
            console.print(f"  {escape(f'[{s.priority.value}]')} [bold]{s.title}[/bold]: {s.description}")
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(
            json.dumps(result.model_dump(mode="json", by_alias=True), indent=2),
            encoding="utf-8",
        )
        console.print(f"\n[green]Saved: {output}[/green]")


@app.command()
def enhance(
    text: str = typer.Argument(None, help="Note text to enhance"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the note from a text file"),
    tone: str = typer.Option("professional", "--tone", "-t", help=TONE_HELP),
    caller: str = typer.Option(None, "--caller", help="Caller id for quota tracking"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Rephrase a note in the chosen tone."""
    _setup_logging(verbose)
    note = _read_text(text, file)
    config = load_config()

    async def _run() -> PipelineRun:
        services = _Services(config)
        start = time.monotonic()
        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Enhancing...", total=None)

                def on_phase(phase: str, detail: str) -> None:
                    progress.update(task, description=detail or phase)

                run = await services.orchestrator.run_enhance(
                    note, tone, caller_id=caller, on_phase=on_phase
                )
        except EnhancementError as exc:
            services.save_log("enhance", caller, tone, start, error=exc)
            raise
        finally:
            await services.aclose()
        services.save_log("enhance", caller, tone, start, run)
        return run

    try:
        run = asyncio.run(_run())
    except EnhancementError as exc:
        _fail(exc)
    _print_result(run.result, output)


@app.command()
def transcribe(
    audio: Path = typer.Argument(help="Audio file to transcribe"),
    language: str = typer.Option(None, "--language", "-l", help="Language hint, e.g. en"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Transcribe a recording without rephrasing it."""
    _setup_logging(verbose)
    if not audio.exists():
        console.print(f"[red]Audio file not found: {audio}[/red]")
        raise typer.Exit(1)
    config = load_config()

    async def _run():
        client = TranscriptionClient(
            base_url=config.transcription.base_url,
            model=config.transcription.model,
            timeout=config.transcription.timeout,
        )
        try:
            return await client.transcribe(audio, language)
        finally:
            await client.aclose()

    try:
        with console.status("Transcribing..."):
            result = asyncio.run(_run())
    except EnhancementError as exc:
        _fail(exc)
    console.print(Panel(
        escape(result.text),
        title=f"Transcript ({result.language}, {result.duration_seconds:.1f}s)",
    ))


@app.command()
def process(
    audio: Path = typer.Argument(help="Audio file to transcribe and enhance"),
    tone: str = typer.Option("professional", "--tone", "-t", help=TONE_HELP),
    caller: str = typer.Option(None, "--caller", help="Caller id for quota tracking"),
    language: str = typer.Option(None, "--language", "-l", help="Language hint, e.g. en"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Transcribe a recording and enhance the transcript."""
    _setup_logging(verbose)
    if not audio.exists():
        console.print(f"[red]Audio file not found: {audio}[/red]")
        raise typer.Exit(1)
    config = load_config()

    async def _run() -> PipelineRun:
        services = _Services(config, with_transcriber=True)
        start = time.monotonic()
        try:
            with console.status("Processing recording...") as status:
                run = await services.orchestrator.run_process_audio_bytes(
                    audio.read_bytes(),
                    audio.name,
                    tone,
                    caller_id=caller,
                    language=language,
                    on_phase=lambda phase, detail: status.update(detail or phase),
                )
        except EnhancementError as exc:
            services.save_log("process_audio", caller, tone, start, error=exc)
            raise
        finally:
            await services.aclose()
        services.save_log("process_audio", caller, tone, start, run)
        return run

    try:
        run = asyncio.run(_run())
    except EnhancementError as exc:
        _fail(exc)
    console.print(Panel(escape(run.result.transcription.text), title="Transcript"))
    _print_result(run.result.rephrasing, output)


@app.command()
def analyze(
    text: str = typer.Argument(None, help="Note text to analyze"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the note from a text file"),
) -> None:
    """Show intent, complexity, lookup terms and suggestions without any API calls."""
    note = _read_text(text, file)
    config = load_config()

    intent = classify_intent(note)
    complexity = classify_input_complexity(note, intent, config.pipeline.simple_word_threshold)
    terms = extract_terms(note, max_terms=config.knowledge.max_terms)
    budget = compute_token_budget(note, complexity, config.pipeline)

    table = Table(title="Note analysis", show_header=False)
    table.add_row("Words", str(word_count(note)))
    table.add_row("Intent", intent.value)
    table.add_row("Complexity", complexity.value)
    table.add_row("Token budget", str(budget))
    table.add_row("Lookup terms", ", ".join(terms) or "-")
    console.print(table)

    suggestions = generate_suggestions(note, intent)
    if suggestions:
        console.print("\n[yellow]Suggestions:[/yellow]")
        for s in suggestions:
            console.print(f"  {escape(f'[{s.priority.value}]')} [bold]{s.title}[/bold]: {s.description}")


@app.command()
def usage(
    caller: str = typer.Option(None, "--caller", help="Show quota state for this caller"),
) -> None:
    """Show quota state and this month's usage."""
    config = load_config()
    store = UsageStore(config.quota.resolved_db_path)

    if caller:
        state = store.get_usage(caller)
        if state is None:
            console.print(f"[yellow]No usage recorded for {caller}[/yellow]")
        else:
            limit = "unlimited" if state.tier != FREE_TIER else str(config.quota.free_tier_limit)
            reset = state.usage_reset_at.date().isoformat() if state.usage_reset_at else "-"
            console.print(Panel(
                f"Tier: {state.tier}\nUsed: {state.monthly_usage} / {limit}\nNext reset: {reset}",
                title=caller,
            ))

    stats = store.get_monthly_stats()
    console.print(Panel(
        f"Runs: {stats['total_runs']} (success {stats['success_rate']:.0f}%)\n"
        f"Context used: {stats['context_rate']:.0f}% of runs\n"
        f"Tokens: {stats['total_input_tokens']} in / {stats['total_output_tokens']} out\n"
        f"Knowledge lookups: {stats['total_lookups']}\n"
        f"Audio: {stats['total_audio_seconds']:.0f}s\n"
        f"Estimated cost: ${stats['total_cost_usd']:.4f}",
        title=f"Usage {stats['month']}",
    ))


@app.command()
def register(
    caller: str = typer.Argument(help="Caller id to register"),
    tier: str = typer.Option(FREE_TIER, "--tier", help=f"{FREE_TIER} or {PREMIUM_TIER}"),
) -> None:
    """Register a caller for quota tracking, or change its tier."""
    if tier not in (FREE_TIER, PREMIUM_TIER):
        console.print(f"[red]Unknown tier: {escape(tier)} (use {FREE_TIER} or {PREMIUM_TIER})[/red]")
        raise typer.Exit(1)
    config = load_config()
    store = UsageStore(config.quota.resolved_db_path)
    store.set_tier(caller, tier)
    console.print(f"[green]{escape(caller)} registered on the {tier} tier.[/green]")


@app.command("cache-clear")
def cache_clear(
    expired: bool = typer.Option(False, "--expired", help="Only remove facts past their TTL"),
) -> None:
    """Clear the fact cache."""
    config = load_config()
    cache = FactCache(db_path=config.cache.resolved_db_path, ttl_days=config.cache.ttl_days)
    removed = cache.purge_expired() if expired else cache.clear()
    console.print(f"[green]Removed {removed} cached facts.[/green]")


if __name__ == "__main__":
    app()
