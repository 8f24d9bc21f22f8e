"""Pipeline orchestrator: fetch, deduplicate, classify, analyze, persist, report."""

import json
import logging
import time
from typing import Dict, List, Optional, Tuple

import pendulum
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from ..classification import (
    Analyzer,
    DeepAnalyzer,
    KeywordClassifier,
    LLMClassifier,
    LLMProvider,
    OpenAIProvider,
    RelevanceClassifier,
    TemplateAnalyzer,
)
from ..config import Config, FeedConfig
from ..errors import ConfigurationError
from ..ingestion import ContentExtractor, Deduplicator, FeedItem, RSSFetcher, merge_feed_items
from ..models import AnalyzedItem, MatchCandidate, RunResult, RunState
from ..output import MarkdownReport, ReportMaterializer, TerminalReport

console = Console()
logger = logging.getLogger(__name__)


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, state: RunState, description: str):
        self.state = state
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.stats: Dict = {}

    @property
    def name(self) -> str:
        return self.state.value

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, stats: Optional[Dict] = None):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        if stats:
            self.stats.update(stats)

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def build_reporters(config: Config) -> List[ReportMaterializer]:
    """Report outputs enabled in the configuration."""
    reporters: List[ReportMaterializer] = []
    output = config.config.output
    if output.terminal:
        reporters.append(TerminalReport(console))
    if output.markdown.enabled:
        reporters.append(MarkdownReport(config.reports_dir))
    return reporters


class PipelineOrchestrator:
    """Runs one batch pass of the pipeline.

    States follow ``RunState`` in order. A run with nothing fetched, or
    nothing new after deduplication, ends early in ``DONE``. Every unseen
    item is recorded in the store exactly once, matched or not.
    """

    def __init__(
        self,
        config: Config,
        store,
        feeds: Optional[List[FeedConfig]] = None,
        reporters: Optional[List[ReportMaterializer]] = None,
        provider: Optional[LLMProvider] = None,
        fetcher: Optional[RSSFetcher] = None,
        extractor: Optional[ContentExtractor] = None,
        show_progress: bool = True,
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            config: Loaded configuration
            store: Seen-item store, owned by the caller
            feeds: Feed sources (default: sources.yaml)
            reporters: Report outputs (default: from configuration)
            provider: LLM provider (default: built from configuration)
            fetcher: Feed fetcher (default: built from run defaults)
            extractor: Content extractor (default: built from run defaults)
            show_progress: Show a spinner and the summary table
        """
        self.config = config
        self.store = store
        self.feeds = feeds if feeds is not None else config.load_feeds()
        self.reporters = reporters if reporters is not None else build_reporters(config)
        self.provider = provider
        self.show_progress = show_progress

        defaults = config.config.run_defaults
        self.fetcher = fetcher or RSSFetcher(
            timeout=defaults.fetch_timeout,
            max_concurrent=defaults.max_concurrent_feeds,
        )
        self.extractor = extractor or ContentExtractor(
            timeout=defaults.extract_timeout,
            max_concurrent=defaults.max_concurrent_extractions,
            max_chars=config.config.analysis.content_max_chars,
        )

        self.stages = [
            PipelineStage(RunState.FETCHING, "Fetching feeds"),
            PipelineStage(RunState.DEDUPLICATING, "Filtering processed items"),
            PipelineStage(RunState.CLASSIFYING, "Classifying relevance"),
            PipelineStage(RunState.ANALYZING, "Analyzing matched items"),
            PipelineStage(RunState.PERSISTING, "Recording processed items"),
            PipelineStage(RunState.REPORTING, "Writing reports"),
        ]
        self.total_start_time: Optional[float] = None

    def _get_llm_provider(self) -> LLMProvider:
        """Get configured LLM provider.

        Raises:
            ConfigurationError: If the provider is unknown or has no API key.
        """
        if self.provider is not None:
            return self.provider

        llm_config = self.config.get_llm_config()

        if llm_config.get("provider") != "openai":
            raise ConfigurationError(f"Unknown LLM provider: {llm_config.get('provider')}")

        api_key = llm_config.get("api_key")
        if not api_key:
            env_name = llm_config.get("api_key_env") or "OPENAI_API_KEY"
            raise ConfigurationError(
                f"No API key found. Set {env_name} or run with --dry-run to skip the LLM."
            )

        self.provider = OpenAIProvider(
            api_key=api_key,
            model=llm_config.get("model", "gpt-4o-mini"),
            base_url=llm_config.get("base_url"),
            timeout=llm_config.get("timeout", 60.0),
        )
        return self.provider

    def _build_stage_components(self, dry_run: bool) -> Tuple[RelevanceClassifier, Analyzer]:
        """Classifier and analyzer for the run mode."""
        if dry_run:
            return KeywordClassifier(), TemplateAnalyzer()

        provider = self._get_llm_provider()
        settings = self.config.config
        classifier = LLMClassifier(
            provider,
            batch_size=settings.classifier.batch_size,
            min_relevance=settings.classifier.min_relevance,
            admission_threshold=settings.classifier.admission_threshold,
            invalid_topic_policy=settings.classifier.invalid_topic_policy,
            max_tokens=settings.llm.max_tokens,
        )
        analyzer = DeepAnalyzer(
            provider,
            language=settings.analysis.language,
            summary_max_chars=settings.analysis.summary_max_chars,
            max_tokens=settings.llm.max_tokens,
        )
        return classifier, analyzer

    def run(
        self,
        run_date: Optional[str] = None,
        dry_run: bool = False,
        max_items: Optional[int] = None,
    ) -> RunResult:
        """
        Run the pipeline once.

        Args:
            run_date: Report date (YYYY-MM-DD). Default: today
            dry_run: Use keyword matching and template analysis, no LLM calls
            max_items: Soft cap on fetched items (default from configuration)

        Returns:
            RunResult with the final state, statistics and analyzed items

        Raises:
            ConfigurationError: If a required credential is missing
            StoreError: If the seen-item store cannot be opened
        """
        self.total_start_time = time.time()
        if run_date is None:
            run_date = pendulum.now().format("YYYY-MM-DD")
        if max_items is None:
            max_items = self.config.config.run_defaults.max_articles_per_run

        classifier, analyzer = self._build_stage_components(dry_run)

        if dry_run:
            console.print("[yellow]Dry-run: keyword matching only, no LLM calls[/yellow]")

        opened_here = not self.store.is_open
        self.store.open()
        result = RunResult()

        try:
            self._execute_pipeline(result, run_date, max_items, classifier, analyzer, dry_run)
        finally:
            if opened_here:
                self.store.close()
            result.stats.duration = time.time() - self.total_start_time
            try:
                self._save_stage_stats(run_date, result)
            except OSError as e:
                logger.error("Could not save pipeline stats: %s", e)
            if self.show_progress:
                self._print_summary(result)

        return result

    def _execute_pipeline(
        self,
        result: RunResult,
        run_date: str,
        max_items: int,
        classifier: RelevanceClassifier,
        analyzer: Analyzer,
        dry_run: bool,
    ) -> None:
        """Execute the pipeline stages, updating ``result`` in place."""
        stats = result.stats
        topics = self.config.config.topics

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            disable=not self.show_progress,
            transient=True,
        ) as progress:

            # Fetching
            stage = self._begin(result, RunState.FETCHING, progress)
            enabled_feeds = [f for f in self.feeds if f.enabled]
            feed_results = self.fetcher.fetch_feeds_sync(enabled_feeds)
            items = merge_feed_items(feed_results, max_items)

            stats.source_count = len(enabled_feeds)
            stats.total_fetched = len(items)
            stats.failed_sources = sum(1 for r in feed_results if not r.success)
            stage.complete({"total_feeds": stats.source_count, "failed_feeds": stats.failed_sources, "items": len(items)})
            logger.info("Fetched %d items from %d sources", len(items), stats.source_count)

            if not items:
                console.print("[yellow]No items fetched, check the feed configuration[/yellow]")
                result.state = RunState.DONE
                return

            # Deduplicating
            stage = self._begin(result, RunState.DEDUPLICATING, progress)
            unseen = Deduplicator(self.store).filter_unseen(items)
            stats.new_count = len(unseen)
            stage.complete({"new": len(unseen), "skipped": len(items) - len(unseen)})

            if not unseen:
                console.print("No new items to process")
                result.state = RunState.DONE
                return

            # Classifying
            stage = self._begin(result, RunState.CLASSIFYING, progress)
            if not topics:
                logger.warning("No topics configured, nothing can match")
            matched = classifier.classify(unseen, topics)
            stats.matched_count = len(matched)
            stats.failed_batches = classifier.failed_batches
            stage.complete({"matched": len(matched), "failed_batches": classifier.failed_batches})

            # Enriching and analyzing
            stage = self._begin(result, RunState.ANALYZING, progress)
            result.results = self._analyze(matched, analyzer, dry_run)
            stage.complete({"analyzed": len(result.results)})

            # Persisting
            stage = self._begin(result, RunState.PERSISTING, progress)
            stats.records_written = self._persist(unseen, result.results)
            stage.complete({"written": stats.records_written})

            # Reporting
            stage = self._begin(result, RunState.REPORTING, progress)
            progress.stop()
            for reporter in self.reporters:
                path = reporter.emit(result.results, stats, run_date)
                if path is not None:
                    result.report_paths.append(path)
                    console.print(f"Report saved: {path}")
            stage.complete({"reports": len(result.report_paths)})

        result.state = RunState.DONE

    def _begin(self, result: RunResult, state: RunState, progress: Progress) -> PipelineStage:
        result.state = state
        stage = next(s for s in self.stages if s.state == state)
        for task_id in list(progress.task_ids):
            progress.remove_task(task_id)
        progress.add_task(stage.description, total=None)
        stage.start()
        return stage

    def _analyze(
        self, matched: List[MatchCandidate], analyzer: Analyzer, dry_run: bool
    ) -> List[AnalyzedItem]:
        """Enrich matched items with page text, then analyze each one."""
        if not matched:
            return []

        contents: Dict[str, str] = {}
        if not dry_run:
            contents = self.extractor.extract_all_sync([c.item.url for c in matched])

        analyzed = []
        for candidate in matched:
            content = contents.get(candidate.item.url) or candidate.item.summary
            analysis = analyzer.analyze(candidate, content)
            analyzed.append(AnalyzedItem(candidate=candidate, content=content, analysis=analysis))
        return analyzed

    def _persist(self, unseen: List[FeedItem], analyzed: List[AnalyzedItem]) -> int:
        """Record matched and unmatched items. Returns the number of new rows."""
        matched_urls = {a.item.url for a in analyzed}
        unmatched = [item for item in unseen if item.url not in matched_urls]

        written = 0
        for entry in analyzed:
            written += self.store.mark_processed(entry.item, entry.topic.name, entry.analysis)
        for item in unmatched:
            written += self.store.mark_processed(item)
        return written

    def _save_stage_stats(self, run_date: str, result: RunResult) -> None:
        """Save pipeline stage statistics under the workspace run directory."""
        run_dir = self.config.workspace_root / "runs" / run_date
        run_dir.mkdir(parents=True, exist_ok=True)

        stats = {
            "pipeline": {
                "state": result.state.value,
                "completed_at": pendulum.now().to_iso8601_string(),
                **result.stats.model_dump(),
            },
            "stages": {
                stage.name: {
                    "duration": stage.duration,
                    "success": stage.success,
                    "stats": stage.stats,
                }
                for stage in self.stages
            },
            "llm": self.provider.get_usage_stats() if self.provider is not None else None,
        }

        stats_file = run_dir / "pipeline_stats.json"
        with open(stats_file, "w", encoding="utf-8") as f:
            json.dump(stats, f, indent=2)

    def _print_summary(self, result: RunResult) -> None:
        """Print pipeline execution summary."""
        table = Table(title="Pipeline Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages:
            if stage.success:
                status = "[green]✓[/green]"
            elif stage.start_time is None:
                status = "[dim]-[/dim]"
            else:
                status = "[red]✗[/red]"
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"
            details = ", ".join(f"{k}={v}" for k, v in stage.stats.items())
            table.add_row(stage.name.title(), status, duration, details)

        console.print()
        console.print(table)

        stats = result.stats
        style = "green" if result.state == RunState.DONE else "red"
        console.print(Panel.fit(
            f"Sources: {stats.source_count} ({stats.failed_sources} failed) • "
            f"Fetched: {stats.total_fetched} • New: {stats.new_count} • "
            f"Matched: {stats.matched_count} • Duration: {stats.duration:.1f}s",
            style=style,
        ))

        if self.provider is not None:
            usage = self.provider.get_usage_stats()
            if usage["api_calls"]:
                cost = usage.get("estimated_cost")
                cost_text = f" • ~${cost:.4f}" if cost else ""
                console.print(
                    f"[dim]LLM: {usage['model']} • {usage['api_calls']} calls • "
                    f"{usage['prompt_tokens']} in / {usage['completion_tokens']} out tokens{cost_text}[/dim]"
                )
