"""Thread and corpus analysis entry points.

Per-thread work (sentiment, pain extraction) is independent and can run in
parallel; everything corpus-wide happens after all of it is done.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

import trio

from . import pain, sentiment
from .analysis_config import AnalysisConfig
from .brand import BrandReport, compile_brand_report
from .config import WORKERS
from .models import (
    DetectedPattern,
    PainEvent,
    PainPointGroup,
    RankedPainPoint,
    Recommendation,
    Record,
    ReportCard,
    SentimentBreakdown,
    SentimentCategory,
    SentimentResult,
    Thread,
)

logger = logging.getLogger(__name__)


class ThreadAnalysis(Record):
    sentiment: SentimentResult
    pain_events: list[PainEvent] = []


class CorpusAnalysis(Record):
    sentiment_breakdown: SentimentBreakdown = SentimentBreakdown()
    pain_groups: list[PainPointGroup] = []
    top_pain_points: list[RankedPainPoint] = []
    patterns: list[DetectedPattern] = []
    recommendations: list[Recommendation] = []
    report_card: ReportCard | None = None  # only for brand/keyword corpora


def as_thread(thread: Thread | dict) -> Thread:
    """Accept a Thread or a plain dict with Thread's fields."""
    if isinstance(thread, Thread):
        return thread
    return Thread.model_validate(thread)


def coerce_threads(items: Iterable[Thread | dict]) -> list[Thread]:
    """Threads from a mixed input, dropping entries that aren't records at all."""
    threads = []
    for index, item in enumerate(items):
        if isinstance(item, (Thread, dict)):
            threads.append(as_thread(item))
        else:
            logger.warning(f"Skipping corpus item {index}: expected a thread, got {type(item).__name__}")
    return threads


def analyze_thread(thread: Thread | dict, config: AnalysisConfig | None = None) -> ThreadAnalysis:
    """Sentiment and pain events for one thread."""
    thread = as_thread(thread)
    return ThreadAnalysis(
        sentiment=sentiment.analyze(thread.full_text),
        pain_events=pain.extract(thread, config),
    )


def _aggregate(
    threads: list[Thread],
    analyses: list[ThreadAnalysis],
    config: AnalysisConfig,
    brand: str | None,
    domain: str | None,
) -> tuple[CorpusAnalysis, BrandReport | None]:
    """Join point: fold per-thread results into corpus-level output."""
    categories = Counter(a.sentiment.category for a in analyses)
    events = [event for a in analyses for event in a.pain_events]
    pain_analysis = pain.analyze_pain_points(events, config)

    brand_report = None
    if brand:
        brand_report = compile_brand_report(
            brand,
            threads,
            [a.sentiment for a in analyses],
            pain_analysis.top_pain_points,
            config,
            domain=domain,
        )

    corpus = CorpusAnalysis(
        sentiment_breakdown=SentimentBreakdown(
            positive=categories[SentimentCategory.POSITIVE],
            negative=categories[SentimentCategory.NEGATIVE],
            neutral=categories[SentimentCategory.NEUTRAL],
        ),
        pain_groups=pain.group_pain_points(events),
        top_pain_points=pain_analysis.top_pain_points,
        patterns=pain_analysis.patterns,
        recommendations=pain_analysis.recommendations,
        report_card=brand_report.report_card if brand_report else None,
    )
    logger.info(f"Analyzed {len(threads)} threads, {len(events)} pain events")
    return corpus, brand_report


def analyze_corpus(
    threads: Iterable[Thread | dict],
    brand: str | None = None,
    domain: str | None = None,
    config: AnalysisConfig | None = None,
) -> CorpusAnalysis:
    """Analyze a collection of threads.

    Args:
        threads: Threads in collection order.
        brand: Brand or keyword the threads were collected for. When given,
            the result carries a report card.
        domain: Optional brand domain.
        config: Tunables; defaults when omitted.

    Returns:
        CorpusAnalysis. The same input always produces the same output.
    """
    config = config or AnalysisConfig.default()
    threads = coerce_threads(threads)
    analyses = [analyze_thread(t, config) for t in threads]
    corpus, _ = _aggregate(threads, analyses, config, brand, domain)
    return corpus


def generate_brand_report(
    brand: str,
    threads: Iterable[Thread | dict],
    domain: str | None = None,
    config: AnalysisConfig | None = None,
) -> BrandReport:
    """Full brand report: overview, sentiment, engagement, topics,
    competitors, influencers, insights and report card."""
    config = config or AnalysisConfig.default()
    threads = coerce_threads(threads)
    analyses = [analyze_thread(t, config) for t in threads]
    _, report = _aggregate(threads, analyses, config, brand, domain)
    return report


async def analyze_corpus_concurrently(
    threads: Iterable[Thread | dict],
    brand: str | None = None,
    domain: str | None = None,
    config: AnalysisConfig | None = None,
    workers: int = WORKERS,
) -> CorpusAnalysis:
    """Like analyze_corpus, with per-thread analysis on worker threads.

    For collectors already running under trio. Results are stored by input
    position, so the output matches analyze_corpus exactly.
    """
    config = config or AnalysisConfig.default()
    threads = coerce_threads(threads)
    analyses: list[ThreadAnalysis | None] = [None] * len(threads)
    limiter = trio.CapacityLimiter(max(1, workers))

    async def analyze_one(index: int, thread: Thread) -> None:
        analyses[index] = await trio.to_thread.run_sync(analyze_thread, thread, config, limiter=limiter)

    async with trio.open_nursery() as nursery:
        for index, thread in enumerate(threads):
            nursery.start_soon(analyze_one, index, thread)

    corpus, _ = _aggregate(threads, analyses, config, brand, domain)  # type: ignore[arg-type]
    return corpus
