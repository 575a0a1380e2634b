"""Main CLI entry point for threadpulse."""

import argparse
import json
import logging
import sys
from functools import partial
from pathlib import Path

import trio
from rich.console import Console
from rich.table import Table

from ..analysis_config import AnalysisConfig
from ..config import CONFIG_PATH, LOG_FILE, LOG_LEVEL, WORKERS
from ..corpus import CorpusAnalysis, analyze_corpus, analyze_corpus_concurrently
from ..extractors.threads import extract_threads


def setup_logging():
    """Setup logging to THREADPULSE_LOG_FILE, or stderr when unset."""
    handlers: list[logging.Handler] = [
        logging.FileHandler(LOG_FILE, mode="a") if LOG_FILE else logging.StreamHandler(sys.stderr)
    ]
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=handlers,
    )
    return logging.getLogger(__name__)


def load_threads(path: Path) -> list[dict]:
    """Read thread records from a JSON file.

    Accepts a list of thread dicts, a list of listing items
    ({"kind": "t3", "data": {...}}), or a whole listing
    ({"data": {"children": [...]}}).
    """
    with open(path) as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("data", {}).get("children", []) if isinstance(data.get("data"), dict) else [data]
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of threads")

    # Raw listing posts carry reddit field names; normalize them
    if any(isinstance(item, dict) and ("data" in item or "selftext" in item or "num_comments" in item) for item in data):
        return [t.model_dump() for t in extract_threads(data)]
    return data


def print_summary(console: Console, corpus: CorpusAnalysis, label: str) -> None:
    """Print the headline numbers of an analysis."""
    breakdown = corpus.sentiment_breakdown
    console.print(f"\n[bold]{label}[/]: {breakdown.total} threads")
    console.print(
        f"  [green]{breakdown.positive} positive[/] | [red]{breakdown.negative} negative[/]"
        f" | [dim]{breakdown.neutral} neutral[/]"
    )

    if corpus.top_pain_points:
        table = Table(title="Top Pain Points")
        table.add_column("Category", style="cyan")
        table.add_column("Pattern")
        table.add_column("Total", justify="right", style="red")
        table.add_column("Count", justify="right")
        for point in corpus.top_pain_points:
            table.add_row(point.category.value, point.pattern, str(point.total_score), str(point.frequency))
        console.print(table)

    for pattern in corpus.patterns:
        console.print(f"  [yellow]{pattern.type}[/] ({pattern.severity}): {pattern.description}")

    for rec in corpus.recommendations:
        console.print(f"  [bold]{rec.priority.upper()}[/] {rec.action}: {rec.description}")

    card = corpus.report_card
    if card:
        grades = "  ".join(f"{name}={grade.value}" for name, grade in card.breakdown.items())
        console.print(f"\n[bold]Report card: {card.overall.value}[/]  {grades}")
        console.print(f"  {card.summary}")


def run_analyze(args: argparse.Namespace, console: Console) -> int:
    logger = setup_logging()
    try:
        config = AnalysisConfig.load(args.config or CONFIG_PATH)
    except ValueError as e:
        console.print(f"[red]Invalid config: {e}[/]")
        return 1

    try:
        threads = load_threads(args.file)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error reading {args.file}: {e}[/]")
        return 1

    logger.info(f"Loaded {len(threads)} threads from {args.file}")

    if args.workers > 1:
        corpus = trio.run(partial(
            analyze_corpus_concurrently, threads, brand=args.brand, domain=args.domain,
            config=config, workers=args.workers,
        ))
    else:
        corpus = analyze_corpus(threads, brand=args.brand, domain=args.domain, config=config)

    if args.json:
        print(corpus.model_dump_json(by_alias=True, indent=2))
    else:
        print_summary(console, corpus, args.brand or str(args.file))
    return 0


def run_init(args: argparse.Namespace, console: Console) -> int:
    output = args.output
    if output.exists() and not args.force:
        console.print(f"[yellow]{output} already exists (use --force to overwrite)[/]")
        return 1

    with open(output, "w") as f:
        f.write("# threadpulse analysis settings\n")
        f.write(AnalysisConfig.default().to_yaml())
    console.print(f"Wrote default config to {output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point for threadpulse."""
    parser = argparse.ArgumentParser(
        prog="threadpulse",
        description="Sentiment, pain point and report card analysis for discussion threads",
        epilog="Run 'threadpulse <command> --help' for more information on a command.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # analyze command - run the pipeline over a JSON file
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze threads from a JSON file",
        description="Score sentiment, extract pain points and (with --brand) grade a report card.",
    )
    analyze_parser.add_argument("file", type=Path, help="JSON file with threads or listing posts")
    analyze_parser.add_argument(
        "--brand",
        "-b",
        type=str,
        default=None,
        help="Brand or keyword the threads are about (adds a report card)",
    )
    analyze_parser.add_argument(
        "--domain",
        "-d",
        type=str,
        default=None,
        help="Brand domain, e.g. example.com",
    )
    analyze_parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Analysis config file (default: threadpulse.yaml if present)",
    )
    analyze_parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=WORKERS,
        help=f"Threads analyzed in parallel (default: {WORKERS})",
    )
    analyze_parser.add_argument("--json", action="store_true", help="Print the full analysis as JSON")

    # init command - write default config
    init_parser = subparsers.add_parser(
        "init",
        help="Write a default threadpulse.yaml",
        description="Write the default analysis settings so they can be customized.",
    )
    init_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("threadpulse.yaml"),
        help="Output file path (default: threadpulse.yaml)",
    )
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite an existing file")

    args = parser.parse_args(argv)
    console = Console()

    if args.command == "analyze":
        return run_analyze(args, console)

    elif args.command == "init":
        return run_init(args, console)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
