"""Pain point extraction and aggregation.

Per thread: `extract` turns text into scored PainEvents.
Per corpus: `analyze_pain_points` groups, ranks and interprets them.
"""

from .aggregator import (
    PainPointAnalysis,
    PainPointReport,
    SeverityBands,
    analyze_pain_points,
    generate_pain_point_report,
    group_pain_points,
    identify_patterns,
    overall_sentiment,
    rank_pain_points,
)
from .extractor import calculate_severity, extract, extract_context
from .patterns import PAIN_PATTERNS, PHRASE_RULES

__all__ = [
    # Extraction
    "extract",
    "extract_context",
    "calculate_severity",
    "PAIN_PATTERNS",
    "PHRASE_RULES",
    # Aggregation
    "analyze_pain_points",
    "group_pain_points",
    "rank_pain_points",
    "identify_patterns",
    "PainPointAnalysis",
    "SeverityBands",
    # Report
    "generate_pain_point_report",
    "overall_sentiment",
    "PainPointReport",
]
