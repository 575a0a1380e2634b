"""Sentiment analysis for discussion threads.

Lexical scoring: fixed word lists, negation and intensifier handling,
and emoji. No models, no downloads, same answer every run.

This module provides:
- Per-text polarity (score, category, confidence)
- Aggregates over many texts (distribution, highlights)
- Emotion and tone tags layered on the same word scan
- A summary report with recommendations
"""

from .scorer import (
    Highlight,
    SentimentAggregate,
    SentimentReport,
    SentimentSummary,
    analyze,
    analyze_multiple,
    detect_emotion,
    emoji_score,
    generate_sentiment_report,
    get_tone,
    sentiment_recommendations,
)

__all__ = [
    # Scoring
    "analyze",
    "analyze_multiple",
    "emoji_score",
    "SentimentAggregate",
    "Highlight",
    # Emotion and tone
    "detect_emotion",
    "get_tone",
    # Report
    "generate_sentiment_report",
    "sentiment_recommendations",
    "SentimentReport",
    "SentimentSummary",
]
