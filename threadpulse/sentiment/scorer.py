"""Lexical sentiment scoring for discussion threads.

Each text is scored word by word against fixed positive/negative lists.
The word right before a hit can flip it (negation) or boost it
(intensifier). Emoji add a flat +/-1 each. The sum is normalized by the
number of words that scored, so a short rant and a long rant land in the
same place.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models import Record, Recommendation, SentimentBreakdown, SentimentCategory, SentimentDetail, SentimentResult
from .lexicon import (
    CONFIDENT_TONE,
    EMOTION_PATTERNS,
    FORMAL_CUES,
    INFORMAL_CUES,
    INTENSIFIER_WEIGHT,
    NEGATIVE_CUTOFF,
    NEGATIVE_EMOJIS,
    NEGATIVE_WORDS,
    POSITIVE_CUTOFF,
    POSITIVE_EMOJIS,
    POSITIVE_WORDS,
    URGENT_CUES,
    clean_token,
    is_intensifier,
    is_negation,
)

logger = logging.getLogger(__name__)


def _category_for(score: float, cutoff: float = POSITIVE_CUTOFF) -> SentimentCategory:
    if score > cutoff:
        return SentimentCategory.POSITIVE
    if score < -cutoff:
        return SentimentCategory.NEGATIVE
    return SentimentCategory.NEUTRAL


def emoji_score(text: str) -> int:
    """Net emoji polarity: +1 per positive emoji, -1 per negative one."""
    positive = sum(text.count(emoji) for emoji in POSITIVE_EMOJIS)
    negative = sum(text.count(emoji) for emoji in NEGATIVE_EMOJIS)
    return positive - negative


def analyze(text: str | None) -> SentimentResult:
    """Score the polarity of a single text.

    Args:
        text: Any text; None and "" are treated as neutral.

    Returns:
        SentimentResult with score in [-1, 1] and confidence in [0, 1].
    """
    if not text:
        return SentimentResult()

    words = text.lower().split()
    total = 0.0
    scored = 0
    positive_count = 0
    negative_count = 0

    for i, raw in enumerate(words):
        word = clean_token(raw)
        if not word:
            continue

        if word in POSITIVE_WORDS:
            polarity = 1
        elif word in NEGATIVE_WORDS:
            polarity = -1
        else:
            continue

        previous = words[i - 1] if i > 0 else ""
        if previous and is_negation(previous):
            polarity = -polarity
        weight = INTENSIFIER_WEIGHT if previous and is_intensifier(previous) else 1.0

        if polarity > 0:
            positive_count += 1
        else:
            negative_count += 1

        total += polarity * weight
        scored += 1

    emojis = emoji_score(text)
    total += emojis  # counts toward the sum, not the scored-word count

    normalized = total / scored if scored else 0.0
    # Intensifiers and emoji can push the ratio past +/-1
    score = max(-1.0, min(1.0, normalized))

    return SentimentResult(
        score=score,
        category=_category_for(normalized),
        confidence=min(abs(normalized), 1.0),
        detail=SentimentDetail(
            positive_word_count=positive_count,
            negative_word_count=negative_count,
            total_word_count=len(words),
            emoji_category=_category_for(emojis, cutoff=0),
        ),
    )


class Highlight(Record):
    text: str
    score: float


class SentimentAggregate(Record):
    """Sentiment summary over many texts."""

    average_score: float = 0.0
    distribution: SentimentBreakdown = SentimentBreakdown()
    most_positive: Highlight | None = None
    most_negative: Highlight | None = None


def analyze_multiple(texts: Iterable[str | None]) -> SentimentAggregate:
    """Analyze many texts and summarize them.

    Ties for most positive/negative go to the earliest text.
    """
    texts = list(texts)
    results = [analyze(t) for t in texts]

    counts = {category: 0 for category in SentimentCategory}
    most_positive: Highlight | None = None
    most_negative: Highlight | None = None

    for text, result in zip(texts, results):
        counts[result.category] += 1
        if most_positive is None or result.score > most_positive.score:
            most_positive = Highlight(text=text or "", score=result.score)
        if most_negative is None or result.score < most_negative.score:
            most_negative = Highlight(text=text or "", score=result.score)

    average = sum(r.score for r in results) / len(results) if results else 0.0
    logger.debug(f"Scored {len(results)} texts, average {average:.3f}")

    return SentimentAggregate(
        average_score=average,
        distribution=SentimentBreakdown(
            positive=counts[SentimentCategory.POSITIVE],
            negative=counts[SentimentCategory.NEGATIVE],
            neutral=counts[SentimentCategory.NEUTRAL],
        ),
        most_positive=most_positive,
        most_negative=most_negative,
    )


def detect_emotion(text: str | None) -> dict[str, int]:
    """Count emotion-word hits per emotion; emotions with no hits are omitted."""
    if not text:
        return {}

    lowered = text.lower()
    detected = {}
    for emotion, patterns in EMOTION_PATTERNS.items():
        count = sum(1 for pattern in patterns if pattern.search(lowered))
        if count > 0:
            detected[emotion] = count
    return detected


def get_tone(text: str | None) -> list[str]:
    """Describe the tone of a text with a few tags.

    Returns e.g. ["critical", "urgent", "anger"], or ["neutral"] when
    nothing stands out.
    """
    if not text:
        return ["neutral"]

    analysis = analyze(text)
    tones = []

    if analysis.confidence > CONFIDENT_TONE:
        if analysis.category == SentimentCategory.POSITIVE:
            tones.append("enthusiastic")
        elif analysis.category == SentimentCategory.NEGATIVE:
            tones.append("critical")

    if "?" in text:
        tones.append("inquisitive")

    if URGENT_CUES.search(text):
        tones.append("urgent")

    if FORMAL_CUES.search(text):
        tones.append("formal")
    elif INFORMAL_CUES.search(text):
        tones.append("informal")

    emotions = detect_emotion(text)
    if emotions:
        # max() keeps the first emotion on ties
        tones.append(max(emotions.items(), key=lambda item: item[1])[0])

    return tones or ["neutral"]


# ---------------------------------------------------------------------------
# Sentiment report
# ---------------------------------------------------------------------------


class SentimentSummary(Record):
    total_analyzed: int
    average_sentiment: str
    overall_sentiment: str
    confidence: str


class SentimentReport(Record):
    summary: SentimentSummary
    distribution: dict[str, str]
    most_positive: Highlight | None = None
    most_negative: Highlight | None = None
    recommendations: list[Recommendation] = []


def _percent(part: int, whole: int) -> str:
    if not whole:
        return "0.0%"
    return f"{100.0 * part / whole:.1f}%"


def sentiment_recommendations(aggregate: SentimentAggregate) -> list[Recommendation]:
    """Suggested responses to the overall mood of a corpus."""
    distribution = aggregate.distribution
    recommendations = []

    negative_ratio = distribution.negative / distribution.total if distribution.total else 0.0
    if negative_ratio > 0.4:
        recommendations.append(Recommendation(
            priority="high",
            action="Address negative sentiment",
            description=(
                "High negative sentiment detected. Consider creating content that "
                "addresses concerns and provides solutions."
            ),
        ))

    if distribution.neutral > distribution.positive + distribution.negative:
        recommendations.append(Recommendation(
            priority="medium",
            action="Increase engagement",
            description=(
                "High neutral sentiment suggests low emotional engagement. "
                "Create more compelling, emotionally resonant content."
            ),
        ))

    if aggregate.average_score > 0.5:
        recommendations.append(Recommendation(
            priority="low",
            action="Leverage positive momentum",
            description="Strong positive sentiment detected. Amplify successful messaging and gather testimonials.",
        ))

    return recommendations


def generate_sentiment_report(texts: Iterable[str | None]) -> SentimentReport:
    """Summarize sentiment across texts with percentages and recommendations."""
    texts = list(texts)
    aggregate = analyze_multiple(texts)
    average = aggregate.average_score
    distribution = aggregate.distribution

    if average > 0.1:
        overall = "Positive"
    elif average < -0.1:
        overall = "Negative"
    else:
        overall = "Neutral"

    return SentimentReport(
        summary=SentimentSummary(
            total_analyzed=len(texts),
            average_sentiment=f"{average:.2f}",
            overall_sentiment=overall,
            confidence=f"{abs(average):.2f}",
        ),
        distribution={
            "positive": _percent(distribution.positive, len(texts)),
            "negative": _percent(distribution.negative, len(texts)),
            "neutral": _percent(distribution.neutral, len(texts)),
        },
        most_positive=aggregate.most_positive,
        most_negative=aggregate.most_negative,
        recommendations=sentiment_recommendations(aggregate),
    )
