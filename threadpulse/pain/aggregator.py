"""Corpus-level pain analysis: grouping, ranking, patterns, next steps.

Runs once all per-thread events are in. Everything here is ordered by
first appearance in the input so repeated runs give identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..analysis_config import AnalysisConfig
from ..models import (
    DetectedPattern,
    PainCategory,
    PainEvent,
    PainPointGroup,
    RankedPainPoint,
    Recommendation,
    Record,
)

logger = logging.getLogger(__name__)

HIGH_SEVERITY = 8
MEDIUM_SEVERITY = 5
FEATURE_REQUEST_MIN = 3  # missing_features events before we suggest building
UX_FRICTION_MIN = 2


class SeverityBands(Record):
    high: list[PainEvent] = []  # severity >= 8
    medium: list[PainEvent] = []  # 5-7
    low: list[PainEvent] = []  # < 5


class PainPointAnalysis(Record):
    total_pain_points: int = 0
    by_category: dict[PainCategory, list[PainEvent]] = {}
    by_severity: SeverityBands = SeverityBands()
    top_pain_points: list[RankedPainPoint] = []
    patterns: list[DetectedPattern] = []
    recommendations: list[Recommendation] = []

    def count(self, category: PainCategory) -> int:
        return len(self.by_category.get(category, []))


def group_by_category(events: Iterable[PainEvent]) -> dict[PainCategory, list[PainEvent]]:
    """Bucket events by category, in order of first appearance."""
    groups: dict[PainCategory, list[PainEvent]] = {}
    for event in events:
        groups.setdefault(event.category, []).append(event)
    return groups


def split_by_severity(events: Iterable[PainEvent]) -> SeverityBands:
    high, medium, low = [], [], []
    for event in events:
        if event.severity >= HIGH_SEVERITY:
            high.append(event)
        elif event.severity >= MEDIUM_SEVERITY:
            medium.append(event)
        else:
            low.append(event)
    return SeverityBands(high=high, medium=medium, low=low)


def group_pain_points(events: Iterable[PainEvent]) -> list[PainPointGroup]:
    """Category groups, each sorted most severe first (stable on ties)."""
    return [
        PainPointGroup(category=category, events=sorted(bucket, key=lambda e: e.severity, reverse=True))
        for category, bucket in group_by_category(events).items()
    ]


def rank_pain_points(events: Iterable[PainEvent], limit: int = 5) -> list[RankedPainPoint]:
    """Top (category, pattern) pairs by summed severity.

    The first event seen for a pair represents it. Pairs with equal totals
    keep first-seen order.
    """
    totals: dict[tuple[PainCategory, str], list] = {}
    for event in events:
        key = (event.category, event.pattern)
        if key not in totals:
            totals[key] = [event, 0, 0]
        totals[key][1] += event.severity
        totals[key][2] += 1

    ranked = sorted(totals.values(), key=lambda item: item[1], reverse=True)
    return [
        RankedPainPoint(**first.model_dump(), total_score=score, frequency=count)
        for first, score, count in ranked[:limit]
    ]


def identify_patterns(events: Iterable[PainEvent], systemic_threshold: int = 3) -> list[DetectedPattern]:
    """Cross-cutting signals: systemic categories, UX friction, competition."""
    groups = group_by_category(events)
    patterns = []

    for category, bucket in groups.items():
        if len(bucket) >= systemic_threshold:
            patterns.append(DetectedPattern(
                type="systemic",
                description=f"Multiple {category.value} issues detected ({len(bucket)} instances)",
                severity="high",
                category=category,
            ))

    journey = len(groups.get(PainCategory.DIFFICULTY, [])) + len(groups.get(PainCategory.FRUSTRATION, []))
    if journey >= UX_FRICTION_MIN:
        patterns.append(DetectedPattern(
            type="user_experience",
            description="User experience friction detected",
            severity="medium",
        ))

    if groups.get(PainCategory.COMPARISON):
        patterns.append(DetectedPattern(
            type="competitive",
            description="Users comparing to competitors",
            severity="medium",
        ))

    return patterns


def generate_recommendations(
    by_category: dict[PainCategory, list[PainEvent]],
    by_severity: SeverityBands,
    patterns: list[DetectedPattern],
) -> list[Recommendation]:
    """Recommendations in fixed priority order.

    critical fixes, then systemic work, then feature requests, then pricing.
    """
    recommendations = []

    if by_severity.high:
        recommendations.append(Recommendation(
            priority="critical",
            action="Address high-severity issues immediately",
            description=f"{len(by_severity.high)} critical pain points require urgent attention",
            pain_points=by_severity.high[:3],
        ))

    systemic = [p for p in patterns if p.type == "systemic"]
    if systemic:
        recommendations.append(Recommendation(
            priority="high",
            action="Develop comprehensive solutions for systemic issues",
            description="Multiple related pain points suggest deeper problems",
            patterns=systemic,
        ))

    features = by_category.get(PainCategory.MISSING_FEATURES, [])
    if len(features) >= FEATURE_REQUEST_MIN:
        recommendations.append(Recommendation(
            priority="medium",
            action="Consider feature development",
            description="Users requesting specific features",
            features=features,
        ))

    costs = by_category.get(PainCategory.COST, [])
    if costs:
        recommendations.append(Recommendation(
            priority="medium",
            action="Review pricing strategy",
            description="Cost concerns detected",
            concerns=costs,
        ))

    return recommendations


def analyze_pain_points(events: Iterable[PainEvent], config: AnalysisConfig | None = None) -> PainPointAnalysis:
    """Group, rank and interpret a corpus worth of pain events."""
    config = config or AnalysisConfig.default()
    events = list(events)

    by_category = group_by_category(events)
    by_severity = split_by_severity(events)
    patterns = identify_patterns(events, config.systemic_threshold)

    logger.info(
        f"{len(events)} pain events: {len(by_severity.high)} high, "
        f"{len(by_category)} categories, {len(patterns)} patterns"
    )

    return PainPointAnalysis(
        total_pain_points=len(events),
        by_category=by_category,
        by_severity=by_severity,
        top_pain_points=rank_pain_points(events, config.top_pain_points),
        patterns=patterns,
        recommendations=generate_recommendations(by_category, by_severity, patterns),
    )


# ---------------------------------------------------------------------------
# Pain point report
# ---------------------------------------------------------------------------


class ExecutiveSummary(Record):
    total_issues: int
    critical_issues: int
    main_categories: list[PainCategory]
    user_sentiment: str


class ActionItem(Record):
    priority: int  # 1 = fix now, 2 = quick win, 3 = long term
    type: str
    description: str
    category: str
    impact: str


class ContentOpportunity(Record):
    type: str
    topic: str
    pain_points: int
    potential_impact: str


class PainPointReport(Record):
    executive_summary: ExecutiveSummary
    detailed_analysis: PainPointAnalysis
    action_items: list[ActionItem] = []
    content_opportunities: list[ContentOpportunity] = []


def overall_sentiment(events: list[PainEvent]) -> str:
    """Mood label from the mean severity of all events."""
    if not events:
        return "neutral"

    average = sum(e.severity for e in events) / len(events)
    if average >= 7:
        return "very negative"
    if average >= 5:
        return "negative"
    if average >= 3:
        return "mixed"
    return "neutral"


def prioritize_actions(analysis: PainPointAnalysis, systemic_threshold: int = 3) -> list[ActionItem]:
    actions = []

    for pain in analysis.by_severity.high:
        actions.append(ActionItem(
            priority=1, type="fix", description=f"Fix: {pain.context}",
            category=pain.category.value, impact="high",
        ))

    for pain in analysis.by_severity.medium:
        if pain.category == PainCategory.MISSING_FEATURES:
            actions.append(ActionItem(
                priority=2, type="implement", description=f"Add feature: {pain.context}",
                category="feature", impact="medium",
            ))

    for category, bucket in analysis.by_category.items():
        if len(bucket) >= systemic_threshold:
            actions.append(ActionItem(
                priority=3, type="strategic", description=f"Overhaul {category.value} experience",
                category=category.value, impact="high",
            ))

    return sorted(actions, key=lambda a: a.priority)


def identify_content_opportunities(analysis: PainPointAnalysis) -> list[ContentOpportunity]:
    opportunities = []

    if analysis.count(PainCategory.DIFFICULTY):
        opportunities.append(ContentOpportunity(
            type="tutorial",
            topic="Step-by-step guides for complex features",
            pain_points=analysis.count(PainCategory.DIFFICULTY),
            potential_impact="high",
        ))

    if analysis.count(PainCategory.FAILURE):
        opportunities.append(ContentOpportunity(
            type="troubleshooting",
            topic="Common issues and solutions",
            pain_points=analysis.count(PainCategory.FAILURE),
            potential_impact="high",
        ))

    if analysis.count(PainCategory.COMPARISON):
        opportunities.append(ContentOpportunity(
            type="comparison",
            topic="Why we're better than alternatives",
            pain_points=analysis.count(PainCategory.COMPARISON),
            potential_impact="medium",
        ))

    if analysis.top_pain_points:
        opportunities.append(ContentOpportunity(
            type="faq",
            topic="Addressing top user concerns",
            pain_points=len(analysis.top_pain_points),
            potential_impact="medium",
        ))

    return opportunities


def generate_pain_point_report(events: Iterable[PainEvent], config: AnalysisConfig | None = None) -> PainPointReport:
    """Executive view of a corpus of pain events."""
    config = config or AnalysisConfig.default()
    events = list(events)
    analysis = analyze_pain_points(events, config)

    return PainPointReport(
        executive_summary=ExecutiveSummary(
            total_issues=analysis.total_pain_points,
            critical_issues=len(analysis.by_severity.high),
            main_categories=list(analysis.by_category)[:3],
            user_sentiment=overall_sentiment(events),
        ),
        detailed_analysis=analysis,
        action_items=prioritize_actions(analysis, config.systemic_threshold),
        content_opportunities=identify_content_opportunities(analysis),
    )
