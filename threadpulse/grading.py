"""Letter grades for report cards.

A metric is graded against five descending thresholds for A, B, C, D, F;
the first one it meets wins. Several grades combine by averaging their
grade points.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import Grade, ReportCard

GRADE_ORDER = (Grade.A, Grade.B, Grade.C, Grade.D, Grade.F)

# (minimum average points, grade)
_AVERAGE_CUTOFFS = (
    (3.5, Grade.A),
    (2.5, Grade.B),
    (1.5, Grade.C),
    (0.5, Grade.D),
)


def calculate_grade(value: float, thresholds: Sequence[float]) -> Grade:
    """Grade of the first threshold `value` meets, else F.

    Thresholds must be sorted descending (see AnalysisConfig) for the
    grade to be monotonic in `value`.
    """
    for threshold, grade in zip(thresholds, GRADE_ORDER):
        if value >= threshold:
            return grade
    return Grade.F


def average_grade(grades: Sequence[Grade]) -> Grade:
    """Combine grades by mean grade points. No grades averages to F."""
    if not grades:
        return Grade.F

    average = sum(g.points for g in grades) / len(grades)
    for cutoff, grade in _AVERAGE_CUTOFFS:
        if average >= cutoff:
            return grade
    return Grade.F


def build_report_card(
    metrics: dict[str, float],
    thresholds: dict[str, Sequence[float]],
    summary: str = "",
    display: dict[str, str | int] | None = None,
) -> ReportCard:
    """Grade each metric against its own thresholds and combine.

    Args:
        metrics: Metric name -> raw value (sentiment, engagement, ...).
        thresholds: Metric name -> five descending thresholds.
        summary: Prose summary to attach.
        display: Formatted metric values for the card.
    """
    breakdown = {name: calculate_grade(value, thresholds[name]) for name, value in metrics.items()}
    return ReportCard(
        overall=average_grade(list(breakdown.values())),
        breakdown=breakdown,
        summary=summary,
        metrics=display or {},
    )
