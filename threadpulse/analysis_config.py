"""Analysis configuration: grading thresholds and extraction tunables.

Loaded from `threadpulse.yaml` when present:

    analysis:
      context_window: 50
      top_pain_points: 5
      systemic_threshold: 3
      viral_engagement: 100
      competitors: [notion, slack, ...]
      thresholds:
        sentiment: [0.5, 0.3, 0.1, -0.1, -0.3]
        engagement: [100, 50, 20, 10, 5]
        reputation: [0.9, 0.7, 0.5, 0.3, 0.1]
        advocacy: [5, 3, 2, 1, 0]

Threshold vectors map to grades A, B, C, D, F in order and must be
non-increasing so a higher metric never earns a lower grade.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

GRADE_COUNT = 5

DEFAULT_THRESHOLDS: dict[str, tuple[float, ...]] = {
    "sentiment": (0.5, 0.3, 0.1, -0.1, -0.3),
    "engagement": (100, 50, 20, 10, 5),
    "reputation": (0.9, 0.7, 0.5, 0.3, 0.1),
    "advocacy": (5, 3, 2, 1, 0),
}

DEFAULT_COMPETITORS = (
    # Direct competitors (customize per brand)
    "notion", "slack", "trello", "asana", "monday", "clickup",
    "jira", "basecamp", "airtable", "todoist", "evernote",
    # Generic comparison phrases
    "competitor", "alternative", "instead of", "switched from",
    "better than", "worse than", "compared to",
)


def _validate_thresholds(metric: str, values: Any) -> tuple[float, ...]:
    """Check a threshold vector is five non-increasing numbers."""
    if not isinstance(values, (list, tuple)) or len(values) != GRADE_COUNT:
        raise ValueError(f"thresholds.{metric} must list {GRADE_COUNT} values, got {values!r}")

    vector = tuple(float(v) for v in values)
    for higher, lower in zip(vector, vector[1:]):
        if lower > higher:
            raise ValueError(f"thresholds.{metric} must be in descending order, got {list(vector)}")
    return vector


@dataclass(frozen=True)
class AnalysisConfig:
    """Tunables shared by extraction, aggregation and grading.

    Frozen so a single instance can be read from many worker threads.
    """

    context_window: int = 50  # chars either side of a pain match
    top_pain_points: int = 5
    systemic_threshold: int = 3  # events in one category before it's systemic
    viral_engagement: int = 100
    competitors: tuple[str, ...] = DEFAULT_COMPETITORS
    thresholds: dict[str, tuple[float, ...]] = field(default_factory=lambda: dict(DEFAULT_THRESHOLDS))

    def __post_init__(self):
        missing = set(DEFAULT_THRESHOLDS) - set(self.thresholds)
        if missing:
            raise ValueError(f"thresholds missing metrics: {sorted(missing)}")
        for metric, values in self.thresholds.items():
            _validate_thresholds(metric, values)
        if self.context_window < 0:
            raise ValueError("context_window must be >= 0")

    @classmethod
    def load(cls, path: Path | str | None = None) -> AnalysisConfig:
        """Load config from YAML file or return defaults."""
        if path is None:
            # Try common locations
            for candidate in ["threadpulse.yaml", ".threadpulse.yaml", "threadpulse.yml", ".threadpulse.yml"]:
                if Path(candidate).exists():
                    path = candidate
                    break

        if path is None or not Path(path).exists():
            return cls.default()

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisConfig:
        """Create config from dictionary (e.g., parsed YAML)."""
        if not isinstance(data, dict):
            raise ValueError(f"config must be a mapping, got {type(data).__name__}")
        analysis = data.get("analysis") or {}

        # Partial threshold overrides keep the remaining defaults
        thresholds = dict(DEFAULT_THRESHOLDS)
        for metric, values in (analysis.get("thresholds") or {}).items():
            if metric not in DEFAULT_THRESHOLDS:
                raise ValueError(f"unknown threshold metric: {metric}")
            thresholds[metric] = _validate_thresholds(metric, values)

        competitors = analysis.get("competitors")
        return cls(
            context_window=int(analysis.get("context_window", 50)),
            top_pain_points=int(analysis.get("top_pain_points", 5)),
            systemic_threshold=int(analysis.get("systemic_threshold", 3)),
            viral_engagement=int(analysis.get("viral_engagement", 100)),
            competitors=tuple(str(c).lower() for c in competitors) if competitors is not None else DEFAULT_COMPETITORS,
            thresholds=thresholds,
        )

    @classmethod
    def default(cls) -> AnalysisConfig:
        return cls()

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data: dict[str, Any] = {
            "analysis": {
                "context_window": self.context_window,
                "top_pain_points": self.top_pain_points,
                "systemic_threshold": self.systemic_threshold,
                "viral_engagement": self.viral_engagement,
                "competitors": list(self.competitors),
                "thresholds": {metric: list(values) for metric, values in self.thresholds.items()},
            }
        }
        return yaml.dump(data, default_flow_style=False, sort_keys=False)
