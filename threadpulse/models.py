"""Pydantic models for thread input and analysis output.

Output models serialize with camelCase keys (`model_dump(by_alias=True)`),
which is the shape downstream renderers consume.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for analysis output: immutable, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


def _to_int(value: object) -> int:
    """Coerce a counter to int; anything unparseable counts as zero."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 0


class Thread(BaseModel):
    """A discussion record handed in by a collector."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = ""
    text: str = ""
    author: str = ""
    subreddit: str = ""
    score: int = 0
    comments: int = 0
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt", "created")
    )
    permalink: str = ""

    @field_validator("title", "text", "author", "subreddit", "permalink", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: object) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("score", "comments", mode="before")
    @classmethod
    def _zero_if_malformed(cls, value: object) -> int:
        return _to_int(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created(cls, value: object) -> datetime | None:
        if value is None or value == "" or isinstance(value, bool):
            return None
        if isinstance(value, datetime):
            created = value
        elif isinstance(value, (int, float)):
            try:
                created = datetime.fromtimestamp(value, UTC)
            except (ValueError, OverflowError, OSError):
                return None
        elif isinstance(value, str):
            try:
                created = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return None
        else:
            return None
        # Offset-less timestamps are read as UTC so every created_at compares
        return created.replace(tzinfo=UTC) if created.tzinfo is None else created

    @property
    def full_text(self) -> str:
        """Title and body joined the way every analyzer reads them."""
        return f"{self.title} {self.text}"

    @property
    def engagement(self) -> int:
        return self.score + self.comments


# ---------------------------------------------------------------------------
# Sentiment
# ---------------------------------------------------------------------------


class SentimentCategory(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class SentimentDetail(Record):
    positive_word_count: int = 0
    negative_word_count: int = 0
    total_word_count: int = 0
    emoji_category: SentimentCategory = SentimentCategory.NEUTRAL


class SentimentResult(Record):
    """Polarity of one text blob."""

    score: float = Field(default=0.0, ge=-1.0, le=1.0)
    category: SentimentCategory = SentimentCategory.NEUTRAL
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    detail: SentimentDetail = Field(default_factory=SentimentDetail)


class SentimentBreakdown(Record):
    positive: int = 0
    negative: int = 0
    neutral: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral


# ---------------------------------------------------------------------------
# Pain points
# ---------------------------------------------------------------------------


class PainCategory(str, Enum):
    FRUSTRATION = "frustration"
    DIFFICULTY = "difficulty"
    FAILURE = "failure"
    INEFFICIENCY = "inefficiency"
    COST = "cost"
    MISSING_FEATURES = "missing_features"
    COMPARISON = "comparison"
    SPECIFIC_PROBLEM = "specific_problem"
    UNMET_NEED = "unmet_need"
    GENERAL = "general"  # catch-all for categories we don't recognize


class SourceThread(Record):
    title: str = ""
    permalink: str = ""
    score: int = 0


class PainEvent(Record):
    """One textual pain signal found in a thread."""

    category: PainCategory
    pattern: str
    context: str = ""
    severity: int = Field(ge=0, le=10)
    source_thread: SourceThread = Field(default_factory=SourceThread)

    @field_validator("category", mode="before")
    @classmethod
    def _general_if_unknown(cls, value: object) -> object:
        if isinstance(value, PainCategory):
            return value
        try:
            return PainCategory(value)
        except ValueError:
            return PainCategory.GENERAL


class RankedPainPoint(PainEvent):
    """A (category, pattern) pair summed across the corpus."""

    total_score: int = 0
    frequency: int = 0


class PainPointGroup(Record):
    category: PainCategory
    events: list[PainEvent] = Field(default_factory=list)


class DetectedPattern(Record):
    type: str  # systemic, user_experience, competitive
    description: str
    severity: str  # high, medium
    category: PainCategory | None = None


class Recommendation(Record):
    priority: str
    action: str
    description: str
    pain_points: list[PainEvent] = Field(default_factory=list)
    features: list[PainEvent] = Field(default_factory=list)  # feature requests
    concerns: list[PainEvent] = Field(default_factory=list)  # cost complaints
    patterns: list[DetectedPattern] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Grading
# ---------------------------------------------------------------------------


_GRADE_POINTS = {"A": 4, "B": 3, "C": 2, "D": 1, "F": 0}


class Grade(str, Enum):
    """Letter grade, ordered A > B > C > D > F."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"

    @property
    def points(self) -> int:
        return _GRADE_POINTS[self.value]

    # str's lexical ordering would rank A lowest
    def __lt__(self, other):
        if isinstance(other, Grade):
            return self.points < other.points
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, Grade):
            return self.points <= other.points
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, Grade):
            return self.points > other.points
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, Grade):
            return self.points >= other.points
        return NotImplemented


class ReportCard(Record):
    overall: Grade
    breakdown: dict[str, Grade] = Field(default_factory=dict)
    summary: str = ""
    metrics: dict[str, str | int] = Field(default_factory=dict)
