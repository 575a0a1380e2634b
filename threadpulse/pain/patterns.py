"""Pain pattern tables.

Literal phrases are matched as plain substrings of the lowercased text, so
"hard" also fires on "hardware". That's accepted: the tables are tuned for
recall, and severity separates the noise from the real complaints.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from ..models import PainCategory

PAIN_PATTERNS = MappingProxyType({
    PainCategory.FRUSTRATION: (
        "frustrated", "frustrating", "annoying", "annoyed", "irritating",
        "driving me crazy", "sick of", "tired of", "fed up", "can't stand",
    ),
    PainCategory.DIFFICULTY: (
        "difficult", "hard", "complicated", "complex", "confusing",
        "struggle", "struggling", "can't figure out", "don't understand",
        "challenging", "overwhelming",
    ),
    PainCategory.FAILURE: (
        "not working", "doesn't work", "broken", "failed", "failing",
        "error", "bug", "crash", "crashes", "freezes", "stuck",
        "won't", "cannot", "can't",
    ),
    PainCategory.INEFFICIENCY: (
        "slow", "takes forever", "waste of time", "inefficient",
        "tedious", "repetitive", "manual", "time consuming",
        "takes too long", "hours",
    ),
    PainCategory.COST: (
        "expensive", "overpriced", "costs too much", "can't afford",
        "budget", "cheaper", "free alternative", "price", "pricing",
    ),
    PainCategory.MISSING_FEATURES: (
        "wish it had", "needs", "missing", "lacks", "doesn't have",
        "should have", "would be nice", "if only", "hoping for",
        "feature request",
    ),
    PainCategory.COMPARISON: (
        "better than", "worse than", "not as good as", "prefer",
        "switched from", "alternative to", "instead of", "compared to",
    ),
})

# Each phrase present anywhere in the text adds 2 to severity
URGENCY_INDICATORS = (
    "urgent", "asap", "immediately", "right now", "emergency",
    "critical", "desperate", "help", "please help", "need help",
)

# Each word present adds 1
EMOTIONAL_WORDS = ("hate", "terrible", "awful", "worst", "never")

BASE_SEVERITY = 5
MAX_SEVERITY = 10
MAX_EXCLAMATION_BONUS = 3
MAX_CAPS_BONUS = 2

CAPS_WORD = re.compile(r"\b[A-Z]{2,}\b")


@dataclass(frozen=True)
class PhraseRule:
    """A free-form phrase extractor.

    Fires once per non-overlapping regex match; the matched phrase becomes
    the event context.
    """

    category: PainCategory
    label: str
    regex: re.Pattern
    severity: int
    urgent_severity: int | None = None  # used instead when the text says urgent/asap


PHRASE_RULES = (
    PhraseRule(
        PainCategory.SPECIFIC_PROBLEM, "problem_with",
        re.compile(r"problem with ([^.!?,]+)", re.IGNORECASE), 6,
    ),
    PhraseRule(
        PainCategory.SPECIFIC_PROBLEM, "broken_feature",
        re.compile(r"([^.!?,]+) (?:is|are) (?:broken|not working)", re.IGNORECASE), 8,
    ),
    PhraseRule(
        PainCategory.SPECIFIC_PROBLEM, "inability",
        re.compile(r"(?:can't|cannot|unable to) ([^.!?,]+)", re.IGNORECASE), 7,
    ),
    PhraseRule(
        PainCategory.UNMET_NEED, "stated_need",
        re.compile(r"(?:need|want|looking for) ([^.!?,]+)", re.IGNORECASE), 5,
        urgent_severity=9,
    ),
    PhraseRule(
        PainCategory.UNMET_NEED, "knowledge_gap",
        re.compile(r"how (?:to|do i|can i) ([^.!?]+)", re.IGNORECASE), 4,
    ),
    PhraseRule(
        PainCategory.UNMET_NEED, "solution_seeking",
        re.compile(r"is there (?:a way|any way|some way) to ([^.!?]+)", re.IGNORECASE), 5,
    ),
)

URGENT_NEED_WORDS = ("urgent", "asap")
