"""Pain event extraction from a single thread.

Two independent passes run over the same text:
- a literal scan of the seven pain category tables
- free-form phrase rules ("problem with X", "X is broken", "need X", ...)

They are not deduplicated against each other. "the sync is broken" yields
a `failure/broken` event and a `specific_problem/broken_feature` event, and
both count toward totals downstream.
"""

from __future__ import annotations

import logging

from ..analysis_config import AnalysisConfig
from ..models import PainEvent, SourceThread, Thread
from .patterns import (
    BASE_SEVERITY,
    CAPS_WORD,
    EMOTIONAL_WORDS,
    MAX_CAPS_BONUS,
    MAX_EXCLAMATION_BONUS,
    MAX_SEVERITY,
    PAIN_PATTERNS,
    PHRASE_RULES,
    URGENCY_INDICATORS,
    URGENT_NEED_WORDS,
)

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


def extract_context(text: str, pattern: str, window: int = 50) -> str:
    """Snippet of up to `window` chars either side of the first match.

    An ellipsis marks each side where the snippet stops short of the text.
    Returns "" if the pattern isn't present.
    """
    index = text.find(pattern)
    if index == -1:
        return ""

    start = max(0, index - window)
    end = min(len(text), index + len(pattern) + window)

    context = text[start:end]
    if start > 0:
        context = ELLIPSIS + context
    if end < len(text):
        context = context + ELLIPSIS
    return context.strip()


def calculate_severity(text: str, pattern: str) -> int:
    """Severity 0-10 for a pain match in `text`.

    The score depends only on the whole text, so every pattern found in the
    same thread gets the same severity. Pass the original-case text: the
    all-caps bonus looks for SHOUTED words. "This is BROKEN SO BAD" scores 7
    here, not the 5 a lowercase-only scan would give.
    """
    lowered = text.lower()
    severity = BASE_SEVERITY

    severity += sum(2 for indicator in URGENCY_INDICATORS if indicator in lowered)
    severity += sum(1 for word in EMOTIONAL_WORDS if word in lowered)
    severity += min(text.count("!"), MAX_EXCLAMATION_BONUS)
    severity += min(len(CAPS_WORD.findall(text)), MAX_CAPS_BONUS)

    return max(0, min(severity, MAX_SEVERITY))


def extract(thread: Thread, config: AnalysisConfig | None = None) -> list[PainEvent]:
    """Find every pain signal in a thread.

    Args:
        thread: The thread to scan (title and body).
        config: Supplies the context window; defaults apply when omitted.

    Returns:
        One PainEvent per category pattern present, plus one per free-form
        phrase match. Order: category tables first, then phrase rules.
    """
    config = config or AnalysisConfig.default()
    raw = thread.full_text
    text = raw.lower()
    source = SourceThread(title=thread.title, permalink=thread.permalink, score=thread.score)

    events: list[PainEvent] = []

    for category, patterns in PAIN_PATTERNS.items():
        for pattern in patterns:
            if pattern not in text:
                continue
            events.append(PainEvent(
                category=category,
                pattern=pattern,
                context=extract_context(text, pattern, config.context_window),
                severity=calculate_severity(raw, pattern),
                source_thread=source,
            ))

    urgent = any(word in text for word in URGENT_NEED_WORDS)
    for rule in PHRASE_RULES:
        severity = rule.urgent_severity if urgent and rule.urgent_severity is not None else rule.severity
        for match in rule.regex.finditer(text):
            events.append(PainEvent(
                category=rule.category,
                pattern=rule.label,
                context=match.group(0),
                severity=severity,
                source_thread=source,
            ))

    logger.debug(f"{len(events)} pain events in {thread.permalink or thread.title!r}")
    return events
