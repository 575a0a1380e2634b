"""Fixed word lists for lexical sentiment scoring.

Tables are built once at import and never mutated, so scorers running in
parallel can share them freely.
"""

from __future__ import annotations

import re
from types import MappingProxyType

POSITIVE_WORDS = frozenset({
    "good", "great", "excellent", "amazing", "wonderful", "fantastic", "love", "best",
    "awesome", "perfect", "beautiful", "happy", "glad", "helpful", "useful", "brilliant",
    "outstanding", "superior", "positive", "success", "working", "solved", "fixed",
    "recommend", "worth", "valuable", "impressive", "satisfied", "pleasant", "enjoy",
})

NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "horrible", "worst", "hate", "dislike", "poor",
    "useless", "broken", "failed", "failure", "disappointing", "frustrated", "angry",
    "annoying", "problem", "issue", "bug", "error", "wrong", "incorrect", "difficult",
    "complicated", "confusing", "slow", "expensive", "waste", "scam", "sucks",
})

INTENSIFIERS = frozenset({"very", "extremely", "really", "absolutely", "totally", "completely"})
INTENSIFIER_WEIGHT = 1.5

NEGATIONS = frozenset({"not", "no", "never", "neither", "nor", "nowhere", "nothing"})
NEGATION_SUFFIX = "n't"  # don't, can't, isn't, ...

POSITIVE_EMOJIS = ("😊", "😃", "😄", "😁", "😍", "❤️", "👍", "✅", "🎉", "🙌", "💪", "🔥")
NEGATIVE_EMOJIS = ("😢", "😭", "😡", "😠", "💔", "👎", "❌", "😤", "😩", "🤦")

# Classification cut-offs on the normalized score
POSITIVE_CUTOFF = 0.2
NEGATIVE_CUTOFF = -0.2

# Table order doubles as the tie-break for the dominant emotion
EMOTIONS = MappingProxyType({
    "joy": ("happy", "joy", "cheerful", "delighted", "excited", "thrilled", "ecstatic"),
    "anger": ("angry", "mad", "furious", "outraged", "irritated", "annoyed", "pissed"),
    "sadness": ("sad", "depressed", "miserable", "heartbroken", "lonely", "disappointed"),
    "fear": ("afraid", "scared", "terrified", "anxious", "worried", "nervous", "panic"),
    "surprise": ("surprised", "shocked", "amazed", "astonished", "stunned", "unexpected"),
    "disgust": ("disgusted", "revolted", "repulsed", "sick", "gross", "yuck"),
})

# Whole words only: "mad" must not fire inside "made"
EMOTION_PATTERNS = MappingProxyType({
    emotion: tuple(re.compile(rf"\b{re.escape(word)}\b") for word in words)
    for emotion, words in EMOTIONS.items()
})

# Tone cues match at a word start so "now" doesn't fire inside "know"
URGENT_CUES = re.compile(r"\b(?:urgent|asap|immediately|now|quick)", re.IGNORECASE)
FORMAL_CUES = re.compile(r"\b(?:please|kindly|would|could|appreciate)", re.IGNORECASE)
INFORMAL_CUES = re.compile(r"\b(?:gonna|wanna|yeah|lol|omg)", re.IGNORECASE)
CONFIDENT_TONE = 0.6

_NON_LETTERS = re.compile(r"[^a-z]")
_NON_WORD_EDGE = re.compile(r"^[^a-z']+|[^a-z']+$")


def clean_token(token: str) -> str:
    """Strip everything but ASCII letters from a lowercased token."""
    return _NON_LETTERS.sub("", token)


def is_negation(token: str) -> bool:
    """Is this (lowercased) token a negation marker?"""
    token = _NON_WORD_EDGE.sub("", token.replace("’", "'"))
    return token in NEGATIONS or token.endswith(NEGATION_SUFFIX)


def is_intensifier(token: str) -> bool:
    return _NON_WORD_EDGE.sub("", token) in INTENSIFIERS
