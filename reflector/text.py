"""
Rule-based text analysis: tokenizing, theme tags and activity detection.
"""

import re
from typing import List, NamedTuple, Set, Tuple

from reflector.models import ThemeTag


STOP_WORDS = frozenset([
    "a", "an", "and", "the", "to", "of", "in", "on", "for", "with", "was", "it",
    "is", "at", "that", "this", "as", "but", "by", "or", "be", "i", "my", "we",
])

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def normalize(text: str) -> List[str]:
    """Lowercase alphanumeric tokens with stop words removed."""
    if not text:
        return []
    cleaned = _NON_ALNUM.sub(" ", text.lower())
    return [word for word in cleaned.split() if word not in STOP_WORDS]


class TagRule(NamedTuple):
    tags: Tuple[ThemeTag, ...]
    keywords: Tuple[str, ...]


# Order matters: it breaks ties between equally scored tags.
TAG_RULES: Tuple[TagRule, ...] = (
    TagRule((ThemeTag.ENERGIZED,), ("energized", "energy", "charged")),
    TagRule((ThemeTag.TIRED, ThemeTag.DRAINED), ("tired", "fatigue", "exhausted", "drained")),
    TagRule((ThemeTag.STRESSED, ThemeTag.ANXIOUS), ("stressed", "tense", "anxious", "pressure")),
    TagRule((ThemeTag.CALM,), ("calm", "steady", "grounded")),
    TagRule((ThemeTag.CREATIVE,), ("creative", "idea", "sketch", "writing")),
    TagRule((ThemeTag.SOCIAL,), ("friend", "call", "people", "conversation")),
    TagRule((ThemeTag.REST,), ("rest", "nap", "break", "reset")),
    TagRule((ThemeTag.FOCUSED,), ("focus", "flow", "concentrated")),
    TagRule((ThemeTag.GRATEFUL,), ("grateful", "gratitude", "thankful", "appreciate")),
)

_untagged = set(ThemeTag) - {tag for rule in TAG_RULES for tag in rule.tags}
if _untagged:
    raise RuntimeError(f"Theme tags without a rule: {sorted(t.value for t in _untagged)}")


def infer_tags(text: str, limit: int = 3) -> List[ThemeTag]:
    """
    Score theme tags by keyword rule hits.

    Each rule group that matches adds one point to every tag it lists. Tags are
    returned highest score first, ties in rule-table order.
    """
    if not text or limit <= 0:
        return []

    lower = text.lower()
    scores = {}
    for rule in TAG_RULES:
        if any(keyword in lower for keyword in rule.keywords):
            for tag in rule.tags:
                scores[tag] = scores.get(tag, 0) + 1

    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [tag for tag, _ in ranked[:limit]]


ACTIVITY_PATTERNS = {
    "outdoors": ["walk", "outside"],
    "creative": ["creative", "idea", "sketch"],
    "rest": ["rest", "reset", "break"],
    "social": ["call", "friend", "meeting"],
    "focus": ["focus", "flow", "concentrated"],
    "fatigue": ["sleep", "tired", "fatigue"],
}

ACTIVITY_ORDER = tuple(ACTIVITY_PATTERNS)


def detect_activities(text: str) -> Set[str]:
    """Coarse activity labels mentioned anywhere in the text."""
    if not text:
        return set()

    text_lower = text.lower()
    return {
        activity
        for activity, patterns in ACTIVITY_PATTERNS.items()
        if any(p in text_lower for p in patterns)
    }
