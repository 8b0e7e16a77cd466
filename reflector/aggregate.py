"""
Aggregate statistics over a collection of journal entries.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from reflector.models import AnyEntry
from reflector.text import ACTIVITY_ORDER, detect_activities, normalize

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5


def _rank(counts: Dict[str, int], limit: int) -> List[str]:
    # sorted() is stable, so ties keep first-seen order from the dict
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [key for key, _ in ranked[:max(limit, 0)]]


def _count(values: Iterable[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def average_sentiment(entries: Sequence[AnyEntry]) -> float:
    """Mean sentiment score; unscored entries count as neutral (0.5)."""
    if not entries:
        return 0.0
    total = sum(getattr(entry, "sentiment_score", NEUTRAL_SCORE) for entry in entries)
    return total / len(entries)


def top_tags(entries: Sequence[AnyEntry], limit: int = 5) -> List[str]:
    """Most frequent theme tags across entries."""
    tags = (
        getattr(tag, "value", tag)
        for entry in entries
        for tag in getattr(entry, "tags", ())
    )
    return _rank(_count(tags), limit)


def top_keywords(entries: Sequence[AnyEntry], limit: int = 5) -> List[str]:
    """Most frequent normalized words across entry text."""
    words = (word for entry in entries for word in normalize(entry.text))
    return _rank(_count(words), limit)


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def weekday_name(created_at: str) -> Optional[str]:
    """Short weekday name in the local timezone and locale, e.g. 'Mon'."""
    moment = parse_timestamp(created_at)
    if moment is None:
        return None
    return moment.astimezone().strftime("%a")


def day_counts(entries: Sequence[AnyEntry]) -> Dict[str, int]:
    """Number of entries written on each weekday."""
    counts: Dict[str, int] = {}
    for entry in entries:
        day = weekday_name(entry.created_at)
        if day is None:
            logger.warning(f"Skipping entry {entry.id} with invalid timestamp: {entry.created_at!r}")
            continue
        counts[day] = counts.get(day, 0) + 1
    return counts


def activity_counts(entries: Sequence[AnyEntry]) -> Dict[str, int]:
    """Number of entries mentioning each activity."""
    counts: Dict[str, int] = {}
    for entry in entries:
        found = detect_activities(entry.text)
        for activity in ACTIVITY_ORDER:
            if activity in found:
                counts[activity] = counts.get(activity, 0) + 1
    return counts


def most_common(counts: Dict[str, int]) -> Optional[str]:
    """Key with the highest count; the first one seen wins ties."""
    ranked = _rank(counts, 1)
    return ranked[0] if ranked else None


def newest_first(entries: Sequence[AnyEntry]) -> List[AnyEntry]:
    """Entries sorted by creation time, latest first; unparseable times sort last."""
    oldest = datetime.min.replace(tzinfo=timezone.utc)

    def sort_key(entry: AnyEntry) -> datetime:
        moment = parse_timestamp(entry.created_at)
        if moment is None:
            return oldest
        if moment.tzinfo is None:
            moment = moment.astimezone()
        return moment

    return sorted(entries, key=sort_key, reverse=True)
