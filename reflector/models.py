"""
Journal data model: raw entries, enriched entries and insight summaries.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class ThemeTag(str, Enum):
    """Fixed vocabulary of emotional/topical labels."""
    ENERGIZED = "energized"
    TIRED = "tired"
    DRAINED = "drained"
    STRESSED = "stressed"
    ANXIOUS = "anxious"
    CALM = "calm"
    CREATIVE = "creative"
    SOCIAL = "social"
    REST = "rest"
    FOCUSED = "focused"
    GRATEFUL = "grateful"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class Period(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Union[str, "Period"]) -> "Period":
        """Parse a period name, raising ValueError for anything unknown."""
        if isinstance(value, Period):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown period '{value}'. Use 'weekly' or 'monthly'")


@dataclass(frozen=True)
class JournalEntry:
    """A user-authored note that has not been analyzed yet."""

    id: str
    created_at: str
    text: str

    def raw(self) -> "JournalEntry":
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "createdAt": self.created_at, "text": self.text}


@dataclass(frozen=True)
class EnrichedEntry:
    """
    A journal entry with every derived field filled in by one enrichment pass.

    `embedding` is None when no embedding model was available.
    """

    id: str
    created_at: str
    text: str
    sentiment: Sentiment
    sentiment_score: float
    tags: Tuple[ThemeTag, ...]
    embedding: Optional[Tuple[float, ...]] = None

    def raw(self) -> JournalEntry:
        return JournalEntry(id=self.id, created_at=self.created_at, text=self.text)

    def to_dict(self) -> Dict[str, Any]:
        data = self.raw().to_dict()
        data.update({
            "sentiment": self.sentiment.value,
            "sentimentScore": self.sentiment_score,
            "tags": [tag.value for tag in self.tags],
            "embedding": list(self.embedding) if self.embedding is not None else None,
        })
        return data


AnyEntry = Union[JournalEntry, EnrichedEntry]


def raw_entry_from_dict(data: Dict[str, Any]) -> JournalEntry:
    """Read only id, createdAt and text; derived fields are not looked at."""
    if not isinstance(data, dict):
        raise ValueError("Entry must be an object")

    entry_id = data.get("id")
    created_at = data.get("createdAt")
    text = data.get("text")
    if not isinstance(entry_id, str) or not entry_id:
        raise ValueError("Entry is missing an id")
    if not isinstance(created_at, str) or not created_at:
        raise ValueError(f"Entry {entry_id} is missing createdAt")
    if not isinstance(text, str):
        raise ValueError(f"Entry {entry_id} text must be a string")
    return JournalEntry(id=entry_id, created_at=created_at, text=text)


def entry_from_dict(data: Dict[str, Any]) -> AnyEntry:
    """
    Build an entry from its camelCase JSON form.

    Returns an EnrichedEntry only when sentiment, score and tags are all present;
    anything less is read as a raw entry.
    """
    raw = raw_entry_from_dict(data)
    sentiment = data.get("sentiment")
    score = data.get("sentimentScore")
    tags = data.get("tags")
    if sentiment is None or score is None or tags is None:
        return raw

    embedding = data.get("embedding")
    return EnrichedEntry(
        id=raw.id,
        created_at=raw.created_at,
        text=raw.text,
        sentiment=Sentiment(sentiment),
        sentiment_score=float(score),
        tags=tuple(ThemeTag(t) for t in tags),
        embedding=tuple(float(v) for v in embedding) if embedding is not None else None,
    )


@dataclass(frozen=True)
class InsightSummary:
    """One generated report; a new summary replaces the old one."""

    id: str
    period: Period
    insights: Tuple[str, ...]
    average_sentiment: float
    theme_keywords: Tuple[str, ...]
    generated_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "period": self.period.value,
            "insights": list(self.insights),
            "averageSentiment": self.average_sentiment,
            "themeKeywords": list(self.theme_keywords),
            "generatedAt": self.generated_at,
        }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)
