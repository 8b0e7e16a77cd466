"""
Turn aggregated entry statistics into short insight bullets.
"""

from typing import List, Optional, Sequence

from reflector.aggregate import (
    activity_counts,
    average_sentiment,
    day_counts,
    most_common,
    top_tags,
)
from reflector.clustering import Clusterer, cluster_by_similarity
from reflector.models import AnyEntry, Period

EMPTY_MESSAGE = "Add a few entries to see insights."
MAX_INSIGHTS = 3

POSITIVE_THRESHOLD = 0.65
TENSE_THRESHOLD = 0.4


def tone_message(average: float) -> str:
    """Pick the sentiment-tone bullet for an average score."""
    if average > POSITIVE_THRESHOLD:
        return "Entries leaned positive; keep repeating what fueled that energy."
    if average < TENSE_THRESHOLD:
        return "Tone skewed tense; pair stressful days with quick resets."
    return "Mood stayed steady; consistency is working."


def build_insights(
    entries: Sequence[AnyEntry],
    period: Period,
    clusterer: Optional[Clusterer] = None,
) -> List[str]:
    """
    Compose up to three insight bullets in fixed priority order:
    tone, top themes, most mentioned activity, busiest weekday (weekly only),
    and the first embedding cluster.
    """
    if not entries:
        return [EMPTY_MESSAGE]

    clusterer = clusterer or cluster_by_similarity
    bullets = [tone_message(average_sentiment(entries))]

    tags = top_tags(entries, 3)
    if tags:
        bullets.append(f"Themes surfacing: {', '.join(tags)}.")

    activity = most_common(activity_counts(entries))
    if activity:
        bullets.append(f"You often mentioned {activity}; notice how it affects your mood.")

    if period == Period.WEEKLY:
        busiest = most_common(day_counts(entries))
        if busiest:
            bullets.append(f"You wrote most on {busiest}; set a gentle prompt that day.")

    clusters = clusterer([e for e in entries if getattr(e, "embedding", None) is not None])
    if clusters:
        cluster_tags = top_tags(clusters[0], 2)
        label = ", ".join(cluster_tags) if cluster_tags else "related moments"
        bullets.append(f"Several entries clustered around: {label}. Revisit what ties them together.")

    return bullets[:MAX_INSIGHTS]
