"""
Insight pipeline: enrich entries through the model gateway, then summarize.

`summarize` builds rule-based bullets and always returns a summary, falling back
to local scoring when the gateway fails. `narrate` asks the text generator for
free-form bullets and falls back to canned lines.
"""

import functools
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from reflector import config
from reflector.aggregate import average_sentiment, parse_timestamp, top_keywords, top_tags
from reflector.clustering import cluster_by_similarity
from reflector.composer import EMPTY_MESSAGE, MAX_INSIGHTS, build_insights
from reflector.gateway import GatewayError, ModelGateway
from reflector.models import (
    AnyEntry,
    EnrichedEntry,
    InsightSummary,
    Period,
    Sentiment,
    epoch_millis,
    iso_timestamp,
    utc_now,
)
from reflector.text import infer_tags

logger = logging.getLogger(__name__)

PROMPT_ENTRY_COUNT = 6
GENERATION_MAX_TOKENS = 120
DEEP_ENTRY_WORDS = 60

NO_ENTRIES_NARRATIVE = "No entries yet. Capture a few short reflections to see weekly insights."


def make_summary(
    period: Period,
    insights: Sequence[str],
    average: float,
    keywords: Sequence[str],
    now: Optional[datetime] = None,
) -> InsightSummary:
    now = now or utc_now()
    return InsightSummary(
        id=f"insight-{period.value}-{epoch_millis(now)}",
        period=period,
        insights=tuple(insights[:MAX_INSIGHTS]),
        average_sentiment=round(average, 2),
        theme_keywords=tuple(keywords[:5]),
        generated_at=iso_timestamp(now),
    )


def local_enrichment(entry: AnyEntry) -> EnrichedEntry:
    """Enrich without any model: neutral sentiment, rule tags, no embedding."""
    raw = entry.raw()
    return EnrichedEntry(
        id=raw.id,
        created_at=raw.created_at,
        text=raw.text,
        sentiment=Sentiment.NEUTRAL,
        sentiment_score=0.5,
        tags=tuple(infer_tags(raw.text)),
        embedding=None,
    )


class InsightPipeline:
    """Enrichment and summarization over an injected model gateway."""

    def __init__(self, gateway: ModelGateway, similarity_threshold: Optional[float] = None):
        self.gateway = gateway
        threshold = (
            similarity_threshold if similarity_threshold is not None
            else config.SIMILARITY_THRESHOLD
        )
        self.clusterer = functools.partial(cluster_by_similarity, threshold=threshold)

    # -------------------------------------------------------------------------
    # Enrichment
    # -------------------------------------------------------------------------

    def enrich(self, entries: Sequence[AnyEntry]) -> List[EnrichedEntry]:
        """
        Analyze every entry with the sentiment and embedding models.

        Raises GatewayError (or ModelUnavailableError) if a model fails to load
        or any call fails, including a sentiment score outside [0, 1]; no
        partially enriched list is ever returned.
        """
        self.gateway.load_sentiment_model()
        self.gateway.load_embedding_model()

        enriched = []
        for entry in entries:
            raw = entry.raw()
            result = self.gateway.classify_sentiment(raw.text)
            if not 0.0 <= result.score <= 1.0:
                raise GatewayError(f"Sentiment score {result.score} for {raw.id} is outside [0, 1]")
            embedding = self.gateway.embed(raw.text)
            enriched.append(EnrichedEntry(
                id=raw.id,
                created_at=raw.created_at,
                text=raw.text,
                sentiment=result.label,
                sentiment_score=result.score,
                tags=tuple(infer_tags(raw.text)),
                embedding=tuple(embedding),
            ))
        return enriched

    # -------------------------------------------------------------------------
    # Rule-based summary
    # -------------------------------------------------------------------------

    def summarize(self, period: Period, entries: Sequence[AnyEntry]) -> InsightSummary:
        """Rule-based insight summary; never raises for gateway failures."""
        period = Period.parse(period)
        if not entries:
            return make_summary(period, [EMPTY_MESSAGE], 0.0, [])

        try:
            enriched = self.enrich(entries)
        except GatewayError as e:
            logger.warning(f"Model gateway failed, using local enrichment: {e}")
            enriched = [local_enrichment(entry) for entry in entries]

        insights = build_insights(enriched, period, clusterer=self.clusterer)
        return make_summary(period, insights, average_sentiment(enriched), top_tags(enriched, 5))

    # -------------------------------------------------------------------------
    # Generated summary
    # -------------------------------------------------------------------------

    def narrate(self, period: Period, entries: Sequence[AnyEntry]) -> InsightSummary:
        """Summary whose bullets come from the text generator when available."""
        period = Period.parse(period)
        keywords = top_keywords(entries, 5)
        self.gateway.load_generator()
        insights = self._generated_insights(period, entries)
        return make_summary(period, insights, average_sentiment(entries), keywords)

    def _generated_insights(self, period: Period, entries: Sequence[AnyEntry]) -> List[str]:
        if not entries or not self.gateway.generator_available:
            return fallback_narrative(entries)

        prompt = build_generation_prompt(period, entries)
        try:
            text = self.gateway.generate(prompt, GENERATION_MAX_TOKENS)
        except GatewayError as e:
            logger.warning(f"LLM generation failed, using fallback: {e}")
            return fallback_narrative(entries)

        lines = split_sentences(text.replace(prompt, ""))
        return lines or fallback_narrative(entries)


def _date_string(created_at: str) -> str:
    moment = parse_timestamp(created_at)
    if moment is None:
        return created_at
    return moment.astimezone().strftime("%a %b %d %Y")


def build_generation_prompt(period: Period, entries: Sequence[AnyEntry]) -> str:
    recent = "\n".join(
        f"- {_date_string(entry.created_at)}: {entry.text}"
        for entry in entries[-PROMPT_ENTRY_COUNT:]
    )
    return "\n".join([
        "You are a gentle reflection companion running fully on-device.",
        "Write 2-3 short bullet insights that connect themes, moods, and routines.",
        "Avoid restating the same sentence; focus on patterns over the selected period.",
        f"Period: {period.value}",
        "Entries:",
        recent,
        "Insights:",
    ])


def split_sentences(text: str) -> List[str]:
    """Split generated text into at most three non-empty lines."""
    parts = text.replace("\n", ".").split(".")
    lines = [part.strip().lstrip("-*").strip() for part in parts]
    return [line for line in lines if line][:MAX_INSIGHTS]


def fallback_narrative(entries: Sequence[AnyEntry]) -> List[str]:
    """Deterministic lines used when no generator is available."""
    if not entries:
        return [NO_ENTRIES_NARRATIVE]

    average_length = sum(len(entry.text.split(" ")) for entry in entries) / len(entries)
    if average_length > DEEP_ENTRY_WORDS:
        emphasis = "Your reflections are getting deeper; consider highlighting key takeaways."
    else:
        emphasis = "Short, frequent notes are helping you spot patterns without overthinking."

    return [
        "You stayed consistent this period; keep favoring steady writing over perfection.",
        emphasis,
        "Experiment with a recurring cue (walk, stretch, or reset) and note how it shapes your energy.",
    ]
