"""
In-memory journal entries and the latest analysis of them.

Nothing is persisted: entries live for the lifetime of the process.
"""

import logging
import threading
from typing import List, Optional, Sequence, Tuple

from reflector import config
from reflector.aggregate import newest_first
from reflector.models import AnyEntry, EnrichedEntry, JournalEntry, epoch_millis, iso_timestamp, utc_now
from reflector.pipeline import InsightPipeline

logger = logging.getLogger(__name__)


class JournalStore:
    """Append-only, newest-first list of entries with a change counter."""

    def __init__(self, entries: Optional[Sequence[JournalEntry]] = None):
        self._lock = threading.Lock()
        self._entries: List[JournalEntry] = newest_first(entries or [])
        self._ids = {entry.id for entry in self._entries}
        self._version = 0

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def snapshot(self) -> Tuple[int, Tuple[JournalEntry, ...]]:
        with self._lock:
            return self._version, tuple(self._entries)

    def add(self, text: str) -> JournalEntry:
        """Create a new entry at the front of the list."""
        now = utc_now()
        with self._lock:
            stamp = epoch_millis(now)
            while f"entry-{stamp}" in self._ids:
                stamp += 1
            entry = JournalEntry(id=f"entry-{stamp}", created_at=iso_timestamp(now), text=text)
            self._entries.insert(0, entry)
            self._ids.add(entry.id)
            self._version += 1
        logger.info(f"Added journal entry {entry.id} ({len(text.split())} words)")
        return entry


class AnalysisCache:
    """
    Latest enriched entries for a store version.

    An analysis that finishes after the store has changed is stale: it is
    returned to its own caller but never published.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._version: Optional[int] = None
        self._entries: Tuple[EnrichedEntry, ...] = ()

    def latest(self) -> Tuple[EnrichedEntry, ...]:
        with self._lock:
            return self._entries

    def analyzed(self, store: JournalStore, pipeline: InsightPipeline) -> List[EnrichedEntry]:
        """Enriched entries for the store's current contents."""
        version, entries = store.snapshot()
        with self._lock:
            if self._version == version:
                return list(self._entries)

        enriched = pipeline.enrich(entries)

        with self._lock:
            if store.version != version:
                logger.info(f"Discarding stale analysis of store version {version}")
            else:
                self._version = version
                self._entries = tuple(enriched)
        return enriched


def insight_window(
    analyzed: Sequence[AnyEntry],
    fallback: Sequence[AnyEntry],
    size: Optional[int] = None,
) -> List[AnyEntry]:
    """The newest `size` analyzed entries, or the raw entries when none are analyzed."""
    size = size if size is not None else config.INSIGHT_WINDOW
    if analyzed:
        return newest_first(analyzed)[:size]
    return list(fallback)
