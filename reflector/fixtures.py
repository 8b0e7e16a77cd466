"""
Sample journal entries used to seed a fresh session.
"""

import json
import logging
import os
from typing import List, Optional

from reflector.models import JournalEntry, raw_entry_from_dict

logger = logging.getLogger(__name__)

SAMPLE_FILE = os.path.join(os.path.dirname(__file__), "data", "sample_entries.json")


def load_sample_entries(path: Optional[str] = None) -> List[JournalEntry]:
    """
    Load seed entries from a JSON file of the form {"entries": [...]}.

    A missing or unreadable file yields an empty list. Invalid records are
    skipped. Derived fields in the file are ignored: seeds are always raw.
    """
    path = path or SAMPLE_FILE
    if not os.path.exists(path):
        logger.warning(f"Sample entries file not found: {path}")
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"JSON decode error in {path}: {e}")
        return []
    except OSError as e:
        logger.error(f"File read error: {e}")
        return []

    records = data.get("entries", []) if isinstance(data, dict) else []
    if not isinstance(records, list):
        logger.warning("Invalid sample data format, ignoring")
        return []

    entries = []
    for record in records:
        try:
            entries.append(raw_entry_from_dict(record))
        except (ValueError, TypeError) as e:
            logger.warning(f"Skipping invalid sample entry: {e}")
    return entries
