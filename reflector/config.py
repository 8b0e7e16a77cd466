"""
Runtime configuration read from the environment (and a local .env file).
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# AI configuration
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
EMBEDDING_DIM = int(os.getenv("EMBEDDING_DIM", "256"))

# Insight tuning
SIMILARITY_THRESHOLD = float(os.getenv("SIMILARITY_THRESHOLD", "0.8"))
INSIGHT_WINDOW = int(os.getenv("INSIGHT_WINDOW", "6"))

# Entries
MAX_ENTRY_LENGTH = int(os.getenv("MAX_ENTRY_LENGTH", "50000"))  # Characters
SEED_SAMPLE_ENTRIES = _env_bool("SEED_SAMPLE_ENTRIES", True)

# Server
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "5000"))
