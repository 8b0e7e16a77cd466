"""Reflector: local journaling insights."""

from reflector.gateway import GatewayError, LocalModelGateway, ModelGateway, ModelUnavailableError
from reflector.models import EnrichedEntry, InsightSummary, JournalEntry, Period, Sentiment, ThemeTag
from reflector.pipeline import InsightPipeline

__version__ = "0.1.0"

__all__ = [
    "EnrichedEntry",
    "GatewayError",
    "InsightPipeline",
    "InsightSummary",
    "JournalEntry",
    "LocalModelGateway",
    "ModelGateway",
    "ModelUnavailableError",
    "Period",
    "Sentiment",
    "ThemeTag",
]
