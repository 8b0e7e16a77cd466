import itertools
from typing import Dict, List, Optional, Sequence

import pytest

from reflector.gateway import GatewayError, ModelGateway, ModelUnavailableError, SentimentResult
from reflector.models import JournalEntry, Sentiment


class FakeGateway(ModelGateway):
    """Scripted gateway: scores and embeddings are looked up by entry text."""

    def __init__(
        self,
        scores: Optional[Dict[str, float]] = None,
        embeddings: Optional[Dict[str, Sequence[float]]] = None,
        generated=None,
        fail_load: bool = False,
        fail_on: Optional[str] = None,
    ):
        self.scores = scores or {}
        self.embeddings = embeddings or {}
        self.generated = generated
        self.fail_load = fail_load
        self.fail_on = fail_on
        self.loads = 0
        self.calls: List[str] = []
        self.prompts: List[str] = []

    def load_sentiment_model(self) -> None:
        if self.fail_load:
            raise ModelUnavailableError("sentiment model missing")
        self.loads += 1

    def classify_sentiment(self, text: str) -> SentimentResult:
        if self.fail_on and self.fail_on in text:
            raise GatewayError("classifier crashed")
        self.calls.append(text)
        score = self.scores.get(text, 0.5)
        if score >= 0.6:
            label = Sentiment.POSITIVE
        elif score <= 0.4:
            label = Sentiment.NEGATIVE
        else:
            label = Sentiment.NEUTRAL
        return SentimentResult(label, score)

    def load_embedding_model(self) -> None:
        if self.fail_load:
            raise ModelUnavailableError("embedding model missing")

    def embed(self, text: str) -> List[float]:
        return list(self.embeddings.get(text, [0.0, 0.0, 0.0]))

    def load_generator(self) -> bool:
        return self.generated is not None

    @property
    def generator_available(self) -> bool:
        return self.generated is not None

    def generate(self, prompt: str, max_tokens: int = 120) -> str:
        self.prompts.append(prompt)
        if isinstance(self.generated, Exception):
            raise self.generated
        return self.generated


_ids = itertools.count(1)


def make_entry(text: str, created_at: str = "2025-11-24T12:00:00.000Z", entry_id: Optional[str] = None) -> JournalEntry:
    return JournalEntry(id=entry_id or f"entry-{next(_ids)}", created_at=created_at, text=text)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
