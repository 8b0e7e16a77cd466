import nltk
import pytest

from reflector.gateway import LocalModelGateway, ModelUnavailableError, label_for_compound
from reflector.models import Sentiment


class StubAnalyzer:
    def __init__(self, compound: float):
        self.compound = compound

    def polarity_scores(self, text):
        return {"compound": self.compound, "pos": 0.0, "neg": 0.0, "neu": 1.0}


def test_label_for_compound() -> None:
    assert label_for_compound(0.2) == Sentiment.POSITIVE
    assert label_for_compound(0.19) == Sentiment.NEUTRAL
    assert label_for_compound(-0.19) == Sentiment.NEUTRAL
    assert label_for_compound(-0.2) == Sentiment.NEGATIVE


def test_classify_requires_a_loaded_model() -> None:
    with pytest.raises(ModelUnavailableError):
        LocalModelGateway(api_key="").classify_sentiment("hello")


def test_classify_rescales_compound_score() -> None:
    gateway = LocalModelGateway(api_key="")
    gateway._analyzer = StubAnalyzer(0.6)
    result = gateway.classify_sentiment("Great walk today")
    assert result.label == Sentiment.POSITIVE
    assert result.score == 0.8

    gateway._analyzer = StubAnalyzer(-1.0)
    assert gateway.classify_sentiment("awful").score == 0.0
    assert gateway.classify_sentiment("   ") == (Sentiment.NEUTRAL, 0.5)


def test_sentiment_load_failure_is_reported(monkeypatch) -> None:
    def missing(*args, **kwargs):
        raise LookupError("vader_lexicon not found")

    def offline(*args, **kwargs):
        raise OSError("no network")

    monkeypatch.setattr(nltk.data, "find", missing)
    monkeypatch.setattr(nltk, "download", offline)

    with pytest.raises(ModelUnavailableError):
        LocalModelGateway(api_key="").load_sentiment_model()


def test_embeddings_have_fixed_length() -> None:
    gateway = LocalModelGateway(api_key="", embedding_dim=64)
    with pytest.raises(ModelUnavailableError):
        gateway.embed("too early")

    gateway.load_embedding_model()
    gateway.load_embedding_model()
    short = gateway.embed("walk")
    long = gateway.embed("long morning walk with creative ideas " * 20)
    assert len(short) == 64
    assert len(long) == 64
    assert gateway.embed("walk") == short
    assert any(short)


def test_generator_absent_without_api_key() -> None:
    gateway = LocalModelGateway(api_key="")
    assert gateway.load_generator() is False
    assert gateway.generator_available is False
    with pytest.raises(ModelUnavailableError):
        gateway.generate("hello", 10)
