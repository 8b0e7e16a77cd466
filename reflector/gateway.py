"""
Model gateway: sentiment, embeddings and text generation.

The pipeline only talks to the ModelGateway interface, so tests and other
deployments can inject their own implementation. LocalModelGateway keeps
sentiment and embeddings on-device; generation goes through Groq only when a
key is configured.
"""

import logging
from typing import List, NamedTuple, Optional

from reflector import config
from reflector.models import Sentiment

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """A model call failed."""


class ModelUnavailableError(GatewayError):
    """A model could not be loaded, or was used before loading."""


class SentimentResult(NamedTuple):
    label: Sentiment
    score: float


class ModelGateway:
    """Contract for the models the insight pipeline depends on."""

    def load_sentiment_model(self) -> None:
        raise NotImplementedError

    def classify_sentiment(self, text: str) -> SentimentResult:
        raise NotImplementedError

    def load_embedding_model(self) -> None:
        raise NotImplementedError

    def embed(self, text: str) -> List[float]:
        raise NotImplementedError

    def load_generator(self) -> bool:
        """Best-effort; returns whether generation is available."""
        return False

    @property
    def generator_available(self) -> bool:
        return False

    def generate(self, prompt: str, max_tokens: int = 120) -> str:
        raise ModelUnavailableError("No text generator configured")


# Compound score thresholds for the three-way label
POSITIVE_COMPOUND = 0.2
NEGATIVE_COMPOUND = -0.2


def label_for_compound(compound: float) -> Sentiment:
    if compound >= POSITIVE_COMPOUND:
        return Sentiment.POSITIVE
    if compound <= NEGATIVE_COMPOUND:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


class LocalModelGateway(ModelGateway):
    """
    VADER sentiment, hashed n-gram embeddings and optional Groq generation.

    All load methods are idempotent.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        embedding_dim: Optional[int] = None,
    ):
        self.api_key = api_key if api_key is not None else config.GROQ_API_KEY
        self.model = model or config.GROQ_MODEL
        self.embedding_dim = embedding_dim or config.EMBEDDING_DIM
        self._analyzer = None
        self._vectorizer = None
        self._client = None

    # -------------------------------------------------------------------------
    # Sentiment
    # -------------------------------------------------------------------------

    def load_sentiment_model(self) -> None:
        if self._analyzer is not None:
            return
        try:
            import nltk
            from nltk.sentiment.vader import SentimentIntensityAnalyzer

            try:
                nltk.data.find("sentiment/vader_lexicon.zip")
            except LookupError:
                logger.info("Downloading NLTK VADER lexicon...")
                nltk.download("vader_lexicon", quiet=True)

            self._analyzer = SentimentIntensityAnalyzer()
            logger.info("VADER sentiment model loaded")
        except Exception as e:
            logger.error(f"Sentiment model failed to load: {e}")
            raise ModelUnavailableError(f"Sentiment model unavailable: {e}") from e

    def classify_sentiment(self, text: str) -> SentimentResult:
        """
        Classify text as positive/neutral/negative.

        The VADER compound score (-1 to 1) is rescaled to a 0-1 score.
        """
        if self._analyzer is None:
            raise ModelUnavailableError("Sentiment model not loaded")
        if not text or not text.strip():
            return SentimentResult(Sentiment.NEUTRAL, 0.5)

        try:
            compound = self._analyzer.polarity_scores(text)["compound"]
        except Exception as e:
            raise GatewayError(f"Sentiment analysis failed: {e}") from e

        score = round((compound + 1) / 2, 3)
        return SentimentResult(label_for_compound(compound), score)

    # -------------------------------------------------------------------------
    # Embeddings
    # -------------------------------------------------------------------------

    def load_embedding_model(self) -> None:
        if self._vectorizer is not None:
            return
        try:
            from sklearn.feature_extraction.text import HashingVectorizer

            self._vectorizer = HashingVectorizer(
                n_features=self.embedding_dim,
                ngram_range=(1, 2),
                stop_words="english",
                alternate_sign=False,
                norm="l2",
            )
            logger.info(f"Embedding model loaded ({self.embedding_dim} dimensions)")
        except Exception as e:
            logger.error(f"Embedding model failed to load: {e}")
            raise ModelUnavailableError(f"Embedding model unavailable: {e}") from e

    def embed(self, text: str) -> List[float]:
        """Fixed-length vector for any input length."""
        if self._vectorizer is None:
            raise ModelUnavailableError("Embedding model not loaded")
        try:
            matrix = self._vectorizer.transform([text or ""])
        except Exception as e:
            raise GatewayError(f"Embedding failed: {e}") from e
        return matrix.toarray()[0].tolist()

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def load_generator(self) -> bool:
        if self._client is not None:
            return True
        if not self.api_key:
            logger.info("No GROQ_API_KEY set; generated insights use the offline fallback")
            return False
        try:
            from groq import Groq
            self._client = Groq(api_key=self.api_key)
            logger.info("Groq API configured for AI features")
            return True
        except Exception as e:
            logger.warning(f"Text generator unavailable: {e}")
            self._client = None
            return False

    @property
    def generator_available(self) -> bool:
        return self._client is not None

    def generate(self, prompt: str, max_tokens: int = 120) -> str:
        """Generate text using the Groq API."""
        if self._client is None:
            raise ModelUnavailableError("Text generator not loaded")

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=0.7,
            )
            return (response.choices[0].message.content or "").strip()
        except Exception as e:
            logger.error(f"AI generation error: {e}")
            raise GatewayError(f"Text generation failed: {e}") from e
