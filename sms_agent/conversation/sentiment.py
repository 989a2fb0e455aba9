"""Lexicon-based sentiment classification for short customer messages."""

from enum import Enum
from typing import Iterable, Optional

POSITIVE_WORDS = frozenset({
    "good", "great", "excellent", "amazing", "wonderful",
    "happy", "satisfied", "love", "like",
})

NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "horrible", "angry",
    "frustrated", "disappointed", "hate", "dislike",
})


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class SentimentClassifier:
    """
    Counts whitespace-separated tokens that appear in a positive and a
    negative word set. The larger count wins; a tie (including 0-0) is
    neutral. Tokens are lower-cased but punctuation is kept, so
    "terrible!" does not match "terrible".
    """

    def __init__(
        self,
        positive_words: Optional[Iterable[str]] = None,
        negative_words: Optional[Iterable[str]] = None,
    ) -> None:
        self.positive_words = frozenset(
            w.lower() for w in (POSITIVE_WORDS if positive_words is None else positive_words)
        )
        self.negative_words = frozenset(
            w.lower() for w in (NEGATIVE_WORDS if negative_words is None else negative_words)
        )

    def classify(self, text: str) -> Sentiment:
        positive = negative = 0
        for token in text.lower().split():
            if token in self.positive_words:
                positive += 1
            if token in self.negative_words:
                negative += 1

        if positive > negative:
            return Sentiment.POSITIVE
        if negative > positive:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL
