"""
Escalation heuristics deciding when a human must take over a conversation.

Three independent rules, any one of which escalates:
1. Keyword     — the message contains a configured escalation phrase
2. Length      — the conversation history has reached the threshold
3. Sentiment   — at least 2 of the last 3 history entries are negative
                 customer messages

The advisor holds only its configuration. Decisions are pure functions
of the message and history passed in.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from sms_agent.conversation.sentiment import Sentiment, SentimentClassifier
from sms_agent.schemas.conversation_schema import Message, Role

logger = logging.getLogger(__name__)

DEFAULT_LENGTH_THRESHOLD = 10
RECENT_WINDOW = 3
NEGATIVE_LIMIT = 2


@dataclass(frozen=True)
class EscalationDecision:
    """Outcome of an escalation check, with the rule that fired."""
    escalate: bool
    reason: Optional[str] = None  # "keyword" | "conversation_length" | "negative_sentiment"
    detail: Optional[str] = None


class EscalationAdvisor:
    """Decides whether an inbound message should be routed to a human."""

    def __init__(
        self,
        keywords: Iterable[str],
        length_threshold: int = DEFAULT_LENGTH_THRESHOLD,
        classifier: Optional[SentimentClassifier] = None,
    ) -> None:
        self.keywords = tuple(k.lower() for k in keywords if k)
        self.length_threshold = length_threshold
        self.classifier = classifier or SentimentClassifier()

    def evaluate(self, message: str, history: Sequence[Message]) -> EscalationDecision:
        lower = message.lower()
        for keyword in self.keywords:
            if keyword in lower:
                return EscalationDecision(True, "keyword", keyword)

        if len(history) >= self.length_threshold:
            return EscalationDecision(
                True,
                "conversation_length",
                f"{len(history)} messages (threshold {self.length_threshold})",
            )

        recent = history[-RECENT_WINDOW:]
        negative = sum(
            1 for msg in recent
            if msg.role == Role.CUSTOMER
            and self.classifier.classify(msg.content) == Sentiment.NEGATIVE
        )
        if negative >= NEGATIVE_LIMIT:
            return EscalationDecision(
                True, "negative_sentiment", f"{negative} of last {len(recent)} negative"
            )

        return EscalationDecision(False)

    def should_escalate(self, message: str, history: Sequence[Message]) -> bool:
        return self.evaluate(message, history).escalate
