"""
Post-generation cleanup for outbound SMS replies.

Generated text is reduced to something that reads well as a single text
message: markdown characters are removed, whitespace is collapsed, the
reply is cut to the SMS length limit, and profanity is masked.
"""

import logging
import random
import re
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 160
ELLIPSIS = "..."

MARKDOWN_CHARS = re.compile(r"[*_`#]")
WHITESPACE = re.compile(r"\s+")

PROFANITY = ["fuck", "shit", "damn", "ass"]

FALLBACK_REPLIES = [
    "I'm sorry, I'm having trouble processing your request right now. Please try again later.",
    "Thank you for your message. I'm experiencing technical difficulties. "
    "Please contact us again in a few minutes.",
    "I apologize, but I'm unable to respond at the moment. "
    "Please try again or contact our support team.",
]

ESCALATION_REPLY = (
    "I understand you'd like to speak with a human representative. I'm connecting "
    "you with our support team now. Someone will be with you shortly."
)


class ReplyFilter:
    """Cleans generated replies so they fit in one SMS."""

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self.max_length = max_length
        self._profanity = re.compile(
            r"\b(" + "|".join(re.escape(w) for w in PROFANITY) + r")(?:s|es|ed|ing|er)?\b",
            re.IGNORECASE,
        )

    def clean(self, text: str) -> str:
        cleaned = MARKDOWN_CHARS.sub("", text)
        cleaned = WHITESPACE.sub(" ", cleaned).strip()
        # Masked before truncation, so a word cut at the limit is never partly visible.
        cleaned = self._profanity.sub("***", cleaned)

        if len(cleaned) > self.max_length:
            logger.debug("Truncating reply from %d chars", len(cleaned))
            cleaned = cleaned[: self.max_length - len(ELLIPSIS)] + ELLIPSIS
        return cleaned


def fallback_reply(rng: Optional[random.Random] = None) -> str:
    """Pick one of the canned replies used when generation fails."""
    return (rng or random).choice(FALLBACK_REPLIES)
