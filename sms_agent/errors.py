"""Exceptions raised when an external collaborator fails.

Each one signals that the collaborator's result was discarded. Caches and
stores are left as they were before the failed call, so callers can fall
back to a default reply.
"""

from typing import Optional


class SmsAgentError(Exception):
    """Base class for collaborator failures surfaced by the SMS agent."""


class PricingLookupError(SmsAgentError):
    """Raised when the product search behind a pricing lookup fails."""

    def __init__(self, product_type: str, reason: Optional[str] = None) -> None:
        self.product_type = product_type
        self.reason = reason
        message = f"Pricing lookup failed for '{product_type}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ReplyGenerationError(SmsAgentError):
    """Raised when the text generator fails or returns an empty reply."""


class DeliveryError(SmsAgentError):
    """Raised when the outbound SMS could not be handed to the gateway."""
