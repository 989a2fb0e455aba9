"""Per-message prompt assembly from history and pricing facts."""

from typing import Optional, Sequence

from sms_agent.prompts.system_prompts import SMS_SYSTEM_PROMPT
from sms_agent.schemas.conversation_schema import Message
from sms_agent.schemas.pricing_schema import PricingResult


def build_pricing_facts(pricing: PricingResult) -> str:
    """Summarize a pricing lookup as plain facts the reply may quote."""
    if not pricing.available:
        return f"No {pricing.product_type} products are currently listed in the store."
    lines = [f"{pricing.product_count} {pricing.product_type} products are listed."]
    if pricing.price_range:
        lines.append(
            f"Prices range from ${pricing.price_range.min:.2f} to ${pricing.price_range.max:.2f}."
        )
    for sample in pricing.sample_products:
        lines.append(f"  {sample.title}: {sample.price}")
    return "\n".join(lines)


def build_reply_prompt(
    message: str,
    history: Sequence[Message],
    pricing: Optional[PricingResult] = None,
) -> str:
    """Build the full prompt for one inbound customer message."""
    parts = [SMS_SYSTEM_PROMPT, f"Customer message: {message}"]
    if history:
        parts.append("Previous conversation context:")
        parts.extend(f"{m.role.value}: {m.content}" for m in history)
    if pricing is not None:
        parts.append("Store pricing (quote only these figures):")
        parts.append(build_pricing_facts(pricing))
    parts.append("Please provide a helpful response:")
    return "\n".join(parts)
