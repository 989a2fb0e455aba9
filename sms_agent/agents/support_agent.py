"""
SMS support agent — turns one inbound text into one outbound reply.

Per message: load the customer's history, decide whether a human must
take over, look up pricing when the customer asks about a product, draft
a reply with the text generator, record the turn, and deliver the reply.
Every collaborator failure degrades to a canned reply so the customer
always hears back.
"""

import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Awaitable, Callable, Optional

from sms_agent.config import AppConfig, settings
from sms_agent.conversation.escalation import EscalationAdvisor
from sms_agent.conversation.reply_filter import ESCALATION_REPLY, ReplyFilter, fallback_reply
from sms_agent.conversation.session_store import SessionStore
from sms_agent.errors import DeliveryError, PricingLookupError, ReplyGenerationError
from sms_agent.logging_context import get_message_logger, set_message_id
from sms_agent.pricing.cache import FetchFn, PricingCache
from sms_agent.prompts.prompt_templates import build_reply_prompt
from sms_agent.schemas.conversation_schema import Message
from sms_agent.schemas.pricing_schema import PricingResult
from sms_agent.tools.products import (
    SearchFn,
    build_pricing_fetcher,
    is_pricing_question,
    match_product_type,
)
from sms_agent.utils import mask_phone, normalize_phone

logger = get_message_logger(__name__)

GenerateFn = Callable[[str], Awaitable[str]]
SendFn = Callable[[str, str], Awaitable[Any]]


@dataclass
class ReplyOutcome:
    """What happened to one inbound message."""
    customer_id: str
    reply: str
    escalated: bool = False
    escalation_reason: Optional[str] = None
    product_type: Optional[str] = None
    pricing: Optional[PricingResult] = None
    used_fallback: bool = False
    delivered: bool = False
    receipt: Any = None


class SupportAgent:
    """Orchestrates the session store, escalation advisor, and pricing cache."""

    def __init__(
        self,
        store: SessionStore,
        advisor: EscalationAdvisor,
        pricing_cache: PricingCache,
        generate_fn: GenerateFn,
        send_fn: SendFn,
        fetch_fn: FetchFn,
        reply_filter: Optional[ReplyFilter] = None,
        context_window: int = 6,
        name: str = "sms-support-agent",
    ) -> None:
        self.store = store
        self.advisor = advisor
        self.pricing_cache = pricing_cache
        self._generate_fn = generate_fn
        self._send_fn = send_fn
        self._fetch_fn = fetch_fn
        self.reply_filter = reply_filter or ReplyFilter()
        self.context_window = context_window
        self.name = name

    async def handle_message(
        self, from_number: str, body: str, message_sid: Optional[str] = None
    ) -> ReplyOutcome:
        """Process one inbound SMS and send the reply back to its sender."""
        set_message_id(message_sid or f"IN-{uuid.uuid4().hex[:8]}")
        customer_id = normalize_phone(from_number)
        logger.info("Received SMS from %s (%d chars)", mask_phone(customer_id), len(body))

        conversation = self.store.get_conversation(customer_id)
        history = list(conversation.messages) if conversation is not None else []
        outcome = ReplyOutcome(customer_id=customer_id, reply="")

        decision = self.advisor.evaluate(body, history)
        if decision.escalate:
            logger.info("Escalating to a human (%s: %s)", decision.reason, decision.detail)
            outcome.escalated = True
            outcome.escalation_reason = decision.reason
            outcome.reply = ESCALATION_REPLY
        else:
            outcome.product_type, outcome.pricing = await self._lookup_pricing(body)
            context = self.store.get_context(customer_id, self.context_window)
            try:
                outcome.reply = await self._generate(body, context, outcome.pricing)
            except ReplyGenerationError as exc:
                logger.warning("Reply generation failed, using fallback: %s", exc)
                outcome.reply = fallback_reply()
                outcome.used_fallback = True

        self.store.record_turn(customer_id, body, outcome.reply)

        try:
            outcome.receipt = await self._deliver(from_number, outcome.reply)
            outcome.delivered = True
            logger.info("Sent reply to %s", mask_phone(customer_id))
        except DeliveryError as exc:
            logger.error("Reply to %s not delivered: %s", mask_phone(customer_id), exc)
        return outcome

    async def _lookup_pricing(self, body: str) -> tuple[Optional[str], Optional[PricingResult]]:
        product_type = match_product_type(body)
        if product_type is None or not is_pricing_question(body):
            return product_type, None
        try:
            return product_type, await self.pricing_cache.get(product_type, self._fetch_fn)
        except PricingLookupError as exc:
            logger.warning("Continuing without pricing: %s", exc)
            return product_type, None

    async def _generate(
        self, body: str, context: list[Message], pricing: Optional[PricingResult]
    ) -> str:
        prompt = build_reply_prompt(body, context, pricing)
        try:
            raw = await self._generate_fn(prompt)
        except Exception as exc:
            raise ReplyGenerationError(str(exc)) from exc
        reply = self.reply_filter.clean(raw or "")
        if not reply:
            raise ReplyGenerationError("generator returned an empty reply")
        return reply

    async def _deliver(self, to: str, body: str) -> Any:
        try:
            return await self._send_fn(to, body)
        except Exception as exc:
            raise DeliveryError(str(exc)) from exc

    def status(self) -> dict[str, Any]:
        """Health summary for status endpoints and the console demo."""
        stats = self.store.get_stats()
        return {
            "agent": self.name,
            "status": "running",
            "active_conversations": stats.active_conversations,
            "total_messages": stats.total_messages,
            "pricing_cache_entries": len(self.pricing_cache),
            "max_history": self.store.max_history,
            "escalation_threshold": self.advisor.length_threshold,
        }


def build_support_agent(
    generate_fn: GenerateFn,
    send_fn: SendFn,
    search_fn: SearchFn,
    config: AppConfig = settings,
) -> SupportAgent:
    """Construct a SupportAgent and its stores from application config.

    ``search_fn`` queries the real storefront; pricing quoted to customers
    comes only from what it returns.
    """
    store = SessionStore(
        max_history=config.session.max_history,
        timeout=timedelta(hours=config.session.timeout_hours),
    )
    advisor = EscalationAdvisor(
        keywords=config.escalation.keywords,
        length_threshold=config.escalation.length_threshold,
    )
    cache = PricingCache(
        ttl_seconds=config.pricing.cache_ttl_sec,
        single_flight=config.pricing.single_flight,
    )
    return SupportAgent(
        store=store,
        advisor=advisor,
        pricing_cache=cache,
        generate_fn=generate_fn,
        send_fn=send_fn,
        fetch_fn=build_pricing_fetcher(search_fn),
        reply_filter=ReplyFilter(max_length=config.reply.max_length),
        context_window=config.session.context_window,
        name=config.agent_name,
    )
