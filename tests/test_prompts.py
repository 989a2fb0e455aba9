"""Tests for prompt assembly and the message-id logging context."""

import logging

from sms_agent.config import settings
from sms_agent.logging_context import MessageIdFilter, get_message_id, get_message_logger, set_message_id
from sms_agent.prompts.prompt_templates import build_pricing_facts, build_reply_prompt
from sms_agent.schemas.pricing_schema import PriceRange, PricingResult, SampleProduct
from tests.conftest import make_history


class TestBuildReplyPrompt:
    def test_includes_message_and_history(self):
        history = make_history([("customer", "Hi"), ("assistant", "Hello!")])
        prompt = build_reply_prompt("Do you sell mugs?", history)
        assert "Customer message: Do you sell mugs?" in prompt
        assert "customer: Hi\nassistant: Hello!" in prompt
        assert "Store pricing" not in prompt

    def test_support_line_in_system_prompt(self):
        assert f"can call {settings.business.support_line}" in build_reply_prompt("Hi", [])

    def test_no_history_section_when_empty(self):
        assert "Previous conversation context" not in build_reply_prompt("Hi", [])

    def test_pricing_facts_included(self):
        pricing = PricingResult(
            product_type="mug",
            available=True,
            product_count=2,
            price_range=PriceRange(min=14.99, max=24.0),
            sample_products=[SampleProduct(title="Custom Ceramic Mug", price="$14.99")],
        )
        prompt = build_reply_prompt("How much is a mug?", [], pricing)
        assert "Prices range from $14.99 to $24.00." in prompt
        assert "Custom Ceramic Mug: $14.99" in prompt


class TestPricingFacts:
    def test_unavailable(self):
        pricing = PricingResult(product_type="hat", available=False, product_count=0)
        assert build_pricing_facts(pricing).startswith("No hat products")


class TestMessageLogger:
    def test_filter_attached_once(self):
        logger = get_message_logger("sms_agent.test")
        get_message_logger("sms_agent.test")
        assert sum(isinstance(f, MessageIdFilter) for f in logger.filters) == 1

    def test_record_carries_message_id(self):
        set_message_id("SM123")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        MessageIdFilter().filter(record)
        assert record.message_id == "SM123"
        assert get_message_id() == "SM123"
