"""
Offline console demo — runs SMS support conversations without any API keys.

Uses the real session store, escalation advisor, and pricing cache.
The text generator is a small rule-based stand-in and the
SMS gateway is a stub that returns a queued receipt. The storefront is a
small demo catalog with illustrative prices. No LLM, no Twilio, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario pricing
    python console_demo.py --scenario escalation
"""

import argparse
import asyncio
import re
import sys
import uuid
from typing import Any

from sms_agent.agents.support_agent import ReplyOutcome, SupportAgent, build_support_agent
from sms_agent.config import settings
from sms_agent.conversation.sweeper import SessionSweeper
from sms_agent.schemas.pricing_schema import Product
from sms_agent.tools.products import extract_price

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_NUMBER = "+1 (415) 555-0134"
MAX_SEARCH_RESULTS = 5

# Demo storefront stock. Prices are illustrative only.
DEMO_CATALOG: list[dict[str, str]] = [
    {"title": "Custom Cotton T-Shirt", "price": "$19.99", "tags": "custom t-shirt"},
    {"title": "Premium Custom T-Shirt", "price": "$27.50", "tags": "custom t-shirt printed t-shirt"},
    {"title": "Printed Graphic T-Shirt", "price": "$22.00", "tags": "printed t-shirt"},
    {"title": "Bulk Event T-Shirt (min 25)", "price": "Quote on request", "tags": "custom t-shirt"},
    {"title": "Custom Pullover Hoodie", "price": "$39.99", "tags": "custom hoodie"},
    {"title": "Printed Zip Hoodie", "price": "$44.00", "tags": "printed hoodie custom hoodie"},
    {"title": "Custom Ceramic Mug", "price": "$14.99", "tags": "custom mug personalized mug"},
    {"title": "Personalized Travel Mug", "price": "$24.00", "tags": "personalized mug"},
    {"title": "Custom Crewneck Sweatshirt", "price": "$34.99", "tags": "custom sweatshirt"},
    {"title": "Printed Fleece Sweatshirt", "price": "$1,049.00", "tags": "printed sweatshirt"},
]


async def demo_search(term: str) -> list[Product]:
    """Search the demo catalog. Returns at most five products."""
    needle = term.lower().strip()
    results = []
    for item in DEMO_CATALOG:
        if needle in item["tags"] or needle in item["title"].lower():
            slug = re.sub(r"[^a-z0-9]+", "-", item["title"].lower()).strip("-")
            results.append(Product(
                title=item["title"],
                price=extract_price(item["price"]) or item["price"],
                link=f"{settings.pricing.store_base_url}/products/{slug}",
            ))
    return results[:MAX_SEARCH_RESULTS]


async def offline_generate(prompt: str) -> str:
    """Rule-based reply drafting from the assembled prompt."""
    message = re.search(r"Customer message: (.*)", prompt)
    text = message.group(1).lower() if message else ""
    prices = re.search(r"Prices range from (\$\d[\d,]*\.\d{2}) to (\$\d[\d,]*\.\d{2})", prompt)
    if prices:
        return (
            f"**Good news!** Those start at {prices.group(1)} and go up to "
            f"{prices.group(2)}. Want a link to order?"
        )
    if "products are currently listed" in prompt:
        return "We don't have those listed right now, but our team can check for you."
    if re.search(r"\b(hi|hello|hey)\b", text):
        return f"Hi there! Thanks for texting {settings.business.name}. How can I help?"
    if "thank" in text:
        return "You're welcome! Text us anytime."
    return "Thanks for your message. Could you tell me a bit more about what you need?"


async def console_send(to: str, body: str) -> dict[str, Any]:
    return {
        "sid": f"SM{uuid.uuid4().hex[:16]}",
        "from": settings.business.sender_number or "demo",
        "to": to,
        "status": "queued",
    }


class ConsoleSession:
    """Simulates an SMS thread with the support agent in the terminal."""

    def __init__(self) -> None:
        self.agent: SupportAgent = build_support_agent(
            offline_generate, console_send, demo_search
        )
        self.number = DEMO_NUMBER

    def agent_say(self, outcome: ReplyOutcome) -> None:
        colour = YELLOW if outcome.escalated else GREEN
        print(f"{colour}{BOLD}[Agent]{RESET} {colour}{outcome.reply}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "pricing": [
            "Hi!",
            "How much is a custom t-shirt?",
            "And what do hoodies cost?",
            "What's the price of t-shirts again?",
            "Thanks!",
        ],
        "escalation": [
            "My order arrived damaged",
            "This is terrible",
            "I am so frustrated and angry",
            "I want a REFUND",
        ],
        "chat": [
            "Hello",
            "Do you print on mugs?",
            "Thank you",
        ],
    }

    MAX_INPUT_LENGTH = 1600

    async def _process_input(self, text: str) -> None:
        outcome = await self.agent.handle_message(self.number, text)
        self.agent_say(outcome)
        if outcome.escalated:
            self.system_log(f"Escalated: {outcome.escalation_reason}")
        if outcome.pricing is not None:
            self.system_log(
                f"Pricing '{outcome.product_type}': {outcome.pricing.product_count} products, "
                f"range {outcome.pricing.price_range}"
            )
        if outcome.used_fallback:
            self.system_log("Generator failed, fallback reply used")
        conversation = self.agent.store.get_conversation(outcome.customer_id)
        count = conversation.metadata.message_count if conversation else 0
        self.system_log(f"History: {count} messages, delivered: {outcome.delivered}")

    def _print_summary(self, title: str) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {title}{RESET}")
        print(f"{DIM}  Status: {self.agent.status()}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  SMS SUPPORT AGENT - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Business: {settings.business.name}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

        for step in steps:
            print(f"\n{BLUE}[Customer] {RESET}{step}")
            await self._process_input(step)

        self._print_summary(f"Scenario '{scenario}' complete.")

    async def run(self) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  SMS SUPPORT AGENT - Console Demo{RESET}")
        print(f"{BOLD}  Business: {settings.business.name}{RESET}")
        print(f"{BOLD}  Type 'quit' to exit{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

        sweeper = SessionSweeper(self.agent.store, settings.session.sweep_interval_sec)
        sweeper.start()
        while True:
            user_input = (
                await asyncio.to_thread(input, f"\n{BLUE}[Customer] {RESET}")
            ).strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                break
            if len(user_input) > self.MAX_INPUT_LENGTH:
                print(f"{RED}Message too long for SMS.{RESET}")
                continue
            await self._process_input(user_input)

        await sweeper.stop()
        self._print_summary("Session ended.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline SMS support agent demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        help="Auto-play a scripted conversation instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    try:
        if args.scenario:
            asyncio.run(session.run_scenario(args.scenario))
        else:
            asyncio.run(session.run())
    except (KeyboardInterrupt, EOFError):
        print(f"\n{DIM}Session ended.{RESET}")
        sys.exit(0)


if __name__ == "__main__":
    main()
