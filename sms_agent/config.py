"""
Centralized configuration with environment variable overrides.

Session limits, escalation thresholds, and cache timings are all
configurable here. The stores and advisors take these values as explicit
constructor arguments; nothing in the core reads the environment itself.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_ESCALATION_KEYWORDS = (
    "speak to someone", "talk to human", "real person", "agent", "representative",
    "manager", "supervisor", "complaint", "refund", "cancel", "billing issue",
    "technical problem", "emergency", "urgent",
)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    raw = os.getenv(env_var, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


def _keyword_list(env_var: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated keyword list, falling back to the defaults."""
    raw = os.getenv(env_var)
    if not raw:
        return default
    return tuple(k.strip().lower() for k in raw.split(",") if k.strip())


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "The Custom Hub")
    business_info: str = os.getenv(
        "BUSINESS_INFO", "Custom printed apparel and gifts: t-shirts, hoodies, mugs"
    )
    support_line: str = os.getenv("SUPPORT_LINE", "1-800-555-0199")
    sender_number: str = os.getenv("TWILIO_PHONE_NUMBER", "")


@dataclass(frozen=True)
class SessionConfig:
    """Conversation history limits and expiry."""

    max_history: int = _safe_int("MAX_CONVERSATION_HISTORY", "10")
    timeout_hours: float = _safe_float("CONVERSATION_TIMEOUT_HOURS", "24")
    context_window: int = _safe_int("CONTEXT_WINDOW", "6")
    sweep_interval_sec: float = _safe_float("SWEEP_INTERVAL_SECONDS", "3600")


@dataclass(frozen=True)
class EscalationConfig:
    """Thresholds and keywords that route a conversation to a human."""

    length_threshold: int = _safe_int("ESCALATION_LENGTH_THRESHOLD", "10")
    keywords: tuple[str, ...] = _keyword_list(
        "ESCALATION_KEYWORDS", DEFAULT_ESCALATION_KEYWORDS
    )


@dataclass(frozen=True)
class PricingConfig:
    """Product pricing lookup cache settings."""

    cache_ttl_sec: float = _safe_float("PRICING_CACHE_TTL_SECONDS", "300")
    single_flight: bool = _safe_bool("PRICING_SINGLE_FLIGHT", "false")
    store_base_url: str = os.getenv("STORE_BASE_URL", "https://thecustomhub.com")


@dataclass(frozen=True)
class ReplyConfig:
    """Outbound SMS reply constraints."""

    max_length: int = _safe_int("SMS_MAX_LENGTH", "160")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    escalation: EscalationConfig = field(default_factory=EscalationConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    reply: ReplyConfig = field(default_factory=ReplyConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    agent_name: str = os.getenv("AGENT_NAME", "sms-support-agent")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.session.max_history < 2:
        raise ValueError(
            f"MAX_CONVERSATION_HISTORY must be >= 2, got {config.session.max_history}"
        )
    if config.session.timeout_hours <= 0:
        raise ValueError(
            f"CONVERSATION_TIMEOUT_HOURS must be > 0, got {config.session.timeout_hours}"
        )
    if config.session.context_window < 0:
        raise ValueError(
            f"CONTEXT_WINDOW must be >= 0, got {config.session.context_window}"
        )
    if config.session.sweep_interval_sec <= 0:
        raise ValueError(
            f"SWEEP_INTERVAL_SECONDS must be > 0, got {config.session.sweep_interval_sec}"
        )
    if config.escalation.length_threshold < 1:
        raise ValueError(
            "ESCALATION_LENGTH_THRESHOLD must be >= 1, "
            f"got {config.escalation.length_threshold}"
        )
    if not config.escalation.keywords:
        raise ValueError("ESCALATION_KEYWORDS must contain at least one keyword")
    if config.pricing.cache_ttl_sec < 0:
        raise ValueError(
            f"PRICING_CACHE_TTL_SECONDS must be >= 0, got {config.pricing.cache_ttl_sec}"
        )
    if config.reply.max_length < 4:
        raise ValueError(
            f"SMS_MAX_LENGTH must be >= 4, got {config.reply.max_length}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
