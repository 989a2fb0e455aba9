"""
Product-type detection and storefront pricing lookups.

Customer messages are matched to a known product type, and a pricing
fetcher turns that type into one storefront search per synonym. The
storefront search itself is a collaborator supplied by the caller; this
module never invents products or prices.
"""

import logging
import re
from typing import Awaitable, Callable, Optional

from sms_agent.schemas.pricing_schema import Product

logger = logging.getLogger(__name__)

_PRICE_PATTERN = re.compile(r"\$[\d,]+\.?\d*")

# Product types customers ask about, mapped to the storefront search terms
# used to price them. Unknown types are searched as-is.
PRODUCT_SYNONYMS: dict[str, list[str]] = {
    "t-shirt": ["custom t-shirt", "printed t-shirt"],
    "hoodie": ["custom hoodie", "printed hoodie"],
    "mug": ["custom mug", "personalized mug"],
    "sweatshirt": ["custom sweatshirt", "printed sweatshirt"],
}

PRODUCT_ALIASES: dict[str, str] = {
    "tshirt": "t-shirt", "t shirt": "t-shirt", "tee": "t-shirt", "shirt": "t-shirt",
    "hoodie": "hoodie", "hoody": "hoodie", "hooded": "hoodie",
    "mug": "mug", "cup": "mug",
    "sweatshirt": "sweatshirt", "crewneck": "sweatshirt", "jumper": "sweatshirt",
}

PRICING_SIGNALS = [
    "price", "pricing", "cost", "how much", "quote", "cheap", "expensive", "$",
]

SearchFn = Callable[[str], Awaitable[list[Product]]]


def extract_price(text: str) -> Optional[str]:
    """Pull the first ``$1,234.56``-style price out of a text fragment."""
    match = _PRICE_PATTERN.search(text)
    return match.group(0) if match else None


def get_search_terms(product_type: str) -> list[str]:
    """Return the storefront search terms used to price a product type."""
    return PRODUCT_SYNONYMS.get(product_type.lower(), [product_type])


def match_product_type(text: str) -> Optional[str]:
    """Match a customer message to a known product type. Returns None if no match."""
    lower = text.lower()
    for product_type in PRODUCT_SYNONYMS:
        if product_type in lower:
            return product_type
    for alias, product_type in PRODUCT_ALIASES.items():
        if re.search(rf"\b{re.escape(alias)}s?\b", lower):
            return product_type
    return None


def is_pricing_question(text: str) -> bool:
    lower = text.lower()
    return any(signal in lower for signal in PRICING_SIGNALS)


def build_pricing_fetcher(search_fn: SearchFn) -> Callable[[str], Awaitable[list[Product]]]:
    """Build a fetch function that runs one search per synonym of a product type.

    Results from every term are concatenated in search order; duplicates
    are left for the pricing cache to collapse. A failing search propagates.
    """

    async def fetch(product_type: str) -> list[Product]:
        products: list[Product] = []
        for term in get_search_terms(product_type):
            products.extend(await search_fn(term))
        logger.debug("Storefront returned %d products for '%s'", len(products), product_type)
        return products

    return fetch
