"""
Time-bounded memoization of product pricing lookups.

A lookup runs one storefront search per synonym of the product type,
which is slow, so results are cached per lower-cased product type for a
fixed TTL. Freshness is checked lazily on read: a stale entry is simply
overwritten by the next lookup, and entries are never purged on their own.

Usage:
    cache = PricingCache(ttl_seconds=300)
    result = await cache.get("t-shirt", fetch_fn)
    if result.price_range:
        print(result.price_range.min, result.price_range.max)
"""

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from sms_agent.errors import PricingLookupError
from sms_agent.schemas.pricing_schema import PriceRange, PricingResult, Product, SampleProduct

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0
MAX_SAMPLE_PRODUCTS = 3

_NUMBER_PREFIX = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")

FetchFn = Callable[[str], Awaitable[Iterable[Union[Product, dict[str, Any]]]]]


def parse_price(price: str) -> Optional[float]:
    """Parse a display price like ``"$1,299.00"`` into a positive float.

    Dollar signs and thousands separators are ignored and any trailing text
    after the leading number is dropped. Returns None for text with no
    leading number or a value that is not positive.

    Examples:
        >>> parse_price("$1,299.50")
        1299.5
        >>> parse_price("Sold out") is None
        True
    """
    match = _NUMBER_PREFIX.match(price.replace("$", "").replace(",", ""))
    if not match:
        return None
    value = float(match.group(1))
    return value if value > 0 else None


def aggregate_products(
    product_type: str, products: Iterable[Union[Product, dict[str, Any]]]
) -> PricingResult:
    """Deduplicate products by title and summarize their prices.

    The first product seen with a given title wins. Products whose price
    cannot be parsed still count towards ``product_count`` but are left
    out of ``price_range``.
    """
    unique: dict[str, Product] = {}
    for item in products:
        product = item if isinstance(item, Product) else Product.model_validate(item)
        unique.setdefault(product.title, product)

    prices = [p for p in (parse_price(prod.price) for prod in unique.values()) if p is not None]
    price_range = PriceRange(min=min(prices), max=max(prices)) if prices else None

    samples = [
        SampleProduct(title=p.title, price=p.price)
        for p in list(unique.values())[:MAX_SAMPLE_PRODUCTS]
    ]
    return PricingResult(
        product_type=product_type,
        available=bool(unique),
        product_count=len(unique),
        price_range=price_range,
        sample_products=samples,
    )


@dataclass(frozen=True)
class CacheEntry:
    value: PricingResult
    fetched_at: float


class PricingCache:
    """
    TTL cache in front of an async product lookup.

    By default two concurrent misses for the same product type each run
    their own fetch and the last one to finish wins. With
    ``single_flight=True`` a second caller waits on the fetch already in
    progress instead of starting another.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        single_flight: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._single_flight = single_flight
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Future] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, product_type: object) -> bool:
        return isinstance(product_type, str) and product_type.lower() in self._entries

    async def get(self, product_type: str, fetch_fn: FetchFn) -> PricingResult:
        """
        Return pricing for a product type, fetching it on a miss.

        Raises:
            PricingLookupError: If ``fetch_fn`` fails. Any previously cached
                value for the key is left in place.
        """
        key = product_type.lower()
        entry = self._entries.get(key)
        if entry is not None and self._clock() - entry.fetched_at < self._ttl:
            logger.debug("Pricing cache hit: %s", key)
            return entry.value

        if not self._single_flight:
            return await self._refresh(key, product_type, fetch_fn)

        pending = self._inflight.get(key)
        if pending is not None:
            logger.debug("Joining in-flight pricing fetch: %s", key)
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._refresh(key, product_type, fetch_fn))
        self._inflight[key] = task
        task.add_done_callback(lambda t: self._finish_inflight(key, t))
        return await asyncio.shield(task)

    def _finish_inflight(self, key: str, task: asyncio.Future) -> None:
        self._inflight.pop(key, None)
        # Every waiter may have been cancelled, so the failure is retrieved here.
        if not task.cancelled():
            task.exception()

    async def _refresh(self, key: str, product_type: str, fetch_fn: FetchFn) -> PricingResult:
        logger.debug("Pricing cache miss: %s", key)
        try:
            products = await fetch_fn(product_type)
            result = aggregate_products(product_type, products)
        except Exception as exc:
            logger.warning("Pricing lookup for '%s' failed: %s", product_type, exc)
            raise PricingLookupError(product_type, str(exc)) from exc

        self._entries[key] = CacheEntry(value=result, fetched_at=self._clock())
        logger.info(
            "Cached pricing for '%s': %d products", key, result.product_count
        )
        return result

    def clear(self) -> None:
        """Remove every cached entry."""
        self._entries.clear()
        logger.info("Pricing cache cleared")
