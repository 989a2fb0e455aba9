"""Tests for product-type detection and the storefront pricing fetcher."""

import pytest

from sms_agent.pricing.cache import PricingCache
from sms_agent.schemas.pricing_schema import Product
from sms_agent.tools.products import (
    build_pricing_fetcher,
    extract_price,
    get_search_terms,
    is_pricing_question,
    match_product_type,
)


class TestExtractPrice:
    def test_simple(self):
        assert extract_price("Now only $19.99!") == "$19.99"

    def test_thousands(self):
        assert extract_price("Sale: $1,049.00") == "$1,049.00"

    def test_none(self):
        assert extract_price("Call for pricing") is None


class TestProductMatching:
    @pytest.mark.parametrize("text,expected", [
        ("How much is a t-shirt?", "t-shirt"),
        ("price for tees", "t-shirt"),
        ("Do you do hoodies", "hoodie"),
        ("custom mugs cost?", "mug"),
        ("sweatshirt prices", "sweatshirt"),
        ("What are your hours?", None),
    ])
    def test_match_product_type(self, text, expected):
        assert match_product_type(text) == expected

    def test_search_terms_for_known_type(self):
        assert get_search_terms("T-Shirt") == ["custom t-shirt", "printed t-shirt"]

    def test_search_terms_for_unknown_type(self):
        assert get_search_terms("tote bag") == ["tote bag"]

    def test_pricing_question(self):
        assert is_pricing_question("How much for 20 mugs?") is True
        assert is_pricing_question("When do you open?") is False


class TestPricingFetcher:
    @pytest.mark.asyncio
    async def test_one_search_per_synonym(self):
        terms = []

        async def search(term: str) -> list[Product]:
            terms.append(term)
            return [Product(title="Shared Tee", price="$10")]

        products = await build_pricing_fetcher(search)("t-shirt")
        assert terms == ["custom t-shirt", "printed t-shirt"]
        assert len(products) == 2

    @pytest.mark.asyncio
    async def test_search_failure_propagates(self):
        async def search(term: str) -> list[Product]:
            raise ConnectionError("storefront down")

        with pytest.raises(ConnectionError):
            await build_pricing_fetcher(search)("mug")

    @pytest.mark.asyncio
    async def test_storefront_results_priced_through_cache(self, clock, storefront):
        cache = PricingCache(clock=clock.seconds)
        result = await cache.get("hoodie", build_pricing_fetcher(storefront))
        assert storefront.terms == ["custom hoodie", "printed hoodie"]
        assert result.product_count == 2
        assert result.price_range.min == pytest.approx(39.99)
        assert result.price_range.max == pytest.approx(44.0)

    @pytest.mark.asyncio
    async def test_unknown_type_searched_as_is(self, storefront):
        assert await build_pricing_fetcher(storefront)("tote bag") == []
        assert storefront.terms == ["tote bag"]
