"""Product search and pricing lookup models."""

from typing import Optional

from pydantic import BaseModel, Field


class Product(BaseModel):
    """A product returned by the storefront search."""
    title: str
    price: str
    image: Optional[str] = None
    link: Optional[str] = None


class PriceRange(BaseModel):
    min: float
    max: float


class SampleProduct(BaseModel):
    title: str
    price: str


class PricingResult(BaseModel):
    """Aggregated pricing for one product type across its search synonyms."""
    product_type: str
    available: bool
    product_count: int
    price_range: Optional[PriceRange] = None
    sample_products: list[SampleProduct] = Field(default_factory=list)
