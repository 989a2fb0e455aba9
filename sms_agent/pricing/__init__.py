from sms_agent.pricing.cache import PricingCache, aggregate_products, parse_price

__all__ = ["PricingCache", "aggregate_products", "parse_price"]
