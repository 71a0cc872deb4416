"""
Domain exceptions raised by the engine and services.

Routers translate these into HTTP responses.
"""


class RepricingError(Exception):
    """Base class for all repricing tool errors."""


class InvalidPriceError(RepricingError, ValueError):
    """Price is not a positive finite number."""


class ProductNotFoundError(RepricingError):
    """No product with the requested SKU."""

    def __init__(self, sku: str):
        super().__init__(f"Product '{sku}' not found")
        self.sku = sku


class SeedError(RepricingError):
    """Seed file is missing or malformed."""


class EmptyBatchError(RepricingError):
    """Export requested but no products are approved."""
