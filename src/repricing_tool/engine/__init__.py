"""Engine subpackage - price suggestion logic and domain models."""
from .suggestions import calculate_suggestions, suggest, MARKUP_BASE
from .models import PriceBracket, PriceSuggestion, Product, ProductStatus
from .errors import InvalidPriceError

__all__ = [
    'calculate_suggestions', 'suggest', 'MARKUP_BASE',
    'PriceBracket', 'PriceSuggestion', 'Product', 'ProductStatus',
    'InvalidPriceError',
]
