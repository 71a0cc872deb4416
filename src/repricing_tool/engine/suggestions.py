"""
Price Suggestion Engine - proposes round retail prices for a current price.

Applies a fixed markup and bracket-dependent rounding:
- LOW (< 50): ceil to 1, 5, 10
- MID (50 - 200): ceil to 5, 10, 50
- HIGH (200 - 1000): ceil to 10, 50, 100 (a multiple of 500 drops by 10)
- PREMIUM (>= 1000): ceil to 50, next ...90, ceil to 100

Brackets are selected by the marked-up price, not the current price.
"""
import math
import numbers
from typing import Callable

from .errors import InvalidPriceError
from .models import PriceBracket, PriceSuggestion

# 6% markup applied before rounding
MARKUP_BASE = 1.06


def _ceil_to(raw_price: float, step: int) -> int:
    """Smallest multiple of step at or above raw_price."""
    return math.ceil(raw_price / step) * step


def _low_candidates(raw_price: float) -> list[int]:
    return [
        math.ceil(raw_price),
        _ceil_to(raw_price, 5),
        _ceil_to(raw_price, 10),
    ]


def _mid_candidates(raw_price: float) -> list[int]:
    return [
        _ceil_to(raw_price, 5),
        _ceil_to(raw_price, 10),
        _ceil_to(raw_price, 50),
    ]


def _high_candidates(raw_price: float) -> list[int]:
    hundred = _ceil_to(raw_price, 100)
    # Round 500s read as too round on a shelf tag
    if hundred % 500 == 0:
        hundred -= 10
    return [
        _ceil_to(raw_price, 10),
        _ceil_to(raw_price, 50),
        hundred,
    ]


def _premium_candidates(raw_price: float) -> list[int]:
    return [
        _ceil_to(raw_price, 50),
        # Smallest 100k + 90 at or above raw_price
        math.ceil((raw_price - 90) / 100) * 100 + 90,
        _ceil_to(raw_price, 100),
    ]


BRACKET_RULES: dict[PriceBracket, Callable[[float], list[int]]] = {
    PriceBracket.LOW: _low_candidates,
    PriceBracket.MID: _mid_candidates,
    PriceBracket.HIGH: _high_candidates,
    PriceBracket.PREMIUM: _premium_candidates,
}


def _validate_positive(value, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidPriceError(f"{label} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidPriceError(f"{label} must be a positive finite number, got {value!r}")
    return value


def suggest(current_price: float, markup: float = MARKUP_BASE) -> PriceSuggestion:
    """
    Compute suggested prices with bracket and trace.

    Args:
        current_price: Current shelf price, positive and finite
        markup: Multiplier applied before rounding

    Returns:
        PriceSuggestion with ascending, deduplicated candidates

    Raises:
        InvalidPriceError: price or markup is not a positive finite number
    """
    current_price = _validate_positive(current_price, "Current price")
    markup = _validate_positive(markup, "Markup")

    raw_price = current_price * markup
    bracket = PriceBracket.for_price(raw_price)
    options = BRACKET_RULES[bracket](raw_price)

    result = PriceSuggestion(
        current_price=current_price,
        raw_price=raw_price,
        bracket=bracket,
        candidates=sorted(set(options)),
    )
    result.add_trace("Markup", f"{current_price:g} × {markup:g}", f"{raw_price:.2f}")
    result.add_trace("Bracket", f"Marked-up price falls in {bracket.name}", str(bracket.value))
    result.add_trace("Candidates", "Rounded options", ", ".join(str(o) for o in options))
    if len(result.candidates) < len(options):
        result.add_trace("Dedup", "Coinciding options merged", ", ".join(str(c) for c in result.candidates))
    return result


def calculate_suggestions(current_price: float, markup: float = MARKUP_BASE) -> list[int]:
    """Suggested prices for current_price, ascending and without duplicates."""
    return suggest(current_price, markup).candidates
