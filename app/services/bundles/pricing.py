"""
Bundle price arithmetic.

Amounts are plain floats and nothing is clamped: a discount above 100 gives a
negative price, and rounding only happens when a value is formatted for display.
"""

from typing import Iterable, Optional, Protocol, Union


class Priced(Protocol):
    @property
    def price(self) -> float: ...


def bundle_total(products: Iterable[Priced]) -> float:
    """Sum of the minimum variant prices; 0 for no products."""
    return sum((float(product.price) for product in products), 0.0)


def selection_total(products: Iterable[Priced]) -> float:
    """Total shown while composing a bundle: each price is rounded to cents before summing."""
    return sum((round(float(product.price), 2) for product in products), 0.0)


def discounted_price(total: float, discount: Optional[Union[int, float]]) -> float:
    return total * (1 - (discount or 0) / 100)


def format_money(value: Union[int, float, None]) -> str:
    """Render an amount the way the admin tables show it, e.g. $27.00"""
    return f"${float(value or 0):.2f}"
