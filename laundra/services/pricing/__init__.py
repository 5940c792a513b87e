"""
Order pricing package.

Exposes the value objects and the single pricing function every caller
(quote, receipt, dashboard) delegates to.
"""

from laundra.services.pricing.engine import (
    PricingError,
    ValidationError,
    compute_line_total,
    compute_order_totals,
)
from laundra.services.pricing.models import (
    LineItem,
    OrderModifiers,
    OrderTotals,
    quantize_money,
    to_decimal,
)

__all__ = [
    "LineItem",
    "OrderModifiers",
    "OrderTotals",
    "PricingError",
    "ValidationError",
    "compute_line_total",
    "compute_order_totals",
    "quantize_money",
    "to_decimal",
]
