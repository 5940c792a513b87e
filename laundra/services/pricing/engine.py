"""
Order pricing engine.

Computes line totals and order totals (items subtotal, express fee, VAT and
grand total) from line items and order modifiers. This is the one place the
pricing arithmetic lives; order quotes, receipts and dashboard revenue all
delegate here.

The functions are pure: no I/O, no mutation of inputs, and arithmetic runs
in a fixed decimal context so the caller's thread context cannot change the
result.
"""

from decimal import ROUND_HALF_EVEN, Context, Decimal, DecimalException, localcontext
from typing import Sequence

from laundra.core.logging import get_logger
from laundra.services.pricing.errors import PricingError, ValidationError
from laundra.services.pricing.models import (
    ZERO,
    LineItem,
    OrderModifiers,
    OrderTotals,
)

logger = get_logger(__name__)

__all__ = [
    "PricingError",
    "ValidationError",
    "compute_line_total",
    "compute_order_totals",
]

HUNDRED = Decimal("100")

# Fixed context for all pricing arithmetic.
PRICING_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN)


def _validate_non_negative(amount: Decimal, field_name: str) -> None:
    if amount < ZERO:
        raise ValidationError(
            f"{field_name} cannot be negative",
            field=field_name,
            value=str(amount),
        )


def _validate_quantity(quantity: object) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(
            "quantity must be an integer",
            field="quantity",
            value=repr(quantity),
        )
    if quantity < 1:
        raise ValidationError(
            "quantity must be at least 1",
            field="quantity",
            value=quantity,
        )


def _out_of_range(field_name: str, error: DecimalException) -> ValidationError:
    return ValidationError(
        f"{field_name} is out of range",
        field=field_name,
        error_type=type(error).__name__,
    )


def compute_line_total(item: LineItem) -> Decimal:
    """
    Compute the total for a single line item.

    Line total = (effective unit price + stain surcharge) x quantity, where
    the effective unit price is the custom price when one is set.

    Args:
        item: Line item to price

    Returns:
        Unrounded line total

    Raises:
        ValidationError: If quantity is below 1 or any price is negative
    """
    _validate_quantity(item.quantity)
    _validate_non_negative(item.product_reference_price, "product_reference_price")
    _validate_non_negative(item.stain_surcharge, "stain_surcharge")
    if item.custom_price is not None:
        _validate_non_negative(item.custom_price, "custom_price")

    try:
        with localcontext(PRICING_CONTEXT):
            return (item.effective_unit_price + item.stain_surcharge) * item.quantity
    except DecimalException as e:
        raise _out_of_range("line_total", e) from e


def compute_order_totals(
    items: Sequence[LineItem], modifiers: OrderModifiers
) -> OrderTotals:
    """
    Compute order totals from line items and modifiers.

    The express fee is applied once per order when ``is_express`` is set,
    before VAT. Nothing is rounded here; use ``OrderTotals.rounded()`` at the
    point of display or persistence.

    Args:
        items: Line items of the order (may be empty)
        modifiers: Express flag, express fee and VAT rate

    Returns:
        OrderTotals with unrounded amounts

    Raises:
        ValidationError: If any line item, the express fee or the VAT rate
            is invalid, or an amount falls outside the decimal range
    """
    _validate_non_negative(modifiers.express_fee, "express_fee")
    _validate_non_negative(modifiers.vat_rate_percent, "vat_rate_percent")

    express_fee = modifiers.express_fee if modifiers.is_express else ZERO
    try:
        with localcontext(PRICING_CONTEXT):
            items_subtotal = sum(
                (compute_line_total(item) for item in items),
                start=ZERO,
            )
            pre_tax_subtotal = items_subtotal + express_fee
            vat_amount = pre_tax_subtotal * modifiers.vat_rate_percent / HUNDRED
            grand_total = pre_tax_subtotal + vat_amount
    except DecimalException as e:
        raise _out_of_range("grand_total", e) from e

    logger.debug(
        "Calculated order totals",
        item_count=len(items),
        is_express=modifiers.is_express,
        pre_tax_subtotal=str(pre_tax_subtotal),
        vat_amount=str(vat_amount),
        grand_total=str(grand_total),
    )

    return OrderTotals(
        items_subtotal=items_subtotal,
        express_fee_applied=express_fee,
        pre_tax_subtotal=pre_tax_subtotal,
        vat_rate_percent=modifiers.vat_rate_percent,
        vat_amount=vat_amount,
        grand_total=grand_total,
    )
