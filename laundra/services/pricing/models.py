"""
Value objects for order pricing.

Money is carried as ``decimal.Decimal`` end to end. Amounts are kept at full
precision through every intermediate step and rounded to the currency minor
unit only by ``quantize_money``, which display and persistence callers use.
"""

from dataclasses import dataclass, fields, replace
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Any, Optional, Union

from laundra.services.pricing.errors import ValidationError

ZERO = Decimal("0")
MINOR_UNIT = Decimal("0.01")
MIN_QUANTIZE_PRECISION = 28

MoneyInput = Union[Decimal, int, float, str]


def to_decimal(value: MoneyInput, field_name: str = "value") -> Decimal:
    """
    Convert a price-like input to Decimal.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.

    Args:
        value: Decimal, int, float or numeric string
        field_name: Field name for error messages

    Returns:
        Finite Decimal value

    Raises:
        ValidationError: If value is missing, boolean, or not a finite number
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a number",
            field=field_name,
            value=value,
        )

    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, int):
            result = Decimal(value)
        elif isinstance(value, float):
            result = Decimal(str(value))
        elif isinstance(value, str):
            result = Decimal(value.strip())
        else:
            raise TypeError(type(value).__name__)
    except (InvalidOperation, TypeError) as e:
        raise ValidationError(
            f"{field_name} must be a number",
            field=field_name,
            value=repr(value),
        ) from e

    if not result.is_finite():
        raise ValidationError(
            f"{field_name} must be finite",
            field=field_name,
            value=str(result),
        )

    return result


def quantize_money(amount: Decimal) -> Decimal:
    """
    Round an amount to the currency minor unit (2 dp, half up).

    Precision grows with the amount so every integer digit plus two decimal
    places fits; the caller's decimal context is not used.
    """
    digits = max(MIN_QUANTIZE_PRECISION, amount.adjusted() + 3)
    with localcontext(Context(prec=digits, rounding=ROUND_HALF_UP)):
        return amount.quantize(MINOR_UNIT)


@dataclass(frozen=True)
class LineItem:
    """
    One priced unit within an order.

    ``custom_price`` of ``None`` means no override; ``Decimal("0")`` is an
    explicit zero override. The catalog price is kept for display and audit
    even when overridden.
    """

    product_reference_price: Decimal
    custom_price: Optional[Decimal] = None
    stain_surcharge: Decimal = ZERO
    quantity: int = 1
    note: Optional[str] = None
    product_id: Optional[str] = None
    stain_type_id: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "product_reference_price",
            to_decimal(self.product_reference_price, "product_reference_price"),
        )
        object.__setattr__(
            self,
            "stain_surcharge",
            to_decimal(self.stain_surcharge, "stain_surcharge"),
        )
        if self.custom_price is not None:
            object.__setattr__(
                self,
                "custom_price",
                to_decimal(self.custom_price, "custom_price"),
            )

    @property
    def has_custom_price(self) -> bool:
        return self.custom_price is not None

    @property
    def effective_unit_price(self) -> Decimal:
        """Custom price when set, otherwise the catalog reference price."""
        if self.custom_price is not None:
            return self.custom_price
        return self.product_reference_price

    def with_quantity(self, quantity: int) -> "LineItem":
        return replace(self, quantity=quantity)


@dataclass(frozen=True)
class OrderModifiers:
    """Order-level pricing inputs supplied by shop configuration."""

    is_express: bool = False
    express_fee: Decimal = ZERO
    vat_rate_percent: Decimal = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "express_fee", to_decimal(self.express_fee, "express_fee")
        )
        object.__setattr__(
            self,
            "vat_rate_percent",
            to_decimal(self.vat_rate_percent, "vat_rate_percent"),
        )


@dataclass(frozen=True)
class OrderTotals:
    """
    Derived order totals.

    Never stored as independent truth; always recomputable from the line
    items and modifiers. Amounts are unrounded until ``rounded()``.
    """

    items_subtotal: Decimal
    express_fee_applied: Decimal
    pre_tax_subtotal: Decimal
    vat_rate_percent: Decimal
    vat_amount: Decimal
    grand_total: Decimal

    MONEY_FIELDS = (
        "items_subtotal",
        "express_fee_applied",
        "pre_tax_subtotal",
        "vat_amount",
        "grand_total",
    )

    def rounded(self) -> "OrderTotals":
        """Copy with every money field rounded to the minor unit."""
        return replace(
            self,
            **{name: quantize_money(getattr(self, name)) for name in self.MONEY_FIELDS},
        )

    def as_dict(self) -> dict[str, Any]:
        return {f.name: str(getattr(self, f.name)) for f in fields(self)}
