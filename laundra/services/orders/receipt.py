"""
Receipt data for printed and on-screen order receipts.

Builds the values a receipt shows (store header, one line per item,
subtotal, express fee, VAT and total) from an order's line items and
modifiers. Totals come from the pricing engine and are rounded here, the
point of display. Layout is left to the renderer.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Sequence

from laundra.core.config import Settings, get_settings
from laundra.schemas.catalog import StoreSettingsSchema
from laundra.services.orders.enums import OrderStatus
from laundra.services.pricing import (
    LineItem,
    OrderModifiers,
    compute_line_total,
    compute_order_totals,
    quantize_money,
)


@dataclass(frozen=True)
class StoreDetails:
    name: str
    phone: str
    address_line1: str
    address_city: str
    address_postcode: str
    vat_number: str
    vat_rate_percent: Decimal
    address_line2: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "StoreDetails":
        settings = settings or get_settings()
        return cls(
            name=settings.store_name,
            phone=settings.store_phone,
            address_line1=settings.store_address_line1,
            address_line2=settings.store_address_line2 or None,
            address_city=settings.store_address_city,
            address_postcode=settings.store_address_postcode,
            vat_number=settings.store_vat_number,
            vat_rate_percent=settings.default_vat_rate_percent,
        )

    @classmethod
    def from_schema(cls, record: StoreSettingsSchema) -> "StoreDetails":
        """Build store details from a stored store-settings record."""
        return cls(
            name=record.name,
            phone=record.phone,
            address_line1=record.address_line1,
            address_line2=record.address_line2 or None,
            address_city=record.address_city,
            address_postcode=record.address_postcode,
            vat_number=record.vat_number,
            vat_rate_percent=record.vat_rate,
        )

    @property
    def address_lines(self) -> list[str]:
        lines = [self.address_line1, self.address_line2, self.address_city, self.address_postcode]
        return [line for line in lines if line]


@dataclass(frozen=True)
class ReceiptLine:
    description: str
    quantity: int
    unit_price: Decimal
    stain_surcharge: Decimal
    line_total: Decimal
    note: Optional[str] = None


@dataclass(frozen=True)
class Receipt:
    store: StoreDetails
    order_number: str
    status: OrderStatus
    currency: str
    lines: list[ReceiptLine] = field(default_factory=list)
    items_subtotal: Decimal = Decimal("0.00")
    express_fee: Optional[Decimal] = None
    vat_rate_percent: Decimal = Decimal("0")
    vat_amount: Decimal = Decimal("0.00")
    grand_total: Decimal = Decimal("0.00")

    def as_dict(self) -> dict[str, Any]:
        return {
            "store": {
                "name": self.store.name,
                "phone": self.store.phone,
                "address": self.store.address_lines,
                "vat_number": self.store.vat_number,
            },
            "order_number": self.order_number,
            "status": self.status.value,
            "currency": self.currency,
            "lines": [
                {
                    "description": line.description,
                    "quantity": line.quantity,
                    "unit_price": str(line.unit_price),
                    "stain_surcharge": str(line.stain_surcharge),
                    "line_total": str(line.line_total),
                    "note": line.note,
                }
                for line in self.lines
            ],
            "items_subtotal": str(self.items_subtotal),
            "express_fee": str(self.express_fee) if self.express_fee is not None else None,
            "vat_rate_percent": str(self.vat_rate_percent),
            "vat_amount": str(self.vat_amount),
            "grand_total": str(self.grand_total),
        }


def _describe(item: LineItem, position: int) -> str:
    if item.description:
        return item.description
    if item.product_id:
        return item.product_id
    return f"Item {position}"


def build_receipt(
    order_number: str,
    status: OrderStatus,
    items: Sequence[LineItem],
    modifiers: OrderModifiers,
    store: Optional[StoreDetails] = None,
    currency: Optional[str] = None,
) -> Receipt:
    """
    Build receipt data for an order.

    Args:
        order_number: Human-facing order number
        status: Current order status
        items: Line items of the order
        modifiers: Express flag, express fee and VAT rate used for the order
        store: Store header details, defaults to configured store
        currency: Currency code, defaults to configured currency

    Returns:
        Receipt with every amount rounded to the currency minor unit

    Raises:
        ValidationError: If any line item or modifier is invalid
    """
    totals = compute_order_totals(items, modifiers).rounded()

    lines = [
        ReceiptLine(
            description=_describe(item, position),
            quantity=item.quantity,
            unit_price=quantize_money(item.effective_unit_price),
            stain_surcharge=quantize_money(item.stain_surcharge),
            line_total=quantize_money(compute_line_total(item)),
            note=item.note,
        )
        for position, item in enumerate(items, start=1)
    ]

    return Receipt(
        store=store or StoreDetails.from_settings(),
        order_number=order_number,
        status=status,
        currency=currency or get_settings().currency,
        lines=lines,
        items_subtotal=totals.items_subtotal,
        express_fee=totals.express_fee_applied if modifiers.is_express else None,
        vat_rate_percent=totals.vat_rate_percent,
        vat_amount=totals.vat_amount,
        grand_total=totals.grand_total,
    )
