"""
Order pricing and status Pydantic schemas for API request/response validation.

Line item prices arrive already resolved from the catalog. Sign and
quantity rules are enforced by the pricing engine rather than here, so the
API reports the same errors as every other caller of the engine.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from laundra.services.orders.enums import OrderStatus
from laundra.services.pricing import LineItem, OrderTotals


class LineItemSchema(BaseModel):
    """Priced order item."""

    model_config = ConfigDict(str_strip_whitespace=True)

    product_reference_price: Decimal = Field(
        ...,
        description="Catalog base price at time of order",
    )
    custom_price: Optional[Decimal] = Field(
        None,
        description="Manual price override; omit or null for none, 0 is a real override",
    )
    stain_surcharge: Decimal = Field(
        default=Decimal("0"),
        description="Per-unit stain treatment surcharge",
    )
    quantity: int = Field(default=1, description="Number of units")
    note: Optional[str] = Field(None, max_length=500)
    product_id: Optional[str] = Field(None, max_length=100)
    stain_type_id: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=200)

    def to_line_item(self) -> LineItem:
        return LineItem(
            product_reference_price=self.product_reference_price,
            custom_price=self.custom_price,
            stain_surcharge=self.stain_surcharge,
            quantity=self.quantity,
            note=self.note,
            product_id=self.product_id,
            stain_type_id=self.stain_type_id,
            description=self.description,
        )


class QuoteRequest(BaseModel):
    """Order quote request; fee and VAT rate default to shop settings."""

    items: list[LineItemSchema] = Field(default_factory=list)
    is_express: bool = False
    express_fee: Optional[Decimal] = Field(
        None, description="Override the configured express fee"
    )
    vat_rate_percent: Optional[Decimal] = Field(
        None, description="Override the configured VAT rate, in percent"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "items": [
                    {
                        "product_reference_price": "10.00",
                        "custom_price": "7.50",
                        "stain_surcharge": "2.00",
                        "quantity": 3,
                    }
                ],
                "is_express": True,
            }
        }
    }


class OrderTotalsResponse(BaseModel):
    """Order totals rounded to the currency minor unit."""

    currency: str
    items_subtotal: str
    express_fee: str
    pre_tax_subtotal: str
    vat_rate_percent: str
    vat_amount: str
    grand_total: str

    @classmethod
    def from_totals(cls, totals: OrderTotals, currency: str) -> "OrderTotalsResponse":
        rounded = totals.rounded()
        return cls(
            currency=currency,
            items_subtotal=str(rounded.items_subtotal),
            express_fee=str(rounded.express_fee_applied),
            pre_tax_subtotal=str(rounded.pre_tax_subtotal),
            vat_rate_percent=str(rounded.vat_rate_percent),
            vat_amount=str(rounded.vat_amount),
            grand_total=str(rounded.grand_total),
        )


class StatusInfo(BaseModel):
    value: OrderStatus
    position: int
    display_name: str
    is_terminal: bool
    next: Optional[OrderStatus] = None


class StatusTransitionRequest(BaseModel):
    """Proposed status change."""

    current_status: OrderStatus
    target_status: OrderStatus

    @field_validator("current_status", "target_status", mode="before")
    @classmethod
    def parse_status(cls, v):
        """Accept status values in any case ("Ready", "READY")."""
        if isinstance(v, str):
            return OrderStatus.from_string(v)
        return v


class StatusTransitionResponse(BaseModel):
    allowed: bool
    current_status: OrderStatus
    target_status: OrderStatus
    allowed_transitions: list[OrderStatus]


class NextStatusResponse(BaseModel):
    current_status: OrderStatus
    next_status: Optional[OrderStatus] = None


class ReceiptRequest(BaseModel):
    """Receipt data request for a stored order."""

    order_number: str = Field(..., min_length=1, max_length=50)
    status: OrderStatus = OrderStatus.CLEANING
    items: list[LineItemSchema] = Field(default_factory=list)
    is_express: bool = False
    express_fee: Optional[Decimal] = None
    vat_rate_percent: Optional[Decimal] = None
