"""
Order service for the order-entry, order-edit and status-change flows.

This module turns catalog selections into priced line items, quotes orders
through the pricing engine, enforces the status workflow on status changes,
and aggregates order snapshots for the dashboard. Storage is left to the
caller: every method takes plain values and returns plain values.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional, Protocol, Sequence

from laundra.core.config import Settings, get_settings
from laundra.core.logging import get_logger, order_context
from laundra.schemas.catalog import Category, Product, StainType
from laundra.services.orders.enums import OrderStatus
from laundra.services.orders.workflow import StatusWorkflow
from laundra.services.pricing import (
    LineItem,
    OrderModifiers,
    OrderTotals,
    compute_order_totals,
)
from laundra.services.pricing.models import ZERO, MoneyInput

logger = get_logger(__name__)


class OrderServiceError(Exception):
    """Base exception for order service errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.context = context


class CatalogLookupError(OrderServiceError):
    """Raised when a product or stain type identifier is unknown."""

    pass


class CatalogProvider(Protocol):
    """Resolves catalog identifiers to prices."""

    def get_product_price(self, product_id: str) -> Decimal: ...

    def get_product_name(self, product_id: str) -> str: ...

    def get_stain_surcharge(self, stain_type_id: str) -> Decimal: ...


class ShopConfigProvider(Protocol):
    """Supplies shop-level pricing inputs."""

    def get_vat_rate_percent(self) -> Decimal: ...

    def get_express_fee(self) -> Decimal: ...


class InMemoryCatalog:
    """Catalog provider backed by product, stain type and category records."""

    def __init__(
        self,
        products: Iterable[Product] = (),
        stain_types: Iterable[StainType] = (),
        categories: Iterable[Category] = (),
    ):
        self._products = {product.id: product for product in products}
        self._stain_types = {stain.id: stain for stain in stain_types}
        self._categories = {category.id: category for category in categories}

    def list_products(self, category_id: Optional[str] = None) -> list[Product]:
        """
        List products for the order form, ordered by name.

        Raises:
            CatalogLookupError: If ``category_id`` is given but unknown
        """
        if category_id is not None and category_id not in self._categories:
            raise CatalogLookupError(
                f"Unknown category: {category_id}",
                category_id=category_id,
            )
        products = [
            product
            for product in self._products.values()
            if category_id is None or product.category_id == category_id
        ]
        return sorted(products, key=lambda p: p.name.lower())

    def get_product(self, product_id: str) -> Product:
        try:
            return self._products[product_id]
        except KeyError:
            raise CatalogLookupError(
                f"Unknown product: {product_id}",
                product_id=product_id,
            ) from None

    def get_stain_type(self, stain_type_id: str) -> StainType:
        try:
            return self._stain_types[stain_type_id]
        except KeyError:
            raise CatalogLookupError(
                f"Unknown stain type: {stain_type_id}",
                stain_type_id=stain_type_id,
            ) from None

    def get_product_price(self, product_id: str) -> Decimal:
        return self.get_product(product_id).price

    def get_product_name(self, product_id: str) -> str:
        return self.get_product(product_id).name

    def get_stain_surcharge(self, stain_type_id: str) -> Decimal:
        return self.get_stain_type(stain_type_id).price


class SettingsShopConfig:
    """Shop configuration provider reading from application settings."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def get_vat_rate_percent(self) -> Decimal:
        return self._settings.default_vat_rate_percent

    def get_express_fee(self) -> Decimal:
        return self._settings.express_fee


@dataclass(frozen=True)
class ItemSelection:
    """An order item as picked on the order form, before pricing."""

    product_id: str
    quantity: int = 1
    stain_type_id: Optional[str] = None
    custom_price: Optional[MoneyInput] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class OrderSnapshot:
    """Minimal view of a stored order used for dashboard aggregation."""

    status: OrderStatus
    items: Sequence[LineItem]
    modifiers: OrderModifiers
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class OrderSummary:
    """Dashboard figures."""

    total_orders: int
    orders_by_status: dict[OrderStatus, int] = field(default_factory=dict)
    items_processing: int = 0
    revenue: Decimal = ZERO


def price_order(items: Sequence[LineItem], modifiers: OrderModifiers) -> OrderTotals:
    """
    Price already-resolved line items and log the quote.

    Shared by ``OrderService.quote`` and the quote endpoint, which receives
    catalog prices with the request.

    Raises:
        ValidationError: If quantities, prices, fee or VAT rate are invalid
    """
    totals = compute_order_totals(items, modifiers)
    logger.info(
        "Order quoted",
        item_count=len(items),
        is_express=modifiers.is_express,
        grand_total=str(totals.rounded().grand_total),
    )
    return totals


class OrderService:
    """
    Order service for pricing and status changes.

    Attributes:
        catalog: Catalog provider used to resolve product and stain prices
        shop_config: Provider of VAT rate and express fee
        workflow: Status workflow enforcing legal transitions
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        shop_config: Optional[ShopConfigProvider] = None,
        workflow: Optional[StatusWorkflow] = None,
    ):
        self.catalog = catalog
        self.shop_config = shop_config or SettingsShopConfig()
        self.workflow = workflow or StatusWorkflow()

    def build_line_items(self, selections: Sequence[ItemSelection]) -> list[LineItem]:
        """
        Resolve item selections into priced line items.

        Args:
            selections: Items picked on the order form

        Returns:
            Line items carrying catalog price, stain surcharge and overrides

        Raises:
            CatalogLookupError: If a product or stain type is unknown
        """
        items = []
        for selection in selections:
            surcharge = ZERO
            if selection.stain_type_id is not None:
                surcharge = self.catalog.get_stain_surcharge(selection.stain_type_id)

            items.append(
                LineItem(
                    product_reference_price=self.catalog.get_product_price(
                        selection.product_id
                    ),
                    custom_price=selection.custom_price,
                    stain_surcharge=surcharge,
                    quantity=selection.quantity,
                    note=selection.note,
                    product_id=selection.product_id,
                    stain_type_id=selection.stain_type_id,
                    description=self.catalog.get_product_name(selection.product_id),
                )
            )
        return items

    def build_modifiers(self, is_express: bool = False) -> OrderModifiers:
        return OrderModifiers(
            is_express=is_express,
            express_fee=self.shop_config.get_express_fee(),
            vat_rate_percent=self.shop_config.get_vat_rate_percent(),
        )

    def quote(
        self, selections: Sequence[ItemSelection], is_express: bool = False
    ) -> OrderTotals:
        """
        Price an order as entered on the create or edit form.

        Raises:
            CatalogLookupError: If a product or stain type is unknown
            ValidationError: If quantities or prices are invalid
        """
        items = self.build_line_items(selections)
        return price_order(items, self.build_modifiers(is_express))

    def change_status(
        self,
        current: OrderStatus,
        target: OrderStatus,
        order_id: Optional[str] = None,
    ) -> OrderStatus:
        """
        Validate a status change requested by a staff member.

        Returns the status the caller should persist. Nothing is written.

        Raises:
            InvalidTransitionError: If the statuses are not adjacent
        """
        with order_context(order_id):
            new_status = self.workflow.validate_transition(current, target)
            logger.info(
                "Order status change accepted",
                transition=f"{current.value}->{new_status.value}",
            )
        return new_status

    def advance_status(
        self, current: OrderStatus, order_id: Optional[str] = None
    ) -> OrderStatus:
        """Validate the "move to next status" action and return the new status."""
        with order_context(order_id):
            new_status = self.workflow.advance(current)
            logger.info(
                "Order status advanced",
                transition=f"{current.value}->{new_status.value}",
            )
        return new_status


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def summarize_orders(
    orders: Iterable[OrderSnapshot], since: Optional[datetime] = None
) -> OrderSummary:
    """
    Aggregate order snapshots into dashboard figures.

    Revenue is the sum of each order's grand total rounded to the minor
    unit, the amount the customer is actually charged. With ``since`` set,
    only orders created at or after that moment count toward revenue.
    Naive datetimes on either side are read as UTC.

    Args:
        orders: Order snapshots to aggregate
        since: Optional lower bound on ``created_at`` for revenue

    Returns:
        OrderSummary with counts, items in process and revenue
    """
    by_status: Counter = Counter()
    items_processing = 0
    revenue = ZERO
    total = 0

    for order in orders:
        total += 1
        by_status[order.status] += 1

        if order.status is not OrderStatus.COMPLETED:
            items_processing += sum(item.quantity for item in order.items)

        if since is not None and (
            order.created_at is None or _as_utc(order.created_at) < _as_utc(since)
        ):
            continue
        revenue += compute_order_totals(order.items, order.modifiers).rounded().grand_total

    return OrderSummary(
        total_orders=total,
        orders_by_status={status: by_status.get(status, 0) for status in OrderStatus},
        items_processing=items_processing,
        revenue=revenue,
    )
