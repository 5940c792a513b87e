"""
Order pricing and status workflow API endpoints.

This module implements FastAPI router endpoints for quoting order totals,
listing the status workflow, checking proposed status transitions and
building receipt data. Every endpoint delegates to the pricing engine and
status workflow; nothing is persisted here.
"""

from fastapi import APIRouter, HTTPException, status

from laundra.api.deps import AppSettings, StaffUser, Workflow, build_modifiers
from laundra.core.logging import get_logger, order_context
from laundra.schemas.orders import (
    NextStatusResponse,
    OrderTotalsResponse,
    QuoteRequest,
    ReceiptRequest,
    StatusInfo,
    StatusTransitionRequest,
    StatusTransitionResponse,
)
from laundra.services.orders.enums import STATUS_SEQUENCE, OrderStatus
from laundra.services.orders.receipt import StoreDetails, build_receipt
from laundra.services.orders.workflow import InvalidTransitionError, next_status
from laundra.services.orders.service import price_order
from laundra.services.pricing import PricingError

logger = get_logger(__name__)

router = APIRouter(tags=["orders"])


def _pricing_error_response(e: PricingError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "error": "Pricing Validation Error",
            "message": str(e),
            "field": e.context.get("field"),
        },
    )


@router.post(
    "/quote",
    response_model=OrderTotalsResponse,
    status_code=status.HTTP_200_OK,
    summary="Quote order totals",
    description="Compute items subtotal, express fee, VAT and grand total for an order",
)
async def quote_order(
    request: QuoteRequest,
    settings: AppSettings,
    staff_user: StaffUser,
) -> OrderTotalsResponse:
    """
    Quote order totals.

    Args:
        request: Line items and order modifiers
        settings: Application settings (default fee and VAT rate)
        staff_user: Calling staff member, if known

    Returns:
        Totals rounded to the currency minor unit

    Raises:
        HTTPException: 422 if a price, quantity, fee or VAT rate is invalid
    """
    try:
        modifiers = build_modifiers(
            settings,
            is_express=request.is_express,
            express_fee=request.express_fee,
            vat_rate_percent=request.vat_rate_percent,
        )
        totals = price_order([item.to_line_item() for item in request.items], modifiers)
    except PricingError as e:
        logger.warning(
            "Order quote rejected",
            error=str(e),
            error_context=e.context,
        )
        raise _pricing_error_response(e) from e

    return OrderTotalsResponse.from_totals(totals, settings.currency)


@router.get(
    "/statuses",
    response_model=list[StatusInfo],
    summary="List order statuses",
    description="Ordered status workflow from intake to completion",
)
async def list_statuses() -> list[StatusInfo]:
    return [
        StatusInfo(
            value=order_status,
            position=order_status.position,
            display_name=order_status.display_name,
            is_terminal=order_status.is_terminal(),
            next=next_status(order_status),
        )
        for order_status in STATUS_SEQUENCE
    ]


@router.get(
    "/statuses/{current_status}/next",
    response_model=NextStatusResponse,
    summary="Get next status",
)
async def get_next_status(current_status: OrderStatus) -> NextStatusResponse:
    """Return the forward neighbour of a status, or null when terminal."""
    return NextStatusResponse(
        current_status=current_status,
        next_status=next_status(current_status),
    )


@router.post(
    "/status-transitions",
    response_model=StatusTransitionResponse,
    status_code=status.HTTP_200_OK,
    summary="Check status transition",
    description="Validate a proposed order status change against the workflow",
)
async def check_status_transition(
    request: StatusTransitionRequest,
    workflow: Workflow,
    staff_user: StaffUser,
) -> StatusTransitionResponse:
    """
    Check a proposed status transition.

    Args:
        request: Current and target status
        workflow: Status workflow
        staff_user: Calling staff member, if known

    Returns:
        Transition verdict with the statuses reachable from the current one

    Raises:
        HTTPException: 409 if the transition is not allowed
    """
    allowed = sorted(
        workflow.allowed_transitions(request.current_status),
        key=lambda s: s.position,
    )
    try:
        workflow.validate_transition(request.current_status, request.target_status)
    except InvalidTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "Invalid Status Transition",
                "message": str(e),
                "current_status": e.current_status.value,
                "target_status": e.target_status.value if e.target_status else None,
                "allowed_transitions": e.allowed_transitions,
            },
        ) from e

    logger.info(
        "Status transition allowed",
        transition=f"{request.current_status.value}->{request.target_status.value}",
    )

    return StatusTransitionResponse(
        allowed=True,
        current_status=request.current_status,
        target_status=request.target_status,
        allowed_transitions=allowed,
    )


@router.post(
    "/receipt",
    response_model=dict,
    summary="Build receipt data",
    description="Receipt values for an order, using the configured store details",
)
async def build_order_receipt(
    request: ReceiptRequest,
    settings: AppSettings,
) -> dict:
    """
    Build receipt data.

    Raises:
        HTTPException: 422 if a price, quantity, fee or VAT rate is invalid
    """
    try:
        with order_context(request.order_number):
            receipt = build_receipt(
                order_number=request.order_number,
                status=request.status,
                items=[item.to_line_item() for item in request.items],
                modifiers=build_modifiers(
                    settings,
                    is_express=request.is_express,
                    express_fee=request.express_fee,
                    vat_rate_percent=request.vat_rate_percent,
                ),
                store=StoreDetails.from_settings(settings),
                currency=settings.currency,
            )
            logger.info(
                "Receipt built",
                line_count=len(receipt.lines),
                grand_total=str(receipt.grand_total),
            )
    except PricingError as e:
        logger.warning(
            "Receipt rejected",
            order_number=request.order_number,
            error=str(e),
            error_context=e.context,
        )
        raise _pricing_error_response(e) from e

    return receipt.as_dict()
