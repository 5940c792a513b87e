"""
FastAPI dependencies for settings, pricing inputs and the status workflow.

Authentication is handled by the shop's identity provider in front of this
service; the only identity used here is the optional ``X-User-ID`` header,
bound to the logging context for correlation.
"""

from decimal import Decimal
from typing import Annotated, Optional

from fastapi import Depends, Header

from laundra.core.config import Settings, get_settings
from laundra.core.logging import set_user_id
from laundra.services.orders.workflow import StatusWorkflow
from laundra.services.pricing import OrderModifiers

AppSettings = Annotated[Settings, Depends(get_settings)]


def get_status_workflow(settings: AppSettings) -> StatusWorkflow:
    """
    Dependency to create the status workflow from settings.

    Args:
        settings: Application settings

    Returns:
        StatusWorkflow honoring the configured rollback policy
    """
    return StatusWorkflow(allow_rollback=settings.allow_status_rollback)


def bind_staff_user(
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    """Bind the calling staff user to the logging context."""
    if x_user_id:
        set_user_id(x_user_id)
    return x_user_id


def build_modifiers(
    settings: Settings,
    is_express: bool,
    express_fee: Optional[Decimal] = None,
    vat_rate_percent: Optional[Decimal] = None,
) -> OrderModifiers:
    """
    Build order modifiers, falling back to configured fee and VAT rate.

    Args:
        settings: Application settings
        is_express: Express service requested
        express_fee: Explicit express fee, or None for the configured fee
        vat_rate_percent: Explicit VAT rate, or None for the configured rate

    Returns:
        OrderModifiers for the pricing engine
    """
    return OrderModifiers(
        is_express=is_express,
        express_fee=settings.express_fee if express_fee is None else express_fee,
        vat_rate_percent=(
            settings.default_vat_rate_percent
            if vat_rate_percent is None
            else vat_rate_percent
        ),
    )


Workflow = Annotated[StatusWorkflow, Depends(get_status_workflow)]
StaffUser = Annotated[Optional[str], Depends(bind_staff_user)]
