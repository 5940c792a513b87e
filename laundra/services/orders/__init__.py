"""Order status workflow, order service and receipt data."""

from laundra.services.orders.enums import INITIAL_STATUS, STATUS_SEQUENCE, OrderStatus
from laundra.services.orders.workflow import (
    InvalidTransitionError,
    StatusWorkflow,
    can_transition,
    get_allowed_transitions,
    next_status,
    previous_status,
)

__all__ = [
    "INITIAL_STATUS",
    "STATUS_SEQUENCE",
    "InvalidTransitionError",
    "OrderStatus",
    "StatusWorkflow",
    "can_transition",
    "get_allowed_transitions",
    "next_status",
    "previous_status",
]
