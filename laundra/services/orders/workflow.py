"""Order status workflow with transition validation.

A transition between two statuses is legal when they are neighbours in the
linear status sequence: one step forward, or one step back when rollback is
allowed. The workflow only judges legality. Persisting a new status is the
job of whoever owns the order record.
"""

from typing import Any, Optional, Set

from laundra.core.config import get_settings
from laundra.core.logging import get_logger
from laundra.services.orders.enums import OrderStatus, status_at

logger = get_logger(__name__)


class InvalidTransitionError(Exception):
    """Raised when a status transition is not adjacent in the workflow."""

    def __init__(
        self,
        message: str,
        current_status: OrderStatus,
        target_status: Optional[OrderStatus],
        **context: Any
    ):
        super().__init__(message)
        self.current_status = current_status
        self.target_status = target_status
        self.allowed_transitions = context.pop("allowed_transitions", [])
        self.context = context


def next_status(current: OrderStatus) -> Optional[OrderStatus]:
    """Forward neighbour of ``current``, or None when it is terminal."""
    return status_at(current.position + 1)


def previous_status(current: OrderStatus) -> Optional[OrderStatus]:
    """Backward neighbour of ``current``, or None when it is initial."""
    return status_at(current.position - 1)


def can_transition(
    current: OrderStatus,
    target: OrderStatus,
    allow_rollback: bool = True,
) -> bool:
    """Check whether moving from ``current`` to ``target`` is legal.

    Args:
        current: Current order status
        target: Desired status
        allow_rollback: Also accept a one-step move backwards

    Returns:
        True if the statuses are adjacent in the permitted direction
    """
    step = target.position - current.position
    if allow_rollback:
        return abs(step) == 1
    return step == 1


def get_allowed_transitions(
    current: OrderStatus,
    allow_rollback: bool = True,
) -> Set[OrderStatus]:
    """Get all statuses reachable from ``current`` in one transition."""
    return {
        status
        for status in OrderStatus
        if can_transition(current, status, allow_rollback=allow_rollback)
    }


def _ordered_values(statuses: Set[OrderStatus]) -> list[str]:
    return [s.value for s in sorted(statuses, key=lambda s: s.position)]


class StatusWorkflow:
    """Status workflow that turns illegal transitions into errors.

    Symmetric by default, so COMPLETED -> READY is accepted. Pass
    ``allow_rollback=False`` (or set ``APP_ALLOW_STATUS_ROLLBACK=false``)
    for forward-only progress.
    """

    def __init__(self, allow_rollback: Optional[bool] = None):
        if allow_rollback is None:
            allow_rollback = get_settings().allow_status_rollback
        self.allow_rollback = allow_rollback

    def can_transition(self, current: OrderStatus, target: OrderStatus) -> bool:
        return can_transition(current, target, allow_rollback=self.allow_rollback)

    def allowed_transitions(self, current: OrderStatus) -> Set[OrderStatus]:
        return get_allowed_transitions(current, allow_rollback=self.allow_rollback)

    def validate_transition(
        self, current: OrderStatus, target: OrderStatus
    ) -> OrderStatus:
        """Validate a transition and return the target status.

        Args:
            current: Current order status
            target: Desired target status

        Returns:
            The target status

        Raises:
            InvalidTransitionError: If the transition is not legal
        """
        if not self.can_transition(current, target):
            logger.warning(
                "Rejected status transition",
                current_status=current.value,
                target_status=target.value,
                allow_rollback=self.allow_rollback,
            )
            raise InvalidTransitionError(
                f"Invalid transition from {current.value} to {target.value}",
                current_status=current,
                target_status=target,
                allowed_transitions=_ordered_values(self.allowed_transitions(current)),
                allow_rollback=self.allow_rollback,
            )

        return target

    def advance(self, current: OrderStatus) -> OrderStatus:
        """Validate and return the forward neighbour of ``current``.

        Raises:
            InvalidTransitionError: If ``current`` is terminal
        """
        target = next_status(current)
        if target is None:
            raise InvalidTransitionError(
                f"Order in {current.value} status cannot advance further",
                current_status=current,
                target_status=None,
                allowed_transitions=_ordered_values(self.allowed_transitions(current)),
            )
        return self.validate_transition(current, target)
