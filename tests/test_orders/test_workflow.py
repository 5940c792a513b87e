"""
Test suite for the order status workflow.

Tests cover the status sequence, adjacency-based transition rules in both
symmetric and forward-only modes, next/previous status lookup, and the
errors raised for illegal transitions.
"""

import pytest

from laundra.services.orders.enums import (
    INITIAL_STATUS,
    STATUS_SEQUENCE,
    OrderStatus,
)
from laundra.services.orders.workflow import (
    InvalidTransitionError,
    StatusWorkflow,
    can_transition,
    get_allowed_transitions,
    next_status,
    previous_status,
)


# ============================================================================
# Enum Tests
# ============================================================================


class TestOrderStatus:
    """Test OrderStatus enum behaviour."""

    def test_sequence_is_linear_three_states(self):
        assert STATUS_SEQUENCE == (
            OrderStatus.CLEANING,
            OrderStatus.READY,
            OrderStatus.COMPLETED,
        )
        assert [s.position for s in STATUS_SEQUENCE] == [0, 1, 2]

    def test_initial_and_terminal(self):
        assert INITIAL_STATUS is OrderStatus.CLEANING
        assert OrderStatus.CLEANING.is_initial()
        assert OrderStatus.COMPLETED.is_terminal()
        assert not OrderStatus.READY.is_terminal()

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("cleaning", OrderStatus.CLEANING),
            ("Ready", OrderStatus.READY),
            (" COMPLETED ", OrderStatus.COMPLETED),
        ],
    )
    def test_from_string(self, raw, expected):
        assert OrderStatus.from_string(raw) is expected

    @pytest.mark.parametrize("legacy", ["new", "picked-up", "Picked Up"])
    def test_legacy_statuses_rejected(self, legacy):
        with pytest.raises(ValueError) as exc_info:
            OrderStatus.from_string(legacy)

        assert "cleaning, ready, completed" in str(exc_info.value)

    def test_display_name(self):
        assert OrderStatus.READY.display_name == "Ready"

    def test_is_str_enum(self):
        assert OrderStatus.READY == "ready"


# ============================================================================
# Transition Predicate Tests
# ============================================================================


class TestCanTransition:
    """Test adjacency rule."""

    def test_forward_step_allowed(self):
        assert can_transition(OrderStatus.CLEANING, OrderStatus.READY) is True
        assert can_transition(OrderStatus.READY, OrderStatus.COMPLETED) is True

    def test_jump_not_allowed(self):
        assert can_transition(OrderStatus.CLEANING, OrderStatus.COMPLETED) is False
        assert can_transition(OrderStatus.COMPLETED, OrderStatus.CLEANING) is False

    def test_rollback_allowed_by_default(self):
        assert can_transition(OrderStatus.READY, OrderStatus.CLEANING) is True
        assert can_transition(OrderStatus.COMPLETED, OrderStatus.READY) is True

    @pytest.mark.parametrize("order_status", list(OrderStatus))
    def test_same_status_not_a_transition(self, order_status):
        assert can_transition(order_status, order_status) is False

    def test_forward_only_mode_rejects_rollback(self):
        assert (
            can_transition(OrderStatus.READY, OrderStatus.CLEANING, allow_rollback=False)
            is False
        )
        assert (
            can_transition(OrderStatus.CLEANING, OrderStatus.READY, allow_rollback=False)
            is True
        )

    @pytest.mark.parametrize("current", list(OrderStatus))
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_symmetric(self, current, target):
        assert can_transition(current, target) == can_transition(target, current)

    def test_allowed_transitions(self):
        assert get_allowed_transitions(OrderStatus.READY) == {
            OrderStatus.CLEANING,
            OrderStatus.COMPLETED,
        }
        assert get_allowed_transitions(OrderStatus.COMPLETED, allow_rollback=False) == set()


class TestNeighbours:
    def test_next_status(self):
        assert next_status(OrderStatus.CLEANING) is OrderStatus.READY
        assert next_status(OrderStatus.READY) is OrderStatus.COMPLETED

    def test_next_status_of_terminal_is_none(self):
        assert next_status(OrderStatus.COMPLETED) is None

    def test_previous_status(self):
        assert previous_status(OrderStatus.COMPLETED) is OrderStatus.READY
        assert previous_status(OrderStatus.CLEANING) is None


# ============================================================================
# StatusWorkflow Tests
# ============================================================================


class TestStatusWorkflow:
    """Test the enforcing workflow wrapper."""

    @pytest.fixture
    def workflow(self) -> StatusWorkflow:
        return StatusWorkflow(allow_rollback=True)

    @pytest.fixture
    def forward_only(self) -> StatusWorkflow:
        return StatusWorkflow(allow_rollback=False)

    def test_defaults_to_settings(self):
        assert StatusWorkflow().allow_rollback is True

    def test_validate_returns_target(self, workflow):
        assert (
            workflow.validate_transition(OrderStatus.CLEANING, OrderStatus.READY)
            is OrderStatus.READY
        )

    def test_validate_rejects_jump_naming_pair(self, workflow):
        with pytest.raises(InvalidTransitionError) as exc_info:
            workflow.validate_transition(OrderStatus.CLEANING, OrderStatus.COMPLETED)

        error = exc_info.value
        assert error.current_status is OrderStatus.CLEANING
        assert error.target_status is OrderStatus.COMPLETED
        assert error.allowed_transitions == ["ready"]
        assert "cleaning" in str(error) and "completed" in str(error)

    def test_forward_only_rejects_rollback(self, forward_only):
        with pytest.raises(InvalidTransitionError) as exc_info:
            forward_only.validate_transition(OrderStatus.COMPLETED, OrderStatus.READY)

        assert exc_info.value.allowed_transitions == []
        assert exc_info.value.context["allow_rollback"] is False

    def test_symmetric_allows_completed_rollback(self, workflow):
        assert (
            workflow.validate_transition(OrderStatus.COMPLETED, OrderStatus.READY)
            is OrderStatus.READY
        )

    def test_advance(self, workflow):
        assert workflow.advance(OrderStatus.CLEANING) is OrderStatus.READY
        assert workflow.advance(OrderStatus.READY) is OrderStatus.COMPLETED

    def test_advance_from_terminal_raises(self, workflow):
        with pytest.raises(InvalidTransitionError) as exc_info:
            workflow.advance(OrderStatus.COMPLETED)

        assert exc_info.value.target_status is None
        assert exc_info.value.allowed_transitions == ["ready"]

    def test_workflow_does_not_mutate_input(self, workflow):
        current = OrderStatus.CLEANING

        workflow.advance(current)

        assert current is OrderStatus.CLEANING
