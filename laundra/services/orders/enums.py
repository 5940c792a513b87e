"""Order status enum for the shop's order lifecycle.

Orders move through a strictly linear sequence:

    CLEANING -> READY -> COMPLETED

CLEANING is the status every new order starts in and COMPLETED is terminal.
"""

from enum import Enum
from typing import Optional, Tuple


class OrderStatus(str, Enum):
    """Order lifecycle status.

    Position in ``STATUS_SEQUENCE`` defines which transitions are legal; see
    ``laundra.services.orders.workflow``.
    """

    CLEANING = "cleaning"
    READY = "ready"
    COMPLETED = "completed"

    @classmethod
    def from_string(cls, value: str) -> "OrderStatus":
        """Convert string to OrderStatus enum.

        Matching is case-insensitive and tolerates surrounding whitespace,
        spaces and hyphens ("Cleaning", " READY ").

        Args:
            value: String representation of status

        Returns:
            OrderStatus enum value

        Raises:
            ValueError: If value is not a valid status
        """
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            valid_values = ", ".join([s.value for s in cls])
            raise ValueError(
                f"Invalid order status: {value}. "
                f"Valid values are: {valid_values}"
            ) from None

    @property
    def position(self) -> int:
        """Position of the status in the workflow sequence."""
        return STATUS_SEQUENCE.index(self)

    def is_initial(self) -> bool:
        return self is INITIAL_STATUS

    def is_terminal(self) -> bool:
        """Check if status is the terminal state (COMPLETED)."""
        return self is STATUS_SEQUENCE[-1]

    @property
    def display_name(self) -> str:
        """Get human-readable display name for status."""
        return self.value.replace("_", " ").title()


STATUS_SEQUENCE: Tuple[OrderStatus, ...] = (
    OrderStatus.CLEANING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
)

INITIAL_STATUS = OrderStatus.CLEANING


def status_at(index: int) -> Optional[OrderStatus]:
    """Return the status at a sequence position, or None when out of range."""
    if 0 <= index < len(STATUS_SEQUENCE):
        return STATUS_SEQUENCE[index]
    return None
