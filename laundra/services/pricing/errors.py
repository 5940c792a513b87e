"""Exceptions raised by the pricing engine."""

from typing import Any


class PricingError(Exception):
    """Base exception for pricing calculation errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.context = context


class ValidationError(PricingError):
    """Raised when pricing input is malformed (negative price, bad quantity)."""

    @property
    def field(self) -> Any:
        return self.context.get("field")
