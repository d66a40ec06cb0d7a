from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """
    Base class for every error raised by the checkout domain.

    Args:
        code: Machine readable error code.
        message: Human readable explanation of the error.
        details: Optional structured details (product name, amounts, ...).
    """

    default_code = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = str(message)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(DomainError):
    """Raised for malformed input such as a non-positive quantity."""

    default_code = "VALIDATION_ERROR"


class OutOfStockError(DomainError):
    """Raised when the requested quantity exceeds the available stock."""

    default_code = "OUT_OF_STOCK"


class ExpiredError(DomainError):
    """Raised when a product is past its expiration timestamp."""

    default_code = "PRODUCT_EXPIRED"


class InsufficientFundsError(DomainError):
    """Raised when a customer's balance is below the amount to deduct."""

    default_code = "INSUFFICIENT_FUNDS"


class EmptyCartError(DomainError):
    """Raised when a quote is requested for a cart without lines."""

    default_code = "EMPTY_CART"


__all__ = [
    "DomainError",
    "ValidationError",
    "OutOfStockError",
    "ExpiredError",
    "InsufficientFundsError",
    "EmptyCartError",
]
