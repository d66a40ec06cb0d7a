from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from django.utils import timezone
from django.utils.translation import gettext as _

from apps.common.amounts import ZERO, Amount, to_decimal
from apps.common.exceptions import ValidationError


class ProductKind(str, Enum):
    DIGITAL = "digital"
    PHYSICAL = "physical"


class Product:
    """
    A stock-tracked catalog entry.

    Digital products never ship, never expire and weigh nothing. Physical
    products always ship, carry a weight in kg and may expire. Use the
    ``digital`` / ``physical`` constructors rather than passing ``kind``.
    """

    def __init__(
        self,
        name: str,
        price: Amount,
        quantity: int,
        *,
        kind: ProductKind = ProductKind.PHYSICAL,
        weight: Amount = 0,
        expires_at: Optional[datetime] = None,
    ):
        price = to_decimal(price)
        weight = to_decimal(weight)
        if price < ZERO:
            raise ValidationError(
                _("Price must not be negative"), details={"product": name}
            )
        if quantity < 0:
            raise ValidationError(
                _("Quantity must not be negative"), details={"product": name}
            )
        if weight < ZERO:
            raise ValidationError(
                _("Weight must not be negative"), details={"product": name}
            )
        self.name = name
        self.price = price
        self.quantity = int(quantity)
        self.kind = ProductKind(kind)
        if self.kind is ProductKind.DIGITAL:
            weight, expires_at = ZERO, None
        self.weight = weight
        if expires_at is not None and timezone.is_naive(expires_at):
            # Naive timestamps are read in the project time zone
            expires_at = timezone.make_aware(expires_at)
        self.expires_at = expires_at

    @classmethod
    def digital(cls, name: str, price: Amount, quantity: int) -> "Product":
        return cls(name, price, quantity, kind=ProductKind.DIGITAL)

    @classmethod
    def physical(
        cls,
        name: str,
        price: Amount,
        quantity: int,
        weight: Amount,
        expires_at: Optional[datetime] = None,
    ) -> "Product":
        return cls(
            name,
            price,
            quantity,
            kind=ProductKind.PHYSICAL,
            weight=weight,
            expires_at=expires_at,
        )

    def is_available(self, requested: int) -> bool:
        return self.quantity >= requested

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or timezone.now()
        if timezone.is_naive(now):
            now = timezone.make_aware(now)
        return now > self.expires_at

    def requires_shipping(self) -> bool:
        return self.kind is ProductKind.PHYSICAL

    def get_weight(self) -> Decimal:
        return self.weight

    def reduce_quantity(self, amount: int) -> None:
        # Callers settle only quantities validated against this stock
        self.quantity -= amount

    def __repr__(self) -> str:
        return (
            f"Product(name={self.name!r}, kind={self.kind.value}, "
            f"price={self.price}, quantity={self.quantity})"
        )


__all__ = ["Product", "ProductKind"]
