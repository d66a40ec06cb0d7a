from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from django.utils.translation import gettext as _

from apps.catalog.domain import Product
from apps.common.amounts import ZERO
from apps.common.exceptions import ExpiredError, OutOfStockError, ValidationError


@dataclass
class CartLine:
    product: Product
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass(frozen=True)
class ShippableUnit:
    """One physical unit of a purchased product, used to aggregate weight."""

    name: str
    weight: Decimal

    @classmethod
    def of(cls, product: Product) -> "ShippableUnit":
        return cls(name=product.name, weight=product.get_weight())


class Cart:
    """Ordered lines keyed by product identity. Stock is only touched at checkout."""

    def __init__(self) -> None:
        self._lines: List[CartLine] = []

    def add_item(self, product: Product, quantity: int) -> CartLine:
        if quantity <= 0:
            raise ValidationError(
                _("Quantity must be greater than zero"),
                details={"product": product.name, "quantity": quantity},
            )
        existing = self._find_line(product)
        in_cart = existing.quantity if existing is not None else 0
        if not product.is_available(in_cart + quantity):
            raise OutOfStockError(
                _("Requested quantity is not available"),
                details={
                    "product": product.name,
                    "requested": quantity,
                    "in_cart": in_cart,
                    "available": product.quantity,
                },
            )
        if product.is_expired():
            raise ExpiredError(
                _("Product has expired"), details={"product": product.name}
            )
        if existing is not None:
            existing.quantity += quantity
            return existing
        line = CartLine(product=product, quantity=quantity)
        self._lines.append(line)
        return line

    def get_items(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    def get_subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines), ZERO)

    def get_shippable_items(self) -> List[ShippableUnit]:
        units: List[ShippableUnit] = []
        for line in self._lines:
            if line.product.requires_shipping():
                units.extend([ShippableUnit.of(line.product)] * line.quantity)
        return units

    def is_empty(self) -> bool:
        return not self._lines

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)

    def _find_line(self, product: Product) -> Optional[CartLine]:
        for line in self._lines:
            if line.product is product:
                return line
        return None


__all__ = ["Cart", "CartLine", "ShippableUnit"]
