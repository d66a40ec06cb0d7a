from __future__ import annotations

from decimal import Decimal

from django.utils.translation import gettext as _

from apps.common.amounts import ZERO, Amount, to_decimal
from apps.common.exceptions import InsufficientFundsError, ValidationError


class Customer:
    def __init__(self, name: str, balance: Amount):
        balance = to_decimal(balance)
        if balance < ZERO:
            raise ValidationError(
                _("Balance must not be negative"), details={"customer": name}
            )
        self.name = name
        self._balance = balance

    @property
    def balance(self) -> Decimal:
        return self._balance

    def can_afford(self, amount: Amount) -> bool:
        return self._balance >= to_decimal(amount)

    def deduct(self, amount: Amount) -> Decimal:
        """Subtract ``amount`` from the balance and return what is left."""
        amount = to_decimal(amount)
        if not self.can_afford(amount):
            raise InsufficientFundsError(
                _("Insufficient balance"),
                details={
                    "customer": self.name,
                    "balance": str(self._balance),
                    "required": str(amount),
                },
            )
        self._balance -= amount
        return self._balance

    def __repr__(self) -> str:
        return f"Customer(name={self.name!r}, balance={self._balance})"


__all__ = ["Customer"]
