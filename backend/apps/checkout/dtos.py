from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from apps.carts.domain import ShippableUnit
from apps.shipping.dtos import ShipmentManifestDTO


class CheckoutState(str, Enum):
    EMPTY = "empty"
    VALIDATING = "validating"
    PAYING = "paying"
    SHIPPING = "shipping"
    SETTLED = "settled"
    REJECTED = "rejected"


@dataclass
class ReceiptLineDTO:
    name: str
    quantity: int
    line_total: Decimal


@dataclass
class CheckoutQuoteDTO:
    lines: List[ReceiptLineDTO]
    subtotal: Decimal
    shipping_fee: Decimal
    total: Decimal
    shippable_units: List[ShippableUnit] = field(default_factory=list)

    @property
    def requires_shipment(self) -> bool:
        return bool(self.shippable_units)


@dataclass
class CheckoutErrorDTO:
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


@dataclass
class CheckoutResultDTO:
    state: CheckoutState
    customer_name: str
    quote: Optional[CheckoutQuoteDTO] = None
    manifest: Optional[ShipmentManifestDTO] = None
    remaining_balance: Optional[Decimal] = None
    error: Optional[CheckoutErrorDTO] = None
    failed_at: Optional[CheckoutState] = None

    @property
    def settled(self) -> bool:
        return self.state is CheckoutState.SETTLED
