from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Protocol, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.carts.domain import CartLine, ShippableUnit
    from apps.common.exceptions import DomainError
    from apps.shipping.dtos import ShipmentManifestDTO

    from .dtos import CheckoutErrorDTO, CheckoutResultDTO, ReceiptLineDTO


class ShippingServiceProtocol(Protocol):
    def calculate_fee(self, items: Sequence["ShippableUnit"]) -> Decimal:
        ...

    def ship(self, items: Sequence["ShippableUnit"]) -> "ShipmentManifestDTO":
        ...


class ReceiptMapperProtocol(Protocol):
    def many_to_dto(self, lines: Iterable["CartLine"]) -> List["ReceiptLineDTO"]:
        ...


class CheckoutErrorMapperProtocol(Protocol):
    def to_dto(self, exc: "DomainError") -> "CheckoutErrorDTO":
        ...


class CheckoutReporterProtocol(Protocol):
    def report_empty(self, result: "CheckoutResultDTO") -> None:
        ...

    def report_rejected(self, result: "CheckoutResultDTO") -> None:
        ...

    def report_shipment(self, manifest: "ShipmentManifestDTO") -> None:
        ...

    def report_receipt(self, result: "CheckoutResultDTO") -> None:
        ...
