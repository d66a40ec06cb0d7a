from __future__ import annotations

from typing import Optional

from apps.shipping.services import ShippingService

from .mappers import CheckoutErrorMapper, ReceiptMapper
from .protocols import CheckoutReporterProtocol
from .services import CheckoutService


def build_checkout_service(
    reporter: Optional[CheckoutReporterProtocol] = None,
) -> CheckoutService:
    return CheckoutService(
        shipping=ShippingService(),
        receipt_mapper=ReceiptMapper(),
        error_mapper=CheckoutErrorMapper(),
        reporter=reporter,
    )
