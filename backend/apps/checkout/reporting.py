from __future__ import annotations

import sys
from decimal import Decimal
from typing import Optional, TextIO

from django.utils.translation import gettext as _

from apps.shipping.dtos import ShipmentManifestDTO
from .dtos import CheckoutResultDTO

LABEL_WIDTH = 20
VALUE_WIDTH = 10
RULE = "-" * (LABEL_WIDTH + VALUE_WIDTH)


class ConsoleCheckoutReporter:
    """Renders checkout results as the plain-text transaction report."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def report_empty(self, result: CheckoutResultDTO) -> None:
        self._write(_("Cart is empty."))
        self._write()

    def report_rejected(self, result: CheckoutResultDTO) -> None:
        message = result.error.message if result.error else _("Unknown error")
        self._write(_("Checkout failed: %(message)s") % {"message": message})
        self._write()

    def report_shipment(self, manifest: ShipmentManifestDTO) -> None:
        self._write(_("** Shipment notice **"))
        for line in manifest.lines:
            self._write(f"{line.name:<{LABEL_WIDTH}}{line.weight_grams:>{VALUE_WIDTH}.1f}g")
        self._write(
            _("Total package weight %(weight)skg")
            % {"weight": f"{manifest.total_weight_kg:.1f}"}
        )
        self._write()

    def report_receipt(self, result: CheckoutResultDTO) -> None:
        quote = result.quote
        self._write(_("** Checkout receipt **"))
        for line in quote.lines:
            self._row(f"{line.quantity}x {line.name}", line.line_total)
        self._write(RULE)
        self._row(_("Subtotal"), quote.subtotal)
        self._row(_("Shipping"), quote.shipping_fee)
        self._row(_("Amount"), quote.total)
        self._row(_("Balance"), result.remaining_balance)
        self._write()

    def _row(self, label: str, amount: Decimal) -> None:
        self._write(f"{label:<{LABEL_WIDTH}}{amount:>{VALUE_WIDTH}.2f}")

    def _write(self, text: str = "") -> None:
        self.stream.write(f"{text}\n")
