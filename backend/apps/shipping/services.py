from __future__ import annotations

import math
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Optional, Sequence

from django.conf import settings

from apps.carts.domain import ShippableUnit
from apps.common import get_logger
from apps.common.amounts import ZERO, Amount, to_decimal
from .dtos import ShipmentLineDTO, ShipmentManifestDTO

logger = get_logger(__name__).bind(component="shipping", layer="service")

GRAMS_PER_KG = Decimal("1000")
DEFAULT_RATE_PER_KG = 30


class ShippingService:
    def __init__(self, rate_per_kg: Optional[Amount] = None):
        if rate_per_kg is None:
            rate_per_kg = getattr(settings, "SHIPPING_RATE_PER_KG", DEFAULT_RATE_PER_KG)
        self.rate_per_kg = to_decimal(rate_per_kg)
        self.logger = logger.bind(service="ShippingService")

    @staticmethod
    def total_weight(items: Sequence[ShippableUnit]) -> Decimal:
        return sum((item.weight for item in items), ZERO)

    def calculate_fee(self, items: Sequence[ShippableUnit]) -> Decimal:
        """Fee is the total weight times the rate, rounded up to a whole unit."""
        if not items:
            return ZERO
        weight = self.total_weight(items)
        fee = Decimal(math.ceil(weight * self.rate_per_kg))
        self.logger.debug(
            "Calculated shipping fee",
            units=len(items),
            weight_kg=weight,
            fee=fee,
        )
        return fee

    def ship(self, items: Sequence[ShippableUnit]) -> ShipmentManifestDTO:
        weights: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        for item in items:
            weights[item.name] += item.weight
        lines = [
            ShipmentLineDTO(name=name, weight_grams=weights[name] * GRAMS_PER_KG)
            for name in sorted(weights)
        ]
        manifest = ShipmentManifestDTO(
            lines=lines, total_weight_kg=sum(weights.values(), ZERO)
        )
        self.logger.info(
            "Shipment manifest prepared",
            packages=len(lines),
            total_weight_kg=manifest.total_weight_kg,
        )
        return manifest
