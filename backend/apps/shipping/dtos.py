from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass
class ShipmentLineDTO:
    name: str
    weight_grams: Decimal


@dataclass
class ShipmentManifestDTO:
    lines: List[ShipmentLineDTO] = field(default_factory=list)
    total_weight_kg: Decimal = Decimal("0")
