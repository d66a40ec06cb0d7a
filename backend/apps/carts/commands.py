from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional


@dataclass
class CartItemCommand:
    product_name: str
    quantity: int

    @staticmethod
    def from_raw(raw: Dict[str, Any]) -> Optional["CartItemCommand"]:
        if not isinstance(raw, dict):
            return None
        name = raw.get("product") or raw.get("product_name")
        if isinstance(name, dict):
            # nested product object fallback
            name = name.get("name")
        if not isinstance(name, str) or not name.strip():
            return None
        try:
            qty = int(raw.get("quantity", 0))
        except (ValueError, TypeError):
            return None
        # Non-positive quantities are kept so the cart can reject them itself
        return CartItemCommand(product_name=name.strip(), quantity=qty)

    @staticmethod
    def many_from_raw(raw_items: Iterable[Dict[str, Any]]) -> List["CartItemCommand"]:
        items: List[CartItemCommand] = []
        for r in raw_items or []:
            cmd = CartItemCommand.from_raw(r)
            if cmd:
                items.append(cmd)
        return items
