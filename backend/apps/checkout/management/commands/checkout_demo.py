from datetime import datetime, timedelta
from typing import Dict, Optional

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.carts.commands import CartItemCommand
from apps.carts.domain import Cart
from apps.catalog.domain import Product
from apps.checkout.container import build_checkout_service
from apps.checkout.reporting import ConsoleCheckoutReporter
from apps.common import get_logger
from apps.common.exceptions import DomainError
from apps.customers.domain import Customer

logger = get_logger(__name__).bind(component="checkout", layer="command")

# (name, price, quantity, weight_kg or None for digital, expiry offset in days or None)
PRODUCTS = [
    ("Cheese", 100, 10, "0.2", 30),
    ("Biscuits", 150, 5, "0.7", 30),
    ("TV", 500, 3, "3.5", None),
    ("Scratch Card", 25, 20, None, None),
    ("Expired Cheese", 80, 2, "0.2", -10),
]

CUSTOMER = ("Ahmed", 1000)

CART_ITEMS = [
    {"product": "Cheese", "quantity": 2},
    {"product": "Biscuits", "quantity": 1},
    {"product": "Scratch Card", "quantity": 1},
]


def build_catalog(now: Optional[datetime] = None) -> Dict[str, Product]:
    now = now or timezone.now()
    catalog: Dict[str, Product] = {}
    for name, price, quantity, weight, expiry_days in PRODUCTS:
        if weight is None:
            catalog[name] = Product.digital(name, price, quantity)
            continue
        expires_at = now + timedelta(days=expiry_days) if expiry_days is not None else None
        catalog[name] = Product.physical(name, price, quantity, weight, expires_at)
    return catalog


class Command(BaseCommand):
    help = "Run one checkout against the demo catalog and print the transaction report."

    def handle(self, *args, **options):
        catalog = build_catalog()
        customer = Customer(*CUSTOMER)
        cart = Cart()
        for item in CartItemCommand.many_from_raw(CART_ITEMS):
            product = catalog.get(item.product_name)
            if product is None:
                logger.warning("Skipping unknown product", product=item.product_name)
                continue
            try:
                cart.add_item(product, item.quantity)
            except DomainError as exc:
                logger.warning(
                    "Could not add item to cart",
                    product=item.product_name,
                    code=exc.code,
                )
                self.stdout.write(f"{item.product_name}: {exc.message}")
        service = build_checkout_service(reporter=ConsoleCheckoutReporter(self.stdout))
        service.checkout(customer, cart)
