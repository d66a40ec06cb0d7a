import unittest
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from apps.carts.domain import Cart
from apps.catalog.domain import Product
from apps.checkout.dtos import CheckoutState
from apps.checkout.mappers import CheckoutErrorMapper, ReceiptMapper
from apps.checkout.services import CheckoutService
from apps.common.exceptions import (
    EmptyCartError,
    InsufficientFundsError,
    OutOfStockError,
    ValidationError,
)
from apps.customers.domain import Customer
from apps.shipping.services import ShippingService


class RecordingReporter:
    def __init__(self):
        self.calls = []

    def report_empty(self, result):
        self.calls.append(("empty", result))

    def report_rejected(self, result):
        self.calls.append(("rejected", result))

    def report_shipment(self, manifest):
        self.calls.append(("shipment", manifest))

    def report_receipt(self, result):
        self.calls.append(("receipt", result))

    @property
    def kinds(self):
        return [kind for kind, _ in self.calls]


class CheckoutServiceTestCase(unittest.TestCase):
    def setUp(self):
        next_month = timezone.now() + timedelta(days=30)
        self.cheese = Product.physical("Cheese", 100, 10, "0.2", expires_at=next_month)
        self.biscuits = Product.physical("Biscuits", 150, 5, "0.7", expires_at=next_month)
        self.card = Product.digital("Scratch Card", 25, 20)
        self.customer = Customer("Ahmed", 1000)
        self.cart = Cart()
        self.reporter = RecordingReporter()
        self.service = CheckoutService(
            shipping=ShippingService(rate_per_kg=30),
            receipt_mapper=ReceiptMapper(),
            error_mapper=CheckoutErrorMapper(),
            reporter=self.reporter,
        )

    def fill_demo_cart(self):
        self.cart.add_item(self.cheese, 2)
        self.cart.add_item(self.biscuits, 1)
        self.cart.add_item(self.card, 1)


class CheckoutQuoteTests(CheckoutServiceTestCase):
    def test_quote_computes_totals_without_mutation(self):
        self.fill_demo_cart()
        quote = self.service.quote(self.cart)
        self.assertEqual(quote.subtotal, Decimal("375"))
        self.assertEqual(quote.shipping_fee, Decimal("33"))
        self.assertEqual(quote.total, Decimal("408"))
        self.assertEqual(len(quote.shippable_units), 3)
        self.assertEqual(
            [(l.quantity, l.name, l.line_total) for l in quote.lines],
            [
                (2, "Cheese", Decimal("200")),
                (1, "Biscuits", Decimal("150")),
                (1, "Scratch Card", Decimal("25")),
            ],
        )
        self.assertEqual(self.customer.balance, Decimal("1000"))
        self.assertEqual(self.cheese.quantity, 10)
        self.assertEqual(len(self.cart), 3)

    def test_quote_for_digital_only_cart_has_no_fee(self):
        self.cart.add_item(self.card, 2)
        quote = self.service.quote(self.cart)
        self.assertEqual(quote.shipping_fee, Decimal("0"))
        self.assertFalse(quote.requires_shipment)

    def test_quote_rejects_empty_cart(self):
        with self.assertRaises(EmptyCartError):
            self.service.quote(self.cart)


class CheckoutSettleTests(CheckoutServiceTestCase):
    def test_settle_refuses_cart_changed_after_quote(self):
        self.cart.add_item(self.cheese, 1)
        quote = self.service.quote(self.cart)
        self.cart.add_item(self.cheese, 1)
        with self.assertRaises(ValidationError):
            self.service.settle(self.customer, self.cart, quote)
        self.assertEqual(self.customer.balance, Decimal("1000"))
        self.assertEqual(self.cheese.quantity, 10)

    def test_settle_propagates_insufficient_funds_before_mutation(self):
        self.fill_demo_cart()
        quote = self.service.quote(self.cart)
        poor = Customer("Omar", 100)
        with self.assertRaises(InsufficientFundsError):
            self.service.settle(poor, self.cart, quote)
        self.assertEqual(poor.balance, Decimal("100"))
        self.assertEqual(len(self.cart), 3)
        self.assertEqual(self.biscuits.quantity, 5)


class CheckoutFlowTests(CheckoutServiceTestCase):
    def test_successful_checkout_settles_everything(self):
        self.fill_demo_cart()
        result = self.service.checkout(self.customer, self.cart)

        self.assertEqual(result.state, CheckoutState.SETTLED)
        self.assertTrue(result.settled)
        self.assertEqual(result.quote.total, Decimal("408"))
        self.assertEqual(result.remaining_balance, Decimal("592"))
        self.assertEqual(self.customer.balance, Decimal("592"))
        self.assertEqual(self.cheese.quantity, 8)
        self.assertEqual(self.biscuits.quantity, 4)
        self.assertEqual(self.card.quantity, 19)
        self.assertTrue(self.cart.is_empty())
        self.assertEqual(result.manifest.total_weight_kg, Decimal("1.1"))
        self.assertEqual(self.reporter.kinds, ["shipment", "receipt"])

    def test_checkout_without_shippables_skips_manifest(self):
        self.cart.add_item(self.card, 2)
        result = self.service.checkout(self.customer, self.cart)
        self.assertIsNone(result.manifest)
        self.assertEqual(result.remaining_balance, Decimal("950"))
        self.assertEqual(self.reporter.kinds, ["receipt"])

    def test_insufficient_balance_rejects_and_leaves_state_untouched(self):
        customer = Customer("Omar", 400)
        self.fill_demo_cart()
        result = self.service.checkout(customer, self.cart)

        self.assertEqual(result.state, CheckoutState.REJECTED)
        self.assertEqual(result.failed_at, CheckoutState.PAYING)
        self.assertEqual(result.error.code, "INSUFFICIENT_FUNDS")
        self.assertEqual(customer.balance, Decimal("400"))
        self.assertEqual(result.remaining_balance, Decimal("400"))
        self.assertEqual(self.cheese.quantity, 10)
        self.assertEqual(self.biscuits.quantity, 5)
        self.assertEqual(self.card.quantity, 20)
        self.assertEqual(len(self.cart), 3)
        self.assertEqual(self.reporter.kinds, ["rejected"])

    def test_empty_cart_is_a_no_op(self):
        result = self.service.checkout(self.customer, self.cart)
        self.assertEqual(result.state, CheckoutState.EMPTY)
        self.assertIsNone(result.error)
        self.assertEqual(self.customer.balance, Decimal("1000"))
        self.assertEqual(self.reporter.kinds, ["empty"])

    def test_second_checkout_after_settlement_sees_empty_cart(self):
        self.fill_demo_cart()
        self.service.checkout(self.customer, self.cart)
        result = self.service.checkout(self.customer, self.cart)
        self.assertEqual(result.state, CheckoutState.EMPTY)
        self.assertEqual(self.customer.balance, Decimal("592"))

    def test_checkout_without_reporter_still_returns_result(self):
        service = CheckoutService(
            shipping=ShippingService(rate_per_kg=30),
            receipt_mapper=ReceiptMapper(),
            error_mapper=CheckoutErrorMapper(),
        )
        self.fill_demo_cart()
        result = service.checkout(self.customer, self.cart)
        self.assertEqual(result.remaining_balance, Decimal("592"))


class FailingShippingService(ShippingService):
    def ship(self, items):
        raise RuntimeError("carrier unavailable")


class CheckoutUnexpectedErrorTests(CheckoutServiceTestCase):
    def test_unexpected_error_is_reported_instead_of_raised(self):
        self.service.shipping = FailingShippingService(rate_per_kg=30)
        self.fill_demo_cart()
        with self.assertLogs("apps.checkout.services", level="ERROR"):
            result = self.service.checkout(self.customer, self.cart)

        self.assertEqual(result.state, CheckoutState.REJECTED)
        self.assertEqual(result.failed_at, CheckoutState.PAYING)
        self.assertEqual(result.error.code, "CHECKOUT_ERROR")
        self.assertEqual(result.error.message, "Checkout could not be completed")
        self.assertEqual(self.reporter.kinds, ["rejected"])


class CheckoutStockTests(CheckoutServiceTestCase):
    def test_stock_never_goes_negative_across_repeated_adds(self):
        self.cart.add_item(self.cheese, 6)
        with self.assertRaises(OutOfStockError):
            self.cart.add_item(self.cheese, 6)
        result = self.service.checkout(self.customer, self.cart)
        self.assertTrue(result.settled)
        self.assertEqual(self.cheese.quantity, 4)
