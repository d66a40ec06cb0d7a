from __future__ import annotations

from typing import Optional

from django.utils.translation import gettext as _

from apps.carts.domain import Cart
from apps.common import get_logger
from apps.common.exceptions import DomainError, EmptyCartError, ValidationError
from apps.customers.domain import Customer
from .dtos import CheckoutQuoteDTO, CheckoutResultDTO, CheckoutState
from .protocols import (
    CheckoutErrorMapperProtocol,
    CheckoutReporterProtocol,
    ReceiptMapperProtocol,
    ShippingServiceProtocol,
)

logger = get_logger(__name__).bind(component="checkout", layer="service")


class CheckoutService:
    """
    Runs a checkout as two phases over a single-threaded session.

    ``quote`` is pure and computes what the customer owes. ``settle`` is the
    only place that mutates anything: the balance deduction comes first, so a
    failed payment leaves the cart, the balance and the inventory untouched.
    """

    def __init__(
        self,
        shipping: ShippingServiceProtocol,
        receipt_mapper: ReceiptMapperProtocol,
        error_mapper: CheckoutErrorMapperProtocol,
        reporter: Optional[CheckoutReporterProtocol] = None,
    ):
        self.shipping = shipping
        self.receipt_mapper = receipt_mapper
        self.error_mapper = error_mapper
        self.reporter = reporter
        self.logger = logger.bind(service="CheckoutService")

    def quote(self, cart: Cart) -> CheckoutQuoteDTO:
        if cart.is_empty():
            raise EmptyCartError(_("Cart is empty"))
        subtotal = cart.get_subtotal()
        units = cart.get_shippable_items()
        fee = self.shipping.calculate_fee(units)
        quote = CheckoutQuoteDTO(
            lines=self.receipt_mapper.many_to_dto(cart.get_items()),
            subtotal=subtotal,
            shipping_fee=fee,
            total=subtotal + fee,
            shippable_units=units,
        )
        self.logger.debug(
            "Quote computed",
            lines=len(quote.lines),
            subtotal=quote.subtotal,
            shipping_fee=quote.shipping_fee,
            total=quote.total,
        )
        return quote

    def settle(
        self, customer: Customer, cart: Cart, quote: CheckoutQuoteDTO
    ) -> CheckoutResultDTO:
        if self.receipt_mapper.many_to_dto(cart.get_items()) != quote.lines:
            self.logger.warning("Cart changed after quote", customer=customer.name)
            raise ValidationError(_("Cart changed since it was quoted"))
        remaining = customer.deduct(quote.total)
        self.logger.debug(
            "Payment captured",
            customer=customer.name,
            amount=quote.total,
            remaining=remaining,
        )
        manifest = None
        if quote.requires_shipment:
            self.logger.debug(
                "Dispatching shipment",
                stage=CheckoutState.SHIPPING.value,
                units=len(quote.shippable_units),
            )
            manifest = self.shipping.ship(quote.shippable_units)
        for line in cart.get_items():
            line.product.reduce_quantity(line.quantity)
        cart.clear()
        return CheckoutResultDTO(
            state=CheckoutState.SETTLED,
            customer_name=customer.name,
            quote=quote,
            manifest=manifest,
            remaining_balance=remaining,
        )

    def checkout(self, customer: Customer, cart: Cart) -> CheckoutResultDTO:
        log = self.logger.bind(customer=customer.name)
        if cart.is_empty():
            log.info("Checkout skipped: cart is empty")
            result = CheckoutResultDTO(
                state=CheckoutState.EMPTY, customer_name=customer.name
            )
            if self.reporter:
                self.reporter.report_empty(result)
            return result
        stage = CheckoutState.VALIDATING
        try:
            quote = self.quote(cart)
            stage = CheckoutState.PAYING
            result = self.settle(customer, cart, quote)
        except DomainError as exc:
            log.warning(
                "Checkout rejected", stage=stage.value, code=exc.code, error=exc.message
            )
            return self._reject(customer, exc, stage)
        except Exception:
            log.exception("Checkout failed unexpectedly", stage=stage.value)
            return self._reject(
                customer,
                DomainError(
                    _("Checkout could not be completed"), code="CHECKOUT_ERROR"
                ),
                stage,
            )
        log.info(
            "Checkout settled",
            total=result.quote.total,
            remaining=result.remaining_balance,
        )
        if self.reporter:
            if result.manifest is not None:
                self.reporter.report_shipment(result.manifest)
            self.reporter.report_receipt(result)
        return result

    def _reject(
        self, customer: Customer, exc: DomainError, stage: CheckoutState
    ) -> CheckoutResultDTO:
        result = CheckoutResultDTO(
            state=CheckoutState.REJECTED,
            customer_name=customer.name,
            remaining_balance=customer.balance,
            error=self.error_mapper.to_dto(exc),
            failed_at=stage,
        )
        if self.reporter:
            self.reporter.report_rejected(result)
        return result
