from typing import Iterable, List

from apps.carts.domain import CartLine
from apps.common.exceptions import DomainError
from .dtos import CheckoutErrorDTO, ReceiptLineDTO


class ReceiptMapper:
    def to_dto(self, line: CartLine) -> ReceiptLineDTO:
        return ReceiptLineDTO(
            name=line.product.name,
            quantity=line.quantity,
            line_total=line.line_total,
        )

    def many_to_dto(self, lines: Iterable[CartLine]) -> List[ReceiptLineDTO]:
        return [self.to_dto(line) for line in lines]


class CheckoutErrorMapper:
    def to_dto(self, exc: DomainError) -> CheckoutErrorDTO:
        return CheckoutErrorDTO(code=exc.code, message=exc.message, details=exc.details)
