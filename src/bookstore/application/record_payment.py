"""Application service: Record Payment use case.

No gateway is involved; the payment is taken as already settled.
"""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO, order_to_dto
from bookstore.application.lookups import load_order, parse_positive_amount
from bookstore.domain.exceptions import InvalidPaymentAmount, ValidationError
from bookstore.domain.model.value_objects import Payment
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class RecordPaymentHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, payment_type: str, amount: str) -> OrderDTO:
        if not payment_type or not payment_type.strip():
            raise ValidationError("Payment type is required")

        order = load_order(self._order_repo, order_id)
        money = parse_positive_amount(amount, order.currency, InvalidPaymentAmount, "payment")

        order.add_payment(Payment(payment_type.strip(), money))
        self._order_repo.save(order)

        logger.info(
            "Order %s: recorded %s payment of %s, balance due %s",
            order_id, payment_type, amount, order.get_balance_due(),
        )
        return order_to_dto(order)
