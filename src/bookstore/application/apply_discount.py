"""Application service: Apply Discount use case."""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO, order_to_dto
from bookstore.application.lookups import load_order, parse_positive_amount
from bookstore.domain.exceptions import InvalidDiscountAmount, ValidationError
from bookstore.domain.model.value_objects import Discount
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class ApplyDiscountHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, code: str, amount: str) -> OrderDTO:
        if not code or not code.strip():
            raise ValidationError("Discount code is required")

        order = load_order(self._order_repo, order_id)
        money = parse_positive_amount(amount, order.currency, InvalidDiscountAmount, "discount")

        order.apply_discount(Discount(code.strip().upper(), money))
        self._order_repo.save(order)

        logger.info(
            "Order %s: applied discount %s, total now %s",
            order_id, code, order.total_price,
        )
        return order_to_dto(order)
