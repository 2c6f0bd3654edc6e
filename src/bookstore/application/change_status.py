"""Application service: Change Order Status use case.

The transition rules live on the aggregate; this handler only loads,
delegates and saves.
"""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO, order_to_dto
from bookstore.application.lookups import load_order
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class ChangeStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, new_status: str) -> OrderDTO:
        order = load_order(self._order_repo, order_id)
        previous = order.status

        order.change_status(new_status.strip().upper())
        self._order_repo.save(order)

        logger.info(
            "Order %s: status %s -> %s", order_id, previous.value, order.status.value
        )
        return order_to_dto(order)
