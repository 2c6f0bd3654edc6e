"""Application service: Remove Order Line use case."""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO, order_to_dto
from bookstore.application.lookups import load_order
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class RemoveOrderLineHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, book_id: str) -> OrderDTO:
        """Remove every line for *book_id*; a book not on the order is a no-op."""
        order = load_order(self._order_repo, order_id)

        order.remove_order_line(book_id)
        self._order_repo.save(order)

        logger.info("Order %s: removed lines for book %s", order_id, book_id)
        return order_to_dto(order)
