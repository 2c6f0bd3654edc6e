"""Application service: Add Order Line use case."""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO, order_to_dto
from bookstore.application.lookups import find_book, load_order
from bookstore.domain.repository.book_catalog import BookCatalog
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class AddOrderLineHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog: BookCatalog,
    ) -> None:
        self._order_repo = order_repo
        self._catalog = catalog

    def handle(self, order_id: str, book_ref: str, quantity: int) -> OrderDTO:
        order = load_order(self._order_repo, order_id)
        book = find_book(self._catalog, book_ref)

        line = order.add_order_line(book, quantity)
        self._order_repo.save(order)

        logger.info(
            "Order %s: added %s x%s, total now %s",
            order_id, line.title, line.quantity, order.total_price,
        )
        return order_to_dto(order)
