"""Application service: Place Order use case.

Creates the order aggregate for a customer and, optionally, adds the
initial lines.  This is the only place that coordinates the catalog
(book lookup) with order creation.
"""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from bookstore.application.lookups import find_book
from bookstore.domain.model.order import Order
from bookstore.domain.model.value_objects import Address
from bookstore.domain.repository.book_catalog import BookCatalog
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class PlaceOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog: BookCatalog,
    ) -> None:
        self._order_repo = order_repo
        self._catalog = catalog

    def handle(
        self,
        customer_id: str,
        address: Address,
        item_specs: list[OrderItemSpec] | None = None,
    ) -> OrderDTO:
        """Create a new order.

        Steps:
        1. Resolve every requested book (fail before creating anything).
        2. Create the order and add one line per requested item, locking prices.
        3. Persist and return a DTO.
        """
        books = [(find_book(self._catalog, spec.book), spec.quantity) for spec in item_specs or []]

        order = Order.create(
            order_id=self._order_repo.next_id(),
            customer_id=customer_id,
            shipping_address=address,
        )
        for book, quantity in books:
            order.add_order_line(book, quantity)

        self._order_repo.save(order)
        logger.info(
            "Placed order %s for customer %s (%d lines, total %s)",
            order.order_id, order.customer_id, len(order.order_lines), order.total_price,
        )
        return order_to_dto(order)
