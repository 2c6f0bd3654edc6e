"""Application service: Create Shipment use case.

Resolves book references to the order's current lines, then lets the
aggregate move those lines into a new shipment.
"""

from __future__ import annotations

import logging

from bookstore.application.dto import ShipmentDTO, shipment_to_dto
from bookstore.application.lookups import load_order
from bookstore.domain.exceptions import ItemNotInOrder, ValidationError
from bookstore.domain.model.order import Order, OrderLine
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class CreateShipmentHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, book_refs: list[str]) -> ShipmentDTO:
        """Ship every current line for each referenced book.

        Args:
            order_id: The order to ship from.
            book_refs: Book ids or titles; each must match at least one
                line currently on the order.
        """
        if not book_refs:
            raise ValidationError("Must specify at least one book to ship")

        order = load_order(self._order_repo, order_id)
        lines = self._resolve_lines(order, book_refs)

        shipment = order.create_shipment(lines)
        self._order_repo.save(order)

        logger.info(
            "Order %s: created shipment #%d with %d lines",
            order_id, shipment.shipment_id, len(shipment.lines),
        )
        return shipment_to_dto(shipment)

    @staticmethod
    def _resolve_lines(order: Order, book_refs: list[str]) -> list[OrderLine]:
        lines = order.order_lines
        selected: set[int] = set()
        for ref in book_refs:
            indices = {
                i
                for i, line in enumerate(lines)
                if line.book_id == ref or line.title.lower() == ref.lower()
            }
            if not indices:
                raise ItemNotInOrder(f"Book '{ref}' is not in order {order.order_id}")
            selected |= indices
        return [lines[i] for i in sorted(selected)]
