"""Application service: List Customer Orders use case (query)."""

from __future__ import annotations

from bookstore.application.dto import OrderDTO, order_to_dto
from bookstore.domain.repository.order_repository import OrderRepository


class ListCustomerOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, customer_id: str) -> list[OrderDTO]:
        """Return the customer's orders; an unknown customer has none."""
        return [order_to_dto(o) for o in self._order_repo.find_by_customer(customer_id)]
