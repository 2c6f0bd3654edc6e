"""Abstract repository for the Order aggregate.

Behaves like a collection keyed by ``order_id``.  Implementations must
make ``save`` atomic with respect to concurrent ``save``/``get`` on the
same key: a reader sees either the old or the new order, never a mix.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bookstore.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique order id."""

    @abstractmethod
    def get(self, order_id: str) -> Order | None:
        """Return an order by its id, or None if not found."""

    @abstractmethod
    def find_by_customer(self, customer_id: str) -> list[Order]:
        """Return every order placed by a customer, in storage order."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Insert or replace an order, keyed by its id."""

    @abstractmethod
    def delete(self, order: Order) -> None:
        """Remove an order.  Deleting an absent order is not an error."""
