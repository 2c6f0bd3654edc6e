"""Dict-backed implementation of OrderRepository.

Orders are copied on the way in and on the way out, so a caller's
unsaved changes never show up in the store and two readers never share
an instance.
"""

from __future__ import annotations

import copy
import logging
import threading

from bookstore.domain.model.order import Order
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class InMemoryOrderRepository(OrderRepository):

    def __init__(self, orders: list[Order] | None = None) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, Order] = {}
        self._counter = 0
        for order in orders or []:
            self.save(order)

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> str:
        with self._lock:
            while True:
                self._counter += 1
                candidate = f"O{self._counter}"
                if candidate not in self._store:
                    return candidate

    def get(self, order_id: str) -> Order | None:
        with self._lock:
            order = self._store.get(order_id)
            return copy.deepcopy(order) if order is not None else None

    def find_by_customer(self, customer_id: str) -> list[Order]:
        with self._lock:
            return [
                copy.deepcopy(order)
                for order in self._store.values()
                if order.customer_id == customer_id
            ]

    def save(self, order: Order) -> None:
        snapshot = copy.deepcopy(order)
        with self._lock:
            self._store[order.order_id] = snapshot
        logger.debug("Saved order %s", order.order_id)

    def delete(self, order: Order) -> None:
        with self._lock:
            removed = self._store.pop(order.order_id, None)
        if removed is not None:
            logger.debug("Deleted order %s", order.order_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
