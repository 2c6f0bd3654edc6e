"""JSON-file-backed implementation of OrderRepository.

The whole file is rewritten on every change, via a temporary file and
``os.replace``, so a concurrent reader sees either the previous or the
new contents.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from bookstore.domain.model.order import (
    Order,
    OrderLine,
    OrderStatus,
    Shipment,
    ShipmentStatus,
    StatusChange,
)
from bookstore.domain.model.value_objects import (
    Address,
    Discount,
    Money,
    Payment,
    Quantity,
)
from bookstore.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"^O(\d+)$")
_EMPTY_DOCUMENT = {"last_issued": 0, "orders": []}


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> str:
        """Issue an id above every id this file has ever seen.

        The high-water mark is stored in the file, so ids freed by
        ``delete`` are never handed out again.
        """
        with self._lock:
            document = self._load_document()
            highest = max(
                [document["last_issued"], *self._numeric_ids(document["orders"])]
            )
            document["last_issued"] = highest + 1
            self._persist_document(document)
        return f"O{highest + 1}"

    def get(self, order_id: str) -> Order | None:
        for raw in self._load_raw():
            if raw["order_id"] == order_id:
                return self._to_domain(raw)
        return None

    def find_by_customer(self, customer_id: str) -> list[Order]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["customer_id"] == customer_id
        ]

    def save(self, order: Order) -> None:
        with self._lock:
            document = self._load_document()
            orders = document["orders"]

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(orders):
                if raw["order_id"] == order.order_id:
                    orders[i] = self._to_raw(order)
                    replaced = True
                    break
            if not replaced:
                orders.append(self._to_raw(order))

            self._persist_document(document)
        logger.debug("Saved order %s to %s", order.order_id, self._file_path)

    def delete(self, order: Order) -> None:
        with self._lock:
            document = self._load_document()
            orders = document["orders"]
            kept = [raw for raw in orders if raw["order_id"] != order.order_id]
            if len(kept) == len(orders):
                return
            # Remember the highest id before it disappears from the list
            document["last_issued"] = max(
                [document["last_issued"], *self._numeric_ids(orders)]
            )
            document["orders"] = kept
            self._persist_document(document)
        logger.debug("Deleted order %s from %s", order.order_id, self._file_path)

    @staticmethod
    def _numeric_ids(orders: list[dict]) -> list[int]:
        return [
            int(match.group(1))
            for match in (_ID_PATTERN.match(raw["order_id"]) for raw in orders)
            if match
        ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _money_to_raw(money: Money) -> dict:
        return {"amount": str(money.amount), "currency": money.currency}

    @staticmethod
    def _money_to_domain(raw: dict) -> Money:
        return Money(Decimal(raw["amount"]), raw.get("currency", "USD"))

    @classmethod
    def _line_to_raw(cls, line: OrderLine) -> dict:
        return {
            "book_id": line.book_id,
            "title": line.title,
            "quantity": line.quantity.value,
            "unit_price": cls._money_to_raw(line.unit_price),
        }

    @classmethod
    def _line_to_domain(cls, raw: dict) -> OrderLine:
        return OrderLine(
            book_id=raw["book_id"],
            title=raw["title"],
            quantity=Quantity(raw["quantity"]),
            unit_price=cls._money_to_domain(raw["unit_price"]),
        )

    @staticmethod
    def _address_to_raw(address: Address) -> dict:
        return {
            "street": address.street,
            "city": address.city,
            "region": address.region,
            "postal_code": address.postal_code,
        }

    @classmethod
    def _to_raw(cls, order: Order) -> dict:
        return {
            "order_id": order.order_id,
            "customer_id": order.customer_id,
            "currency": order.currency,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "shipping_address": cls._address_to_raw(order.shipping_address),
            "lines": [cls._line_to_raw(line) for line in order.order_lines],
            "payments": [
                {"payment_type": p.payment_type, "amount": cls._money_to_raw(p.amount)}
                for p in order.payments
            ],
            "discounts": [
                {"code": d.code, "amount": cls._money_to_raw(d.amount)}
                for d in order.discounts
            ],
            "shipments": [
                {
                    "shipment_id": s.shipment_id,
                    "status": s.status.value,
                    "address": cls._address_to_raw(s.address),
                    "lines": [cls._line_to_raw(line) for line in s.lines],
                }
                for s in order.shipments
            ],
            "status_history": [
                {"status": change.status.value, "at": change.at.isoformat()}
                for change in order.status_history
            ],
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Order:
        return Order(
            order_id=raw["order_id"],
            customer_id=raw["customer_id"],
            shipping_address=Address(**raw["shipping_address"]),
            lines=[cls._line_to_domain(line) for line in raw.get("lines", [])],
            payments=[
                Payment(p["payment_type"], cls._money_to_domain(p["amount"]))
                for p in raw.get("payments", [])
            ],
            discounts=[
                Discount(d["code"], cls._money_to_domain(d["amount"]))
                for d in raw.get("discounts", [])
            ],
            shipments=[
                Shipment(
                    shipment_id=s["shipment_id"],
                    lines=tuple(cls._line_to_domain(line) for line in s["lines"]),
                    address=Address(**s["address"]),
                    status=ShipmentStatus(s["status"]),
                )
                for s in raw.get("shipments", [])
            ],
            status=OrderStatus(raw["status"]),
            status_history=[
                StatusChange(OrderStatus(c["status"]), datetime.fromisoformat(c["at"]))
                for c in raw.get("status_history", [])
            ],
            created_at=datetime.fromisoformat(raw["created_at"]),
            currency=raw.get("currency", "USD"),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_document(self) -> dict:
        data = json.loads(self._file_path.read_text(encoding="utf-8"))
        if isinstance(data, list):
            # Files written before the id high-water mark was stored
            return {"last_issued": 0, "orders": data}
        return data

    def _load_raw(self) -> list[dict]:
        return self._load_document()["orders"]

    def _persist_document(self, document: dict) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=".orders-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(document, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps(_EMPTY_DOCUMENT, indent=2) + "\n", encoding="utf-8"
            )
