"""Tests for the JSON-file-backed order and catalog stores."""

import json
import threading
from datetime import datetime, timezone
from decimal import Decimal

from bookstore.domain.model.order import OrderStatus, ShipmentStatus
from bookstore.domain.model.value_objects import Discount, Money, Payment
from bookstore.infrastructure.persistence.json_book_catalog import JsonBookCatalog
from bookstore.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from tests.fakes import make_address, make_book, make_order


def _busy_order():
    order = make_order("O1", "C1")
    dune = order.add_order_line(make_book("1", "Dune", "30.00"), 2)
    order.add_order_line(make_book("2", "Emma", "12.50"), 1)
    order.apply_discount(Discount("TEN", Money.of("10")))
    order.add_payment(Payment("card", Money.of("20")))
    order.change_status(OrderStatus.PROCESSING, at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    order.create_shipment([dune])
    order.update_shipment_status(1, ShipmentStatus.IN_TRANSIT)
    order.change_shipping_address(make_address(street="9 Elm St"))
    return order


class TestJsonOrderRepository:

    def test_creates_empty_file(self, tmp_path):
        path = tmp_path / "nested" / "orders.json"
        JsonOrderRepository(path)
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "last_issued": 0,
            "orders": [],
        }

    def test_reconstitutes_full_aggregate(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        original = _busy_order()
        repo.save(original)

        loaded = repo.get("O1")

        assert loaded.order_lines == original.order_lines
        assert loaded.payments == original.payments
        assert loaded.discounts == original.discounts
        assert loaded.status_history == original.status_history
        assert loaded.shipping_address == make_address(street="9 Elm St")
        assert loaded.shipments[0].address == make_address()
        assert loaded.shipments[0].status == ShipmentStatus.IN_TRANSIT
        assert loaded.shipments[0].lines == original.shipments[0].lines
        assert loaded.total_price == Money.of("2.50")
        assert loaded.get_balance_due() == Decimal("-17.50")
        assert loaded.created_at == original.created_at

    def test_save_is_upsert(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = make_order("O1")
        repo.save(order)
        order.add_order_line(make_book(), 1)
        repo.save(order)

        assert len(repo.find_by_customer("C1")) == 1
        assert len(repo.get("O1").order_lines) == 1

    def test_delete_is_idempotent(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = make_order("O1")
        repo.save(order)
        repo.delete(order)
        repo.delete(order)
        assert repo.get("O1") is None

    def test_next_id_follows_highest_numeric_id(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        assert repo.next_id() == "O1"
        repo.save(make_order("O7"))
        repo.save(make_order("legacy-1"))
        assert repo.next_id() == "O8"

    def test_next_id_not_reused_after_highest_order_deleted(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(make_order("O1"))
        newest = make_order("O2")
        repo.save(newest)
        repo.delete(newest)

        assert repo.next_id() == "O3"
        assert JsonOrderRepository(tmp_path / "orders.json").next_id() == "O4"

    def test_next_id_unique_without_save(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        assert [repo.next_id() for _ in range(3)] == ["O1", "O2", "O3"]

    def test_next_id_unique_across_threads(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        issued = []

        def worker():
            for _ in range(10):
                issued.append(repo.next_id())

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(issued)) == 40

    def test_reads_plain_list_file(self, tmp_path):
        path = tmp_path / "orders.json"
        JsonOrderRepository(tmp_path / "seed.json").save(make_order("O5", "C9"))
        seeded = json.loads((tmp_path / "seed.json").read_text(encoding="utf-8"))
        path.write_text(json.dumps(seeded["orders"]), encoding="utf-8")

        repo = JsonOrderRepository(path)

        assert repo.get("O5").customer_id == "C9"
        assert repo.next_id() == "O6"

    def test_no_temp_files_left_behind(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(make_order("O1"))
        assert [p.name for p in tmp_path.iterdir()] == ["orders.json"]


class TestJsonBookCatalog:

    def test_save_and_lookup(self, tmp_path):
        catalog = JsonBookCatalog(tmp_path / "books.json")
        catalog.save(make_book("1", "Dune", "30.00"))

        assert catalog.get_by_id("1").price == Money.of("30.00")
        assert catalog.get_by_title("dune").id == "1"
        assert catalog.get_by_title("Emma") is None
        assert len(catalog.list_all()) == 1

    def test_title_lookup_ignores_case(self, tmp_path):
        catalog = JsonBookCatalog(tmp_path / "books.json")
        catalog.save(make_book("1", "The Left Hand of Darkness", "15.00"))

        assert catalog.get_by_title("THE LEFT HAND OF DARKNESS").id == "1"
        assert catalog.get_by_title("the left hand of darkness").id == "1"
        assert catalog.get_by_title("The Left Hand") is None
