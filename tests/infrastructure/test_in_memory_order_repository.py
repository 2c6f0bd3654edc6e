"""Tests for the dict-backed order repository."""

import threading

from bookstore.domain.model.order import OrderStatus
from bookstore.domain.model.value_objects import Money
from bookstore.infrastructure.persistence.in_memory_order_repository import (
    InMemoryOrderRepository,
)
from tests.fakes import make_book, make_order


class TestSaveAndGet:

    def test_get_missing_returns_none(self):
        assert InMemoryOrderRepository().get("O404") is None

    def test_save_twice_keeps_one_latest_copy(self):
        repo = InMemoryOrderRepository()
        order = make_order("O1")
        repo.save(order)

        order.add_order_line(make_book(), 2)
        repo.save(order)

        assert len(repo) == 1
        assert repo.get("O1").total_price == Money.of("60.00")

    def test_unsaved_changes_do_not_leak(self):
        repo = InMemoryOrderRepository()
        order = make_order("O1")
        repo.save(order)

        order.add_order_line(make_book(), 1)

        assert repo.get("O1").order_lines == ()

    def test_readers_get_independent_copies(self):
        repo = InMemoryOrderRepository([make_order("O1")])
        first = repo.get("O1")
        first.change_status(OrderStatus.PROCESSING)
        assert repo.get("O1").status == OrderStatus.NEW


class TestDelete:

    def test_get_after_delete_returns_none(self):
        repo = InMemoryOrderRepository()
        order = make_order("O1")
        repo.save(order)
        repo.delete(order)
        assert repo.get("O1") is None

    def test_delete_absent_is_noop(self):
        repo = InMemoryOrderRepository()
        repo.delete(make_order("O1"))
        assert len(repo) == 0


class TestFindByCustomer:

    def test_returns_matching_orders_in_insertion_order(self):
        repo = InMemoryOrderRepository([
            make_order("O2", "C1"),
            make_order("O1", "C2"),
            make_order("O3", "C1"),
        ])
        assert [o.order_id for o in repo.find_by_customer("C1")] == ["O2", "O3"]

    def test_unknown_customer_has_no_orders(self):
        assert InMemoryOrderRepository().find_by_customer("C9") == []


class TestNextId:

    def test_sequential_and_skips_taken_ids(self):
        repo = InMemoryOrderRepository([make_order("O2")])
        assert repo.next_id() == "O1"
        assert repo.next_id() == "O3"


class TestConcurrentSaves:

    def test_reader_always_sees_a_whole_order(self):
        repo = InMemoryOrderRepository()
        book = make_book(price="10.00")
        order = make_order("O1")
        repo.save(order)

        snapshots = []

        def writer():
            local = repo.get("O1")
            for _ in range(50):
                local.add_order_line(book, 1)
                repo.save(local)

        def reader():
            for _ in range(200):
                snapshots.append(repo.get("O1"))

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for snap in snapshots:
            assert snap.total_price == Money.of("10.00") * len(snap.order_lines)
