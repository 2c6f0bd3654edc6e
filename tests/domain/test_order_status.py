"""Unit tests for order status transitions and history."""

from datetime import datetime, timedelta, timezone

import pytest

from bookstore.domain.exceptions import InvalidStatusTransition, ValidationError
from bookstore.domain.model.order import ALLOWED_TRANSITIONS, OrderStatus
from tests.fakes import make_order

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestStatusHistory:

    def test_each_change_appends_exactly_one_entry(self):
        order = make_order()
        path = [
            OrderStatus.PROCESSING,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        ]
        for n, status in enumerate(path, start=1):
            order.change_status(status)
            assert len(order.status_history) == n

        assert [c.status for c in order.status_history] == path
        assert order.status == OrderStatus.DELIVERED

    def test_earlier_entries_are_never_rewritten(self):
        order = make_order()
        first = order.change_status(OrderStatus.PROCESSING, at=T0)
        order.change_status(OrderStatus.SHIPPED, at=T0 + timedelta(hours=1))
        assert order.status_history[0] == first

    def test_repeated_status_is_recorded(self):
        order = make_order()
        order.change_status(OrderStatus.NEW)
        order.change_status(OrderStatus.NEW)
        assert [c.status for c in order.status_history] == [OrderStatus.NEW, OrderStatus.NEW]

    def test_timestamps_non_decreasing(self):
        order = make_order()
        order.change_status(OrderStatus.PROCESSING, at=T0)
        order.change_status(OrderStatus.PROCESSING, at=T0)
        with pytest.raises(ValidationError, match="precedes"):
            order.change_status(OrderStatus.SHIPPED, at=T0 - timedelta(seconds=1))

        assert len(order.status_history) == 2
        assert order.status == OrderStatus.PROCESSING

    def test_naive_timestamp_rejected(self):
        order = make_order()
        order.change_status(OrderStatus.PROCESSING)

        with pytest.raises(ValidationError, match="timezone-aware"):
            order.change_status(OrderStatus.SHIPPED, at=datetime(2030, 1, 1))

        assert order.status == OrderStatus.PROCESSING
        assert len(order.status_history) == 1

    def test_other_timezones_normalized_to_utc(self):
        order = make_order()
        plus_two = timezone(timedelta(hours=2))
        change = order.change_status(
            OrderStatus.PROCESSING, at=datetime(2024, 1, 1, 14, 0, tzinfo=plus_two)
        )
        assert change.at == T0
        assert change.at.tzinfo == timezone.utc

    def test_default_timestamp_is_now(self):
        order = make_order()
        before = datetime.now(timezone.utc)
        change = order.change_status(OrderStatus.PROCESSING)
        assert before <= change.at <= datetime.now(timezone.utc)

    def test_accepts_status_value_string(self):
        order = make_order()
        order.change_status("PROCESSING")
        assert order.status == OrderStatus.PROCESSING

    def test_unknown_status_rejected(self):
        order = make_order()
        with pytest.raises(ValidationError, match="Unknown order status"):
            order.change_status("LOST")
        assert order.status_history == ()


class TestTransitions:

    @pytest.mark.parametrize("start,target", [
        (OrderStatus.NEW, OrderStatus.SHIPPED),
        (OrderStatus.NEW, OrderStatus.DELIVERED),
        (OrderStatus.PROCESSING, OrderStatus.NEW),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.PROCESSING),
    ])
    def test_invalid_transition_rejected(self, start, target):
        order = make_order()
        order._status = start  # jump straight to the starting state
        with pytest.raises(InvalidStatusTransition):
            order.change_status(target)
        assert order.status == start
        assert order.status_history == ()

    def test_cancel_before_shipping(self):
        order = make_order()
        order.change_status(OrderStatus.PROCESSING)
        order.change_status(OrderStatus.CANCELLED)
        assert order.status == OrderStatus.CANCELLED

    def test_terminal_states_have_no_exits(self):
        assert ALLOWED_TRANSITIONS[OrderStatus.DELIVERED] == frozenset()
        assert ALLOWED_TRANSITIONS[OrderStatus.CANCELLED] == frozenset()

    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(OrderStatus)
