"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its lines, payments, discounts,
shipments and status history. All business invariants are enforced here;
nothing outside the root can reach the internal collections except as
read-only tuples.

Not safe for unsynchronized concurrent use: callers must serialize
mutations per order (one writer per ``order_id``).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterable

from bookstore.domain.exceptions import (
    DiscountAlreadyApplied,
    InvalidDiscountAmount,
    InvalidPaymentAmount,
    InvalidStatusTransition,
    ItemNotInOrder,
    OrderClosed,
    ShipmentNotFound,
    ValidationError,
)
from bookstore.domain.model.book import Book
from bookstore.domain.model.value_objects import (
    Address,
    Discount,
    Money,
    Payment,
    Quantity,
)


class OrderStatus(Enum):
    NEW = "NEW"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Re-recording the current status is always allowed and not listed here.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.NEW: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class ShipmentStatus(Enum):
    PENDING = "PENDING"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"


_SHIPMENT_FLOW = [ShipmentStatus.PENDING, ShipmentStatus.IN_TRANSIT, ShipmentStatus.DELIVERED]


@dataclass(frozen=True)
class OrderLine:
    """A book and quantity on an order.

    The title and unit price are a snapshot of the catalog entry at the
    time the line was added (price lock).  Two lines with the same book,
    quantity and price are interchangeable.
    """

    book_id: str
    title: str
    quantity: Quantity
    unit_price: Money

    @property
    def line_price(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class StatusChange:
    status: OrderStatus
    at: datetime


@dataclass(frozen=True, eq=False)
class Shipment:
    """A group of lines sent to one address.

    Identity is ``shipment_id``, which is only unique within the owning
    order.  Frozen: the order replaces the instance when the status moves.
    """

    shipment_id: int
    lines: tuple[OrderLine, ...]
    address: Address
    status: ShipmentStatus = ShipmentStatus.PENDING

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shipment):
            return NotImplemented
        return self.shipment_id == other.shipment_id

    def __hash__(self) -> int:
        return hash(self.shipment_id)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order:
    """Aggregate root for book orders.

    Use the ``Order.create()`` factory for new orders.  The ``__init__``
    is intentionally simple so the repository can reconstitute persisted
    orders; it only recomputes the derived total.
    """

    def __init__(
        self,
        order_id: str,
        customer_id: str,
        shipping_address: Address,
        *,
        lines: Iterable[OrderLine] = (),
        payments: Iterable[Payment] = (),
        discounts: Iterable[Discount] = (),
        shipments: Iterable[Shipment] = (),
        status: OrderStatus = OrderStatus.NEW,
        status_history: Iterable[StatusChange] = (),
        created_at: datetime | None = None,
        currency: str = "USD",
    ) -> None:
        self._order_id = order_id
        self._customer_id = customer_id
        self._shipping_address = shipping_address
        self._lines: list[OrderLine] = list(lines)
        self._payments: list[Payment] = list(payments)
        self._discounts: list[Discount] = list(discounts)
        self._shipments: list[Shipment] = list(shipments)
        self._status = status
        self._status_history: list[StatusChange] = list(status_history)
        self._created_at = created_at or _utcnow()
        self._currency = currency
        self._total_price = self._compute_total(self._lines, self._discounts)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: str,
        customer_id: str,
        shipping_address: Address,
    ) -> Order:
        """Create a new, empty order in NEW status."""
        if not order_id or not order_id.strip():
            raise ValidationError("Order id is required")
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer id is required")
        if not isinstance(shipping_address, Address):
            raise ValidationError("A shipping address is required")
        return Order(
            order_id=order_id.strip(),
            customer_id=customer_id.strip(),
            shipping_address=shipping_address,
        )

    # --- Identity -------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return self._order_id == other._order_id

    def __hash__(self) -> int:
        return hash(self._order_id)

    def __repr__(self) -> str:
        return (
            f"Order(order_id={self._order_id!r}, customer_id={self._customer_id!r}, "
            f"status={self._status.value}, total={self._total_price})"
        )

    # --- Read-only state ------------------------------------------------------

    @property
    def order_id(self) -> str:
        return self._order_id

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @property
    def shipping_address(self) -> Address:
        return self._shipping_address

    @property
    def order_lines(self) -> tuple[OrderLine, ...]:
        return tuple(self._lines)

    @property
    def payments(self) -> tuple[Payment, ...]:
        return tuple(self._payments)

    @property
    def discounts(self) -> tuple[Discount, ...]:
        return tuple(self._discounts)

    @property
    def shipments(self) -> tuple[Shipment, ...]:
        return tuple(self._shipments)

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def status_history(self) -> tuple[StatusChange, ...]:
        return tuple(self._status_history)

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def total_price(self) -> Money:
        return self._total_price

    # --- Lines ----------------------------------------------------------------

    def add_order_line(self, book: Book, quantity: int) -> OrderLine:
        """Append a line for *book*, locking in its current price."""
        self._ensure_open()
        line = OrderLine(
            book_id=book.id,
            title=book.title,
            quantity=Quantity(quantity),
            unit_price=book.price,
        )
        lines = self._lines + [line]
        total = self._compute_total(lines, self._discounts)

        self._lines = lines
        self._total_price = total
        return line

    def remove_order_line(self, book_id: str) -> None:
        """Remove every line for *book_id*.  Unknown ids are ignored."""
        self._ensure_open()
        lines = [line for line in self._lines if line.book_id != book_id]
        if len(lines) == len(self._lines):
            return
        self._lines = lines
        self._total_price = self._compute_total(self._lines, self._discounts)

    # --- Payments and discounts -----------------------------------------------

    def add_payment(self, payment: Payment) -> None:
        """Record a payment.  Overpayment is allowed."""
        self._ensure_open()
        if payment.amount.amount <= 0:
            raise InvalidPaymentAmount(
                f"Payment amount must be positive, got {payment.amount}"
            )
        if payment.amount.currency != self._currency:
            raise ValidationError(
                f"Cannot pay in {payment.amount.currency} for an order in {self._currency}"
            )
        self._payments.append(payment)

    def apply_discount(self, discount: Discount) -> None:
        """Apply a discount code once; the total never drops below zero."""
        self._ensure_open()
        if discount.amount.amount <= 0:
            raise InvalidDiscountAmount(
                f"Discount amount must be positive, got {discount.amount}"
            )
        if any(d.code == discount.code for d in self._discounts):
            raise DiscountAlreadyApplied(
                f"Discount code '{discount.code}' is already applied to order {self._order_id}"
            )
        discounts = self._discounts + [discount]
        total = self._compute_total(self._lines, discounts)

        self._discounts = discounts
        self._total_price = total

    # --- Status ---------------------------------------------------------------

    def change_status(
        self,
        new_status: OrderStatus | str,
        at: datetime | None = None,
    ) -> StatusChange:
        """Move to *new_status* and append it to the history.

        Re-recording the current status is allowed and still appends an
        entry.  Anything not in ``ALLOWED_TRANSITIONS`` is rejected.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown order status: {new_status!r}") from None

        if target != self._status and target not in ALLOWED_TRANSITIONS[self._status]:
            raise InvalidStatusTransition(
                f"Cannot move order {self._order_id} from {self._status.value} "
                f"to {target.value}"
            )

        if at is None:
            at = _utcnow()
        elif at.tzinfo is None or at.utcoffset() is None:
            raise ValidationError("Status change time must be timezone-aware")
        else:
            at = at.astimezone(timezone.utc)
        if self._status_history and at < self._status_history[-1].at:
            raise ValidationError(
                f"Status change at {at.isoformat()} precedes the last recorded change"
            )

        change = StatusChange(status=target, at=at)
        self._status = target
        self._status_history.append(change)
        return change

    # --- Shipping -------------------------------------------------------------

    def change_shipping_address(self, address: Address) -> None:
        """Replace the address.  Existing shipments keep their snapshot."""
        self._ensure_open()
        if not isinstance(address, Address):
            raise ValidationError("A shipping address is required")
        self._shipping_address = address

    def create_shipment(self, lines: Iterable[OrderLine]) -> Shipment:
        """Ship *lines*, removing them from the order.

        Each requested line must match a line currently on the order;
        duplicates need as many matching lines.  Nothing changes unless
        every requested line is found.
        """
        self._ensure_open()
        requested = list(lines)
        if not requested:
            raise ValidationError("A shipment must contain at least one order line")

        taken: set[int] = set()
        for line in requested:
            index = self._find_untaken(line, taken)
            if index is None:
                raise ItemNotInOrder(
                    f"{line.title} x{line.quantity} is not in order {self._order_id}"
                )
            taken.add(index)

        shipped = tuple(self._lines[i] for i in sorted(taken))
        remaining = [line for i, line in enumerate(self._lines) if i not in taken]

        shipment = Shipment(
            shipment_id=self._next_shipment_id(),
            lines=shipped,
            address=self._shipping_address,
        )
        self._lines = remaining
        self._shipments.append(shipment)
        self._total_price = self._compute_total(self._lines, self._discounts)
        return shipment

    def update_shipment_status(
        self,
        shipment_id: int,
        new_status: ShipmentStatus | str,
    ) -> Shipment:
        """Advance a shipment along PENDING -> IN_TRANSIT -> DELIVERED."""
        self._ensure_open()
        try:
            target = ShipmentStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown shipment status: {new_status!r}") from None

        for i, shipment in enumerate(self._shipments):
            if shipment.shipment_id == shipment_id:
                break
        else:
            raise ShipmentNotFound(
                f"Shipment #{shipment_id} not found in order {self._order_id}"
            )

        if _SHIPMENT_FLOW.index(target) <= _SHIPMENT_FLOW.index(shipment.status):
            raise InvalidStatusTransition(
                f"Cannot move shipment #{shipment_id} from {shipment.status.value} "
                f"to {target.value}"
            )

        updated = dataclasses.replace(shipment, status=target)
        self._shipments[i] = updated
        return updated

    # --- Computed values ------------------------------------------------------

    def calculate_total_price(self) -> Money:
        return self._total_price

    def get_balance_due(self) -> Decimal:
        """Total minus payments.  Negative when the order is overpaid."""
        paid = sum((p.amount.amount for p in self._payments), Decimal("0"))
        return self._total_price.amount - paid

    @property
    def amount_paid(self) -> Money:
        result = Money.zero(self._currency)
        for payment in self._payments:
            result = result + payment.amount
        return result

    # --- Internal helpers -----------------------------------------------------

    def _compute_total(
        self,
        lines: list[OrderLine],
        discounts: list[Discount],
    ) -> Money:
        gross = Money.zero(self._currency)
        for line in lines:
            gross = gross + line.line_price
        off = Money.zero(self._currency)
        for discount in discounts:
            off = off + discount.amount
        return gross.minus_floored(off)

    def _find_untaken(self, line: OrderLine, taken: set[int]) -> int | None:
        for i, candidate in enumerate(self._lines):
            if i not in taken and candidate == line:
                return i
        return None

    def _next_shipment_id(self) -> int:
        if not self._shipments:
            return 1
        return max(s.shipment_id for s in self._shipments) + 1

    def _ensure_open(self) -> None:
        if self._status == OrderStatus.CANCELLED:
            raise OrderClosed(f"Order {self._order_id} is cancelled")
