"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from bookstore.domain.model.order import Order, OrderLine, Shipment


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (book title or id + quantity)."""

    book: str
    quantity: int


@dataclass(frozen=True)
class OrderLineDTO:
    book_id: str
    title: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_price: str


@dataclass(frozen=True)
class ShipmentDTO:
    shipment_id: int
    status: str
    address: str
    lines: list[OrderLineDTO]


@dataclass(frozen=True)
class StatusChangeDTO:
    status: str
    at: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    order_id: str
    customer_id: str
    status: str
    shipping_address: str
    lines: list[OrderLineDTO]
    discounts: list[str]  # "CODE -$5.00"
    payments: list[str]  # "card $10.00"
    shipments: list[ShipmentDTO]
    history: list[StatusChangeDTO]
    total: str
    amount_paid: str
    balance_due: str
    created_at: str


# --- Mapping ------------------------------------------------------------------


def format_signed(amount: Decimal) -> str:
    if amount < 0:
        return f"-${-amount:.2f}"
    return f"${amount:.2f}"


def line_to_dto(line: OrderLine) -> OrderLineDTO:
    return OrderLineDTO(
        book_id=line.book_id,
        title=line.title,
        quantity=line.quantity.value,
        unit_price=str(line.unit_price),
        line_price=str(line.line_price),
    )


def shipment_to_dto(shipment: Shipment) -> ShipmentDTO:
    return ShipmentDTO(
        shipment_id=shipment.shipment_id,
        status=shipment.status.value,
        address=str(shipment.address),
        lines=[line_to_dto(line) for line in shipment.lines],
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        order_id=order.order_id,
        customer_id=order.customer_id,
        status=order.status.value,
        shipping_address=str(order.shipping_address),
        lines=[line_to_dto(line) for line in order.order_lines],
        discounts=[f"{d.code} -{d.amount}" for d in order.discounts],
        payments=[f"{p.payment_type} {p.amount}" for p in order.payments],
        shipments=[shipment_to_dto(s) for s in order.shipments],
        history=[
            StatusChangeDTO(
                status=change.status.value,
                at=change.at.strftime("%Y-%m-%d %H:%M:%S UTC"),
            )
            for change in order.status_history
        ],
        total=str(order.total_price),
        amount_paid=str(order.amount_paid),
        balance_due=format_signed(order.get_balance_due()),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
