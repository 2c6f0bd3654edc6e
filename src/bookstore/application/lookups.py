"""Lookup and parsing helpers shared by the application handlers."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from bookstore.domain.exceptions import EntityNotFoundError, ValidationError
from bookstore.domain.model.book import Book
from bookstore.domain.model.order import Order
from bookstore.domain.model.value_objects import Money
from bookstore.domain.repository.book_catalog import BookCatalog
from bookstore.domain.repository.order_repository import OrderRepository


def load_order(order_repo: OrderRepository, order_id: str) -> Order:
    order = order_repo.get(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order {order_id} not found")
    return order


def find_book(catalog: BookCatalog, ref: str) -> Book:
    """Resolve *ref* as a book id first, then as a case-insensitive title."""
    book = catalog.get_by_id(ref) or catalog.get_by_title(ref)
    if book is None:
        raise EntityNotFoundError(f"Book not found: '{ref}'")
    return book


def parse_positive_amount(
    raw: str,
    currency: str,
    error: type[ValidationError],
    label: str,
) -> Money:
    """Parse user input into Money, raising *error* unless it is > 0."""
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        raise error(f"Invalid {label} amount: {raw!r}") from None
    if not value.is_finite() or value <= 0:
        raise error(f"{label.capitalize()} amount must be positive, got {raw}")
    return Money(value, currency)
