"""Application service: Add Book use case."""

from __future__ import annotations

import logging

from bookstore.domain.exceptions import ValidationError
from bookstore.domain.model.book import Book
from bookstore.domain.model.value_objects import Money
from bookstore.domain.repository.book_catalog import BookCatalog

logger = logging.getLogger(__name__)


class AddBookHandler:

    def __init__(self, catalog: BookCatalog) -> None:
        self._catalog = catalog

    def handle(self, title: str, price: str) -> Book:
        """Add a new book to the catalog."""
        if not title or not title.strip():
            raise ValidationError("Book title is required")

        existing = self._catalog.get_by_title(title.strip())
        if existing is not None:
            raise ValidationError(f"Book '{title}' already exists")

        money = Money.of(price)
        if money.is_zero:
            raise ValidationError("Book price must be greater than zero")

        # Auto-assign ID based on existing books
        numeric_ids = [int(b.id) for b in self._catalog.list_all() if b.id.isdigit()]
        next_id = str(max(numeric_ids, default=0) + 1)

        book = Book(id=next_id, title=title.strip(), price=money)
        self._catalog.save(book)
        logger.info("Added book %s '%s' at %s", book.id, book.title, book.price)
        return book
