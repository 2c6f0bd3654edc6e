"""Application service: Update Book Price use case."""

from __future__ import annotations

import logging

from bookstore.domain.exceptions import EntityNotFoundError
from bookstore.domain.model.value_objects import Money
from bookstore.domain.repository.book_catalog import BookCatalog

logger = logging.getLogger(__name__)


class UpdateBookPriceHandler:

    def __init__(self, catalog: BookCatalog) -> None:
        self._catalog = catalog

    def handle(self, book_id: str, new_price: str) -> None:
        """Update a book's list price.

        Lines already on orders keep the price they were added at.
        """
        book = self._catalog.get_by_id(book_id)
        if book is None:
            raise EntityNotFoundError(f"Book with ID '{book_id}' not found")

        book.update_price(Money.of(new_price))
        self._catalog.save(book)
        logger.info("Book %s price updated to %s", book_id, book.price)
