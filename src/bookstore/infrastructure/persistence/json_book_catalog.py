"""JSON-file-backed implementation of BookCatalog."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from bookstore.domain.model.book import Book
from bookstore.domain.model.value_objects import Money
from bookstore.domain.repository.book_catalog import BookCatalog


class JsonBookCatalog(BookCatalog):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- BookCatalog interface ------------------------------------------------

    def get_by_id(self, book_id: str) -> Book | None:
        return self._load().get(book_id)

    def get_by_title(self, title: str) -> Book | None:
        for book in self._load().values():
            if book.title.lower() == title.lower():
                return book
        return None

    def list_all(self) -> list[Book]:
        return list(self._load().values())

    def save(self, book: Book) -> None:
        books = self._load()
        books[book.id] = book
        self._persist(books)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Book]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {
            item["id"]: Book(
                id=item["id"],
                title=item["title"],
                price=Money(Decimal(item["price"]), item.get("currency", "USD")),
            )
            for item in raw
        }

    def _persist(self, books: dict[str, Book]) -> None:
        raw = [
            {
                "id": b.id,
                "title": b.title,
                "price": str(b.price.amount),
                "currency": b.price.currency,
            }
            for b in books.values()
        ]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
