"""Book aggregate.

Books live in the catalog, independently of orders. Orders only keep
the book's id together with a title and price snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass

from bookstore.domain.exceptions import ValidationError
from bookstore.domain.model.value_objects import Money


@dataclass
class Book:
    """A book in the catalog."""

    id: str
    title: str
    price: Money

    def update_price(self, new_price: Money) -> None:
        """Change the list price.

        Existing order lines are unaffected; they captured the price
        when they were added.
        """
        if new_price.amount <= 0:
            raise ValidationError("Book price must be greater than zero")
        self.price = new_price
