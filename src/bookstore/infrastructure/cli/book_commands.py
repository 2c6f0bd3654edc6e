"""CLI commands for the book catalog."""

from __future__ import annotations

import click

from bookstore.application.add_book import AddBookHandler
from bookstore.application.update_book_price import UpdateBookPriceHandler
from bookstore.domain.exceptions import DomainException
from bookstore.infrastructure.bootstrap import book_catalog


@click.command("add")
@click.option("--title", required=True, help="Book title.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
def book_add(title: str, price: str) -> None:
    """Add a new book to the catalog."""
    handler = AddBookHandler(catalog=book_catalog())

    try:
        book = handler.handle(title=title, price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Book #{book.id} '{book.title}' added at {book.price}")


@click.command("list")
def book_list() -> None:
    """List all books in the catalog."""
    books = book_catalog().list_all()

    if not books:
        click.echo("No books found.")
        return

    click.echo(f"{'ID':<6} {'Title':<30} {'Price':>10}")
    click.echo("-" * 48)
    for b in books:
        click.echo(f"{b.id:<6} {b.title:<30} {str(b.price):>10}")


@click.command("update")
@click.option("--id", "book_id", required=True, help="Book ID.")
@click.option("--price", required=True, help="New price (e.g. 29.99).")
def book_update(book_id: str, price: str) -> None:
    """Update a book's price."""
    handler = UpdateBookPriceHandler(catalog=book_catalog())

    try:
        handler.handle(book_id=book_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Book #{book_id} price updated to ${price}")
