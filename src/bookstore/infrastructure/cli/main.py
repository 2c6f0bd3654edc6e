import click

from bookstore.infrastructure.bootstrap import configure_logging
from bookstore.infrastructure.cli.book_commands import book_add, book_list, book_update
from bookstore.infrastructure.cli.order_commands import (
    order_add_line,
    order_create,
    order_discount,
    order_list,
    order_pay,
    order_remove_line,
    order_ship,
    order_shipment_status,
    order_show,
    order_status,
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Bookstore — order management"""
    configure_logging(verbose)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def book() -> None:
    """Manage the book catalog."""


# Register subcommands
order.add_command(order_add_line)
order.add_command(order_create)
order.add_command(order_discount)
order.add_command(order_list)
order.add_command(order_pay)
order.add_command(order_remove_line)
order.add_command(order_ship)
order.add_command(order_shipment_status)
order.add_command(order_show)
order.add_command(order_status)
book.add_command(book_add)
book.add_command(book_list)
book.add_command(book_update)
