"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from bookstore.application.add_order_line import AddOrderLineHandler
from bookstore.application.apply_discount import ApplyDiscountHandler
from bookstore.application.change_status import ChangeStatusHandler
from bookstore.application.create_shipment import CreateShipmentHandler
from bookstore.application.dto import OrderDTO, OrderItemSpec, ShipmentDTO
from bookstore.application.list_customer_orders import ListCustomerOrdersHandler
from bookstore.application.place_order import PlaceOrderHandler
from bookstore.application.record_payment import RecordPaymentHandler
from bookstore.application.remove_order_line import RemoveOrderLineHandler
from bookstore.application.show_order import ShowOrderHandler
from bookstore.application.update_shipment import UpdateShipmentHandler
from bookstore.domain.exceptions import DomainException
from bookstore.domain.model.value_objects import Address
from bookstore.infrastructure.bootstrap import book_catalog, order_repository


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'Dune:2,Emma:1' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'Book:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for book '{name}'."
            )
        specs.append(OrderItemSpec(book=name.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()

    click.echo(f"  {'Book':<30} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*57}")
    for line in dto.lines:
        click.echo(
            f"  {line.title:<30} {line.quantity:>5} {line.unit_price:>10} {line.line_price:>10}"
        )
    click.echo(f"  {'-'*57}")
    for discount in dto.discounts:
        click.echo(f"  Discount {discount}")
    click.echo(f"  {'Order Total':<37} {dto.total:>20}")
    click.echo(f"  {'Paid':<37} {dto.amount_paid:>20}")
    click.echo(f"  {'Balance Due':<37} {dto.balance_due:>20}")

    for shipment in dto.shipments:
        click.echo()
        _display_shipment(shipment)

    if dto.history:
        click.echo()
        click.echo("History:")
        for change in dto.history:
            click.echo(f"  {change.at}  {change.status}")


def _display_shipment(dto: ShipmentDTO) -> None:
    click.echo(f"Shipment #{dto.shipment_id}  (status={dto.status})  to {dto.address}")
    for line in dto.lines:
        click.echo(f"  {line.title:<30} {line.quantity:>5}")


@click.command("create")
@click.option("--customer", required=True, help="Customer id.")
@click.option("--street", required=True, help="Shipping street.")
@click.option("--city", required=True, help="Shipping city.")
@click.option("--region", required=True, help="Shipping state or region.")
@click.option("--postal-code", required=True, help="Shipping postal code.")
@click.option("--items", default=None, help="Initial lines as 'Book:Qty,Book:Qty'.")
def order_create(
    customer: str,
    street: str,
    city: str,
    region: str,
    postal_code: str,
    items: str | None,
) -> None:
    """Create a new order."""
    specs = _parse_items(items) if items else []

    handler = PlaceOrderHandler(
        order_repo=order_repository(),
        catalog=book_catalog(),
    )

    try:
        address = Address(street=street, city=city, region=region, postal_code=postal_code)
        dto = handler.handle(customer_id=customer, address=address, item_specs=specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_id} created  (status={dto.status})")
    click.echo(f"Order total: {dto.total}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--customer", required=True, help="Customer id.")
def order_list(customer: str) -> None:
    """List a customer's orders."""
    handler = ListCustomerOrdersHandler(order_repo=order_repository())
    orders = handler.handle(customer)

    if not orders:
        click.echo(f"No orders found for customer {customer}.")
        return

    click.echo(f"{'Order':<8} {'Status':<12} {'Lines':>6} {'Total':>10} {'Due':>10}")
    click.echo("-" * 50)
    for dto in orders:
        click.echo(
            f"{dto.order_id:<8} {dto.status:<12} {len(dto.lines):>6} "
            f"{dto.total:>10} {dto.balance_due:>10}"
        )


@click.command("add-line")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--book", required=True, help="Book id or title.")
@click.option("--quantity", required=True, type=int, help="Number of copies.")
def order_add_line(order_id: str, book: str, quantity: int) -> None:
    """Add a book to an order."""
    handler = AddOrderLineHandler(
        order_repo=order_repository(),
        catalog=book_catalog(),
    )

    try:
        dto = handler.handle(order_id, book, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id}: added {quantity} x '{book}'. Total {dto.total}")


@click.command("remove-line")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--book", "book_id", required=True, help="Book id.")
def order_remove_line(order_id: str, book_id: str) -> None:
    """Remove every line for a book from an order."""
    handler = RemoveOrderLineHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, book_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id}: removed book #{book_id}. Total {dto.total}")


@click.command("pay")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--type", "payment_type", required=True, help="Payment type (card, gift-card, ...).")
@click.option("--amount", required=True, help="Amount paid (e.g. 40.00).")
def order_pay(order_id: str, payment_type: str, amount: str) -> None:
    """Record a payment against an order."""
    handler = RecordPaymentHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, payment_type, amount)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id}: payment recorded. Balance due {dto.balance_due}")


@click.command("discount")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--code", required=True, help="Discount code.")
@click.option("--amount", required=True, help="Amount off (e.g. 5.00).")
def order_discount(order_id: str, code: str, amount: str) -> None:
    """Apply a discount code to an order."""
    handler = ApplyDiscountHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, code, amount)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id}: discount {code} applied. Total {dto.total}")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--to",
    "new_status",
    required=True,
    type=click.Choice(["NEW", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED"], case_sensitive=False),
    help="Target status.",
)
def order_status(order_id: str, new_status: str) -> None:
    """Change the status of an order."""
    handler = ChangeStatusHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, new_status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} is now {dto.status}.")


@click.command("ship")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--book", "books", required=True, multiple=True, help="Book id or title to ship (repeatable).")
def order_ship(order_id: str, books: tuple[str, ...]) -> None:
    """Ship some of an order's lines in a new shipment."""
    handler = CreateShipmentHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, list(books))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id}: shipment #{dto.shipment_id} created.")
    _display_shipment(dto)


@click.command("shipment-status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--shipment", "shipment_id", required=True, type=int, help="Shipment number.")
@click.option(
    "--to",
    "new_status",
    required=True,
    type=click.Choice(["PENDING", "IN_TRANSIT", "DELIVERED"], case_sensitive=False),
    help="Target shipment status.",
)
def order_shipment_status(order_id: str, shipment_id: int, new_status: str) -> None:
    """Advance a shipment's status."""
    handler = UpdateShipmentHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, shipment_id, new_status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id}: shipment #{dto.shipment_id} is now {dto.status}.")
