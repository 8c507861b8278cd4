"""CLI commands for a customer's orders."""

from __future__ import annotations

import click

from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.confirm_payment import ConfirmPaymentHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderDTO, OrderPageDTO
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor
from storefront.domain.repository.order_repository import OrderFilter
from storefront.infrastructure.bootstrap import (
    address_repository,
    cart_repository,
    catalog_repository,
    inventory_ledger,
    order_repository,
    payment_gateway,
)
from storefront.infrastructure.cli.errors import command_error


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo(f"Payment:  {dto.payment_method} ({dto.payment_status})")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Options':<22} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*71}")
    for item in dto.items:
        options = "; ".join(item.option_labels) or "-"
        click.echo(
            f"  {item.product_name:<20} {options:<22} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*71}")
    click.echo(f"  {'Order Total':<49} {dto.total:>21}")


def display_page(page: OrderPageDTO) -> None:
    if not page.orders:
        click.echo("No orders found.")
    else:
        click.echo(f"  {'ID':>5}  {'Customer':<12} {'Status':<11} {'Payment':<16} {'Total':>10}  Created")
        click.echo(f"  {'-'*78}")
        for o in page.orders:
            click.echo(
                f"  {o.id:>5}  {o.customer_id:<12} {o.status:<11} "
                f"{o.payment_status:<16} {o.total:>10}  {o.created_at}"
            )
    click.echo()
    click.echo(f"Page {page.page} of {max(page.total_pages, 1)}  ({page.total} order(s))")

    if page.stats is not None:
        stats = page.stats
        click.echo()
        click.echo(f"Revenue:       {stats.total_revenue}")
        click.echo(f"Average order: {stats.avg_order_value}")
        for status, count in stats.status_breakdown.items():
            click.echo(f"  {status:<11} {count:>5}")


def cancel_handler() -> CancelOrderHandler:
    return CancelOrderHandler(
        order_repo=order_repository(),
        ledger=inventory_ledger(),
        gateway=payment_gateway(),
    )


_customer = click.option("--customer", required=True, help="Customer ID.")
_order_id = click.option("--id", "order_id", required=True, type=int, help="Order ID.")


@click.command("create")
@_customer
@click.option("--address", required=True, help="Shipping address ID.")
@click.option("--payment", "payment_method", default="cash", show_default=True, help="Payment method.")
def order_create(customer: str, address: str, payment_method: str) -> None:
    """Check out the customer's cart."""
    handler = CreateOrderHandler(
        order_repo=order_repository(),
        cart_repo=cart_repository(),
        catalog=catalog_repository(),
        address_repo=address_repository(),
        ledger=inventory_ledger(),
        gateway=payment_gateway(),
    )

    try:
        placed = handler.handle(customer, address, payment_method)
    except DomainException as exc:
        raise command_error(exc)

    click.echo(f"Order #{placed.order.id} created.")
    display_order(placed.order)
    if placed.client_secret:
        click.echo()
        click.echo(f"Client secret: {placed.client_secret}")


@click.command("list")
@_customer
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--limit", default=10, show_default=True, type=int)
def order_list(customer: str, page: int, limit: int) -> None:
    """List the customer's orders, newest first."""
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        result = handler.handle(OrderFilter(customer_id=customer), page=page, limit=limit)
    except DomainException as exc:
        raise command_error(exc)

    display_page(result)


@click.command("show")
@_customer
@_order_id
def order_show(customer: str, order_id: int) -> None:
    """Show one of the customer's orders."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, Actor.customer(customer))
    except DomainException as exc:
        raise command_error(exc)

    display_order(dto)


@click.command("cancel")
@_customer
@_order_id
def order_cancel(customer: str, order_id: int) -> None:
    """Cancel an order (refunds a completed payment and restores stock)."""
    try:
        dto = cancel_handler().handle(order_id, Actor.customer(customer))
    except DomainException as exc:
        raise command_error(exc)

    click.echo(f"Order #{order_id} cancelled (payment={dto.payment_status}).")


@click.command("confirm-payment")
@_customer
@_order_id
@click.option("--ref", "transaction_ref", required=True, help="Payment intent reference.")
def order_confirm_payment(customer: str, order_id: int, transaction_ref: str) -> None:
    """Record that the processor confirmed the order's payment intent."""
    handler = ConfirmPaymentHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, transaction_ref, Actor.customer(customer))
    except DomainException as exc:
        raise command_error(exc)

    click.echo(f"Order #{order_id} payment {dto.payment_status}.")
