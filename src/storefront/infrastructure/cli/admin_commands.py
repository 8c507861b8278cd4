"""CLI commands for store administrators."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import click

from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler, parse_status
from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor
from storefront.domain.repository.order_repository import OrderFilter
from storefront.infrastructure.bootstrap import order_repository
from storefront.infrastructure.cli.errors import command_error
from storefront.infrastructure.cli.order_commands import cancel_handler, display_order, display_page

_order_id = click.option("--id", "order_id", required=True, type=int, help="Order ID.")


def _utc(value: datetime | None) -> datetime | None:
    return value.replace(tzinfo=timezone.utc) if value is not None else None


def _decimal(value: float | None) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


@click.command("list")
@click.option("--customer", default=None, help="Only this customer's orders.")
@click.option("--status", default=None, help="Only orders in this status.")
@click.option("--from", "created_from", type=click.DateTime(), default=None, help="Created on or after (UTC).")
@click.option("--to", "created_to", type=click.DateTime(), default=None, help="Created on or before (UTC).")
@click.option("--min-total", type=float, default=None)
@click.option("--max-total", type=float, default=None)
@click.option("--search", default=None, help="Text to find in the shipping address.")
@click.option("--sort-by", default="created_at", show_default=True,
              type=click.Choice(["created_at", "total", "status"]))
@click.option("--sort-order", default="desc", show_default=True, type=click.Choice(["asc", "desc"]))
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--limit", default=10, show_default=True, type=int)
@click.option("--stats", is_flag=True, default=False, help="Include revenue and status totals.")
def admin_list(
    customer: str | None,
    status: str | None,
    created_from: datetime | None,
    created_to: datetime | None,
    min_total: float | None,
    max_total: float | None,
    search: str | None,
    sort_by: str,
    sort_order: str,
    page: int,
    limit: int,
    stats: bool,
) -> None:
    """List all orders with filters, sorting and pagination."""
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        criteria = OrderFilter(
            customer_id=customer,
            status=parse_status(status) if status else None,
            created_from=_utc(created_from),
            created_to=_utc(created_to),
            min_total=_decimal(min_total),
            max_total=_decimal(max_total),
            search=search,
        )
        result = handler.handle(
            criteria,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            with_stats=stats,
        )
    except DomainException as exc:
        raise command_error(exc)

    display_page(result)


@click.command("show")
@_order_id
def admin_show(order_id: int) -> None:
    """Show any order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, Actor.admin())
    except DomainException as exc:
        raise command_error(exc)

    display_order(dto)


@click.command("status")
@_order_id
@click.option("--to", "new_status", required=True, help="Target status.")
def admin_status(order_id: int, new_status: str) -> None:
    """Move an order to its next status."""
    handler = UpdateOrderStatusHandler(
        order_repo=order_repository(),
        cancel_handler=cancel_handler(),
    )

    try:
        dto = handler.handle(order_id, new_status, Actor.admin())
    except DomainException as exc:
        raise command_error(exc)

    click.echo(f"Order #{order_id} is now {dto.status} (payment={dto.payment_status}).")


@click.command("cancel")
@_order_id
def admin_cancel(order_id: int) -> None:
    """Cancel any non-terminal order."""
    try:
        dto = cancel_handler().handle(order_id, Actor.admin())
    except DomainException as exc:
        raise command_error(exc)

    click.echo(f"Order #{order_id} cancelled (payment={dto.payment_status}).")
