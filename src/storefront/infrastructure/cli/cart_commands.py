"""CLI commands for a customer's cart."""

from __future__ import annotations

import click

from storefront.application.add_cart_item import AddCartItemHandler
from storefront.application.dto import CartDTO
from storefront.application.remove_cart_item import RemoveCartItemHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.application.view_cart import ViewCartHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import cart_repository, catalog_repository, inventory_ledger
from storefront.infrastructure.cli.errors import command_error


def parse_option_ids(raw: str | None) -> list[str]:
    """Parse 'v1,v2' into ['v1', 'v2']; empty input means no options."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _display_cart(dto: CartDTO) -> None:
    click.echo(f"Cart for {dto.customer_id}  ({dto.count} line(s), updated {dto.updated_at})")
    if not dto.items:
        click.echo("  (empty)")
        return
    click.echo()
    click.echo(f"  {'Product':<20} {'Options':<22} {'Qty':>5} {'Price':>10} {'Subtotal':>10}  Stock")
    click.echo(f"  {'-'*78}")
    for item in dto.items:
        options = "; ".join(item.option_labels) or "-"
        stock = str(item.available) if item.is_available else "unavailable"
        click.echo(
            f"  {item.product_name:<20} {options:<22} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.subtotal:>10}  {stock}"
        )
    click.echo(f"  {'-'*78}")
    click.echo(f"  {'Total':<49} {dto.total_amount:>21}")


_customer = click.option("--customer", required=True, help="Customer ID.")
_product = click.option("--product", required=True, help="Product ID.")
_options = click.option("--options", default=None, help="Option value IDs as 'v1,v2'.")


@click.command("show")
@_customer
def cart_show(customer: str) -> None:
    """Show a cart with live prices and availability."""
    handler = ViewCartHandler(
        cart_repo=cart_repository(),
        catalog=catalog_repository(),
        ledger=inventory_ledger(),
    )

    try:
        dto = handler.handle(customer)
    except DomainException as exc:
        raise command_error(exc)

    _display_cart(dto)


@click.command("add")
@_customer
@_product
@_options
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
def cart_add(customer: str, product: str, options: str | None, quantity: int) -> None:
    """Add a product (with its options) to the cart."""
    handler = AddCartItemHandler(
        cart_repo=cart_repository(),
        catalog=catalog_repository(),
        ledger=inventory_ledger(),
    )

    try:
        dto = handler.handle(customer, product, parse_option_ids(options), quantity)
    except DomainException as exc:
        raise command_error(exc)

    click.echo("Item added to cart.")
    _display_cart(dto)


@click.command("update")
@_customer
@_product
@_options
@click.option("--quantity", required=True, type=int, help="New quantity for the line.")
def cart_update(customer: str, product: str, options: str | None, quantity: int) -> None:
    """Replace the quantity of a cart line."""
    handler = UpdateCartItemHandler(
        cart_repo=cart_repository(),
        catalog=catalog_repository(),
        ledger=inventory_ledger(),
    )

    try:
        dto = handler.handle(customer, product, parse_option_ids(options), quantity)
    except DomainException as exc:
        raise command_error(exc)

    click.echo("Cart updated.")
    _display_cart(dto)


@click.command("remove")
@_customer
@_product
@_options
def cart_remove(customer: str, product: str, options: str | None) -> None:
    """Remove a line from the cart."""
    handler = RemoveCartItemHandler(
        cart_repo=cart_repository(),
        catalog=catalog_repository(),
        ledger=inventory_ledger(),
    )

    try:
        dto = handler.handle(customer, product, parse_option_ids(options))
    except DomainException as exc:
        raise command_error(exc)

    click.echo("Item removed from cart.")
    _display_cart(dto)
