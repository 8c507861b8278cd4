"""CLI commands for the inventory ledger."""

from __future__ import annotations

import click

from storefront.application.set_stock import SetStockHandler
from storefront.application.show_stock import ShowStockHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import StockKey
from storefront.infrastructure.bootstrap import catalog_repository, inventory_ledger
from storefront.infrastructure.cli.errors import command_error


@click.command("set")
@click.option("--product", "product_id", default=None, help="Product ID.")
@click.option("--option", "option_value_id", default=None, help="Option value ID.")
@click.option("--quantity", required=True, type=int, help="Units on hand.")
def stock_set(product_id: str | None, option_value_id: str | None, quantity: int) -> None:
    """Set the stock level of a product or an option value."""
    if bool(product_id) == bool(option_value_id):
        raise click.UsageError("Pass exactly one of --product or --option.")
    key = StockKey.product(product_id) if product_id else StockKey.option(option_value_id)

    handler = SetStockHandler(ledger=inventory_ledger(), catalog=catalog_repository())

    try:
        handler.handle(key, quantity)
    except DomainException as exc:
        raise command_error(exc)

    click.echo(f"Stock for {key} set to {quantity}.")


@click.command("show")
def stock_show() -> None:
    """Show every stock counter."""
    handler = ShowStockHandler(ledger=inventory_ledger())

    try:
        lines = handler.handle()
    except DomainException as exc:
        raise command_error(exc)

    if not lines:
        click.echo("No stock records.")
        return

    click.echo(f"  {'Counter':<30} {'Quantity':>10}")
    click.echo(f"  {'-'*41}")
    for line in lines:
        click.echo(f"  {line.key:<30} {line.quantity:>10}")
