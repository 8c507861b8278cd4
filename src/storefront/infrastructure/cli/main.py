import click

from storefront.infrastructure import settings
from storefront.infrastructure.cli.admin_commands import admin_cancel, admin_list, admin_show, admin_status
from storefront.infrastructure.cli.cart_commands import cart_add, cart_remove, cart_show, cart_update
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_confirm_payment,
    order_create,
    order_list,
    order_show,
)
from storefront.infrastructure.cli.stock_commands import stock_set, stock_show
from storefront.infrastructure.logging import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override STOREFRONT_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """Storefront — carts, checkout and order lifecycle"""
    configure_logging(log_level or settings.LOG_LEVEL)


@cli.group()
def cart() -> None:
    """Manage a customer's cart."""


@cli.group()
def order() -> None:
    """Check out and manage a customer's orders."""


@cli.group()
def admin() -> None:
    """Administer all orders."""


@cli.group()
def stock() -> None:
    """Manage stock levels."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_cancel)
order.add_command(order_confirm_payment)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
admin.add_command(admin_cancel)
admin.add_command(admin_list)
admin.add_command(admin_show)
admin.add_command(admin_status)
stock.add_command(stock_set)
stock.add_command(stock_show)
