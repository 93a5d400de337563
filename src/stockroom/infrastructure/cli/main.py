import os

import click

from stockroom.infrastructure.cli.auth_commands import (
    auth_add_user,
    auth_login,
    auth_logout,
    auth_whoami,
)
from stockroom.infrastructure.cli.dashboard_commands import dashboard_stats
from stockroom.infrastructure.cli.invoice_commands import invoice_create
from stockroom.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_low_stock,
    product_update,
)
from stockroom.infrastructure.logging_config import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """Stockroom: store inventory and invoicing"""
    configure_logging("DEBUG" if verbose else os.environ.get("STOCKROOM_LOG_LEVEL", "WARNING"))


@cli.group()
def auth() -> None:
    """Log in and out."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def invoice() -> None:
    """Generate invoices."""


# Register subcommands
auth.add_command(auth_add_user)
auth.add_command(auth_login)
auth.add_command(auth_logout)
auth.add_command(auth_whoami)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_low_stock)
product.add_command(product_update)
invoice.add_command(invoice_create)
cli.add_command(dashboard_stats)
