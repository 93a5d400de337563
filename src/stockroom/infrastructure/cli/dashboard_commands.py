"""CLI command for the dashboard statistics."""

from __future__ import annotations

import click

from stockroom.application.dto import StatisticsDTO
from stockroom.infrastructure.bootstrap import open_dashboard
from stockroom.infrastructure.cli.runner import run


@click.command("stats")
def dashboard_stats() -> None:
    """Show product count, inventory value, low stock and monthly revenue."""

    async def _stats():
        async with open_dashboard() as dashboard:
            return StatisticsDTO.from_statistics(await dashboard.stats())

    stats = run(_stats())
    click.echo(f"{'Total products':<18} {stats.total_products:>14}")
    click.echo(f"{'Inventory value':<18} {stats.total_value:>14}")
    click.echo(f"{'Low stock items':<18} {stats.low_stock_items:>14}")
    click.echo(f"{'Monthly revenue':<18} {stats.monthly_revenue:>14}")
