"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from stockroom.application.dto import ProductDTO
from stockroom.domain.model.product import Category, ProductInput
from stockroom.infrastructure.bootstrap import open_dashboard
from stockroom.infrastructure.cli.runner import run

CATEGORY_CHOICE = click.Choice([c.value for c in Category], case_sensitive=False)


def _display_products(products: list[ProductDTO]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(
        f"{'ID':<36}  {'Name':<20} {'Category':<14} {'SKU':<10} "
        f"{'Price':>10} {'Stock':>6} {'Min':>5}  Status"
    )
    click.echo("-" * 120)
    for p in products:
        click.echo(
            f"{p.id:<36}  {p.name:<20} {p.category:<14} {p.sku:<10} "
            f"{p.price:>10} {p.stock:>6} {p.min_stock:>5}  {p.status}"
        )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""

    async def _list():
        async with open_dashboard() as dashboard:
            return [ProductDTO.from_product(p) for p in dashboard.inventory]

    _display_products(run(_list()))


@click.command("low-stock")
def product_low_stock() -> None:
    """List products at or below their minimum stock."""

    async def _low():
        async with open_dashboard() as dashboard:
            return [ProductDTO.from_product(p) for p in dashboard.inventory.low_stock()]

    _display_products(run(_low()))


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--category", required=True, type=CATEGORY_CHOICE, help="Product category.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", required=True, help="Units in stock.")
@click.option("--min-stock", required=True, help="Low-stock threshold.")
@click.option("--sku", required=True, help="Stock keeping unit.")
def product_add(
    name: str, category: str, price: str, stock: str, min_stock: str, sku: str
) -> None:
    """Add a new product to the catalog."""

    async def _add():
        data = ProductInput.parse(
            name=name, category=category, price=price,
            stock=stock, min_stock=min_stock, sku=sku,
        )
        async with open_dashboard() as dashboard:
            return await dashboard.inventory.add(data)

    product = run(_add())
    click.echo(f"Product {product.id} '{product.name}' added at {product.price}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--category", default=None, type=CATEGORY_CHOICE, help="New category.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--stock", default=None, help="New stock level.")
@click.option("--min-stock", default=None, help="New low-stock threshold.")
@click.option("--sku", default=None, help="New SKU.")
def product_update(
    product_id: str,
    name: str | None,
    category: str | None,
    price: str | None,
    stock: str | None,
    min_stock: str | None,
    sku: str | None,
) -> None:
    """Update some fields of a product."""

    async def _update():
        data = ProductInput.parse(
            name=name, category=category, price=price,
            stock=stock, min_stock=min_stock, sku=sku,
        )
        async with open_dashboard() as dashboard:
            return await dashboard.inventory.update(product_id, data)

    product = run(_update())
    click.echo(f"Product {product.id} '{product.name}' updated")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.confirmation_option(prompt="Delete this product?")
def product_delete(product_id: str) -> None:
    """Delete a product from the catalog."""

    async def _delete():
        async with open_dashboard() as dashboard:
            await dashboard.inventory.remove(product_id)

    run(_delete())
    click.echo(f"Product {product_id} deleted")
