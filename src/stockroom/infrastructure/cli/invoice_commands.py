"""CLI commands for invoices."""

from __future__ import annotations

import click

from stockroom.application.dto import InvoiceDTO
from stockroom.domain.exceptions import ValidationError
from stockroom.infrastructure.bootstrap import open_dashboard
from stockroom.infrastructure.cli.runner import run


def _parse_item(raw: str) -> tuple[str, int]:
    """Parse 'PRODUCT:QTY' (product id or SKU) into a pair."""
    if ":" not in raw:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'Product:Quantity'."
        )
    product, qty = raw.rsplit(":", 1)
    try:
        quantity = int(qty)
    except ValueError:
        quantity = 0
    if quantity <= 0:
        raise click.BadParameter(
            f"Invalid quantity in '{raw}'. Expected a positive whole number."
        )
    return product.strip(), quantity


def _display_invoice(dto: InvoiceDTO) -> None:
    click.echo(f"Invoice {dto.invoice_number}")
    click.echo(f"Customer: {dto.customer_name}")
    if dto.customer_phone:
        click.echo(f"Phone:    {dto.customer_phone}")
    click.echo(f"Date:     {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.price:>10} {item.total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>20}")
    click.echo(f"  {'Tax (8%)':<27} {dto.tax:>20}")
    click.echo(f"  {'Total':<27} {dto.total:>20}")


@click.command("create")
@click.option("--customer", default="", help="Customer name.")
@click.option("--phone", default="", help="Customer phone number.")
@click.option(
    "--item", "items", multiple=True,
    help="Line item as 'ProductIdOrSku:Qty'. Repeat for more lines.",
)
def invoice_create(customer: str, phone: str, items: tuple[str, ...]) -> None:
    """Generate an invoice from catalog products."""
    pairs = [_parse_item(raw) for raw in items]

    async def _create():
        async with open_dashboard() as dashboard:
            catalog = dashboard.inventory
            builder = dashboard.new_invoice()
            builder.set_customer(name=customer, phone=phone)
            for key, qty in pairs:
                product = catalog.get(key) or next(
                    (p for p in catalog if p.sku == key), None
                )
                if product is None:
                    raise ValidationError(f"Product not found: '{key}'")
                line_id = builder.add_line()
                builder.set_line_field(line_id, "quantity", qty)
                builder.set_line_field(line_id, "product_id", product.id)
            return InvoiceDTO.from_record(await dashboard.issue_invoice(builder))

    _display_invoice(run(_create()))
