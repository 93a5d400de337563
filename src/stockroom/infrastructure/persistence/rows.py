"""Translation between domain objects and backend rows.

Both backends store the same row shape as the hosted ``products``,
``invoices`` and ``invoice_items`` tables: snake_case columns, prices as
numbers, timestamps as ISO-8601 strings.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from stockroom.domain.exceptions import PersistenceError, ValidationError
from stockroom.domain.model.clock import utc_moment
from stockroom.domain.model.invoice import InvoiceRecord, InvoiceRecordLine
from stockroom.domain.model.product import Category, Product
from stockroom.domain.model.value_objects import Money

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = ("name", "category", "price", "stock", "min_stock", "sku")


def product_from_row(row: dict[str, Any]) -> Product:
    try:
        return Product(
            id=str(row["id"]),
            name=row["name"],
            category=_category(row["category"]),
            price=Money(Decimal(str(row["price"]))),
            stock=int(row["stock"]),
            min_stock=int(row["min_stock"]),
            sku=row.get("sku") or "",
            created_at=_parse_time(row.get("created_at")),
            updated_at=_parse_time(row.get("updated_at")),
        )
    except (KeyError, TypeError, ValueError, ValidationError) as exc:
        raise PersistenceError(f"Malformed product row: {row!r}") from exc


def product_fields_to_row(fields: dict[str, Any]) -> dict[str, Any]:
    """Map ProductInput fields (plus ``updated_at``) onto column values."""
    row: dict[str, Any] = {}
    for name, value in fields.items():
        if isinstance(value, Category):
            value = value.value
        elif isinstance(value, Money):
            value = str(value.amount)
        elif isinstance(value, datetime):
            value = value.isoformat()
        row[name] = value
    return row


def invoice_to_row(record: InvoiceRecord) -> dict[str, Any]:
    return {
        "invoice_number": record.invoice_number,
        "customer_name": record.customer_name,
        "customer_phone": record.customer_phone or None,
        "subtotal": str(record.subtotal.amount),
        "tax": str(record.tax.amount),
        "total": str(record.total.amount),
        "created_at": record.created_at.isoformat(),
    }


def invoice_item_to_row(item: InvoiceRecordLine, invoice_id: str) -> dict[str, Any]:
    return {
        "invoice_id": invoice_id,
        "product_id": item.product_id or None,
        "product_name": item.product_name,
        "product_sku": item.product_sku,
        "price": str(item.price.amount),
        "quantity": item.quantity,
        "total": str(item.total.amount),
    }


def invoice_from_rows(row: dict[str, Any], item_rows: list[dict[str, Any]]) -> InvoiceRecord:
    try:
        return InvoiceRecord(
            invoice_number=row["invoice_number"],
            customer_name=row["customer_name"],
            customer_phone=row.get("customer_phone") or "",
            items=tuple(
                InvoiceRecordLine(
                    product_id=item.get("product_id") or "",
                    product_name=item["product_name"],
                    product_sku=item.get("product_sku") or "",
                    price=_money(item["price"]),
                    quantity=int(item["quantity"]),
                    total=_money(item["total"]),
                )
                for item in item_rows
            ),
            subtotal=_money(row["subtotal"]),
            tax=_money(row["tax"]),
            total=_money(row["total"]),
            created_at=utc_moment(
                datetime.fromisoformat(str(row["created_at"]).replace("Z", "+00:00"))
            ),
        )
    except (KeyError, TypeError, ValueError, ValidationError) as exc:
        raise PersistenceError(f"Malformed invoice row: {row!r}") from exc


def _money(value: Any) -> Money:
    return Money(Decimal(str(value)))


def _parse_time(value: Any) -> datetime | None:
    if not value:
        return None
    return utc_moment(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


def _category(value: Any) -> Category:
    """Read a stored category; text outside the known set is filed as Other."""
    if isinstance(value, str) and value.strip():
        try:
            return Category.parse(value)
        except ValidationError:
            logger.warning("Unknown category %r, filing product as %s", value, Category.OTHER.value)
            return Category.OTHER
    return Category.parse(value)
