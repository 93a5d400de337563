"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry display-ready data from the application layer to the CLI
without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockroom.domain.model.clock import utc_moment
from stockroom.domain.model.invoice import InvoiceRecord
from stockroom.domain.model.product import Product
from stockroom.domain.model.statistics import InventoryStatistics


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    category: str
    price: str  # formatted, e.g. "$15.00"
    stock: int
    min_stock: int
    sku: str
    status: str

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            category=product.category.value,
            price=str(product.price),
            stock=product.stock,
            min_stock=product.min_stock,
            sku=product.sku,
            status=product.stock_status.value,
        )


@dataclass(frozen=True)
class StatisticsDTO:
    total_products: int
    total_value: str
    low_stock_items: int
    monthly_revenue: str

    @staticmethod
    def from_statistics(stats: InventoryStatistics) -> StatisticsDTO:
        return StatisticsDTO(
            total_products=stats.total_products,
            total_value=str(stats.total_value),
            low_stock_items=stats.low_stock_items,
            monthly_revenue=str(stats.monthly_revenue),
        )


@dataclass(frozen=True)
class InvoiceLineDTO:
    product_name: str
    quantity: int
    price: str
    total: str


@dataclass(frozen=True)
class InvoiceDTO:
    invoice_number: str
    customer_name: str
    customer_phone: str
    items: list[InvoiceLineDTO]
    subtotal: str
    tax: str
    total: str
    created_at: str

    @staticmethod
    def from_record(record: InvoiceRecord) -> InvoiceDTO:
        return InvoiceDTO(
            invoice_number=record.invoice_number,
            customer_name=record.customer_name,
            customer_phone=record.customer_phone,
            items=[
                InvoiceLineDTO(
                    product_name=item.product_name,
                    quantity=item.quantity,
                    price=str(item.price),
                    total=str(item.total),
                )
                for item in record.items
            ],
            subtotal=str(record.subtotal),
            tax=str(record.tax),
            total=str(record.total),
            created_at=utc_moment(record.created_at).strftime("%Y-%m-%d %H:%M UTC"),
        )
