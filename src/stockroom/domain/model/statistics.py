"""Dashboard statistics, derived on demand and never stored."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from stockroom.domain.model.product import Product
from stockroom.domain.model.value_objects import Money


@dataclass(frozen=True)
class InventoryStatistics:
    total_products: int
    total_value: Money
    low_stock_items: int
    monthly_revenue: Money

    @staticmethod
    def derive(
        products: Iterable[Product],
        monthly_revenue: Money | None = None,
    ) -> InventoryStatistics:
        """Single pass over the catalog.

        Monthly revenue is not derivable from products; the caller passes
        it in (zero when unknown).
        """
        count = 0
        value = Money.zero()
        low = 0
        for product in products:
            count += 1
            value = value + product.inventory_value
            if product.is_low_stock:
                low += 1
        return InventoryStatistics(
            total_products=count,
            total_value=value,
            low_stock_items=low,
            monthly_revenue=monthly_revenue or Money.zero(),
        )
