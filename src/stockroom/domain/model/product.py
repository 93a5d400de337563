"""Product aggregate.

Products live independently of invoices.  They have their own lifecycle:
prices and stock levels change, products are added and removed from the
catalog.  Invoices only ever hold a product *identifier* plus a snapshot
of its name and price.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.value_objects import Money


class Category(Enum):
    GRAINS = "Grains"
    COOKING_OIL = "Cooking Oil"
    PASTA = "Pasta"
    CANNED_GOODS = "Canned Goods"
    BAKERY = "Bakery"
    DAIRY = "Dairy"
    FRUITS = "Fruits"
    VEGETABLES = "Vegetables"
    CLEANING = "Cleaning"
    PERSONAL_CARE = "Personal Care"
    BEVERAGES = "Beverages"
    SNACKS = "Snacks"
    FROZEN = "Frozen"
    OTHER = "Other"

    @staticmethod
    def parse(raw: str | Category) -> Category:
        """Match a category by display value or member name, case-insensitively."""
        if isinstance(raw, Category):
            return raw
        if not isinstance(raw, str):
            raise ValidationError(f"Category must be text, got {raw!r}")
        wanted = raw.strip().lower()
        for category in Category:
            if wanted in (category.value.lower(), category.name.lower()):
                return category
        raise ValidationError(f"Unknown category: {raw!r}")


class StockStatus(Enum):
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``price`` is never negative (guaranteed by Money)
    - ``stock`` and ``min_stock`` are never negative
    """

    id: str
    name: str
    category: Category
    price: Money
    stock: int
    min_stock: int
    sku: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Stock cannot be negative, got {self.stock}")
        if self.min_stock < 0:
            raise ValidationError(
                f"Minimum stock cannot be negative, got {self.min_stock}"
            )

    @property
    def inventory_value(self) -> Money:
        return self.price * self.stock

    @property
    def is_low_stock(self) -> bool:
        """Low stock is inclusive: stock equal to the threshold counts."""
        return self.stock <= self.min_stock

    @property
    def stock_status(self) -> StockStatus:
        if self.stock == 0:
            return StockStatus.OUT_OF_STOCK
        if self.is_low_stock:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK


@dataclass(frozen=True)
class ProductInput:
    """Raw product fields coming from a form or the command line.

    Every field is optional.  ``None`` means "not provided": an update
    only touches the fields that are set.
    """

    name: str | None = None
    category: Category | None = None
    price: Money | None = None
    stock: int | None = None
    min_stock: int | None = None
    sku: str | None = None

    @staticmethod
    def parse(
        name: str | None = None,
        category: str | Category | None = None,
        price: Any = None,
        stock: Any = None,
        min_stock: Any = None,
        sku: str | None = None,
    ) -> ProductInput:
        """Coerce raw values into typed fields.

        Empty text fields are treated as not provided.  Numbers must parse
        and must not be negative.
        """
        return ProductInput(
            name=_text(name),
            category=Category.parse(category) if _text(category) else None,
            price=Money.of(price) if _present(price) else None,
            stock=_count(stock, "Stock") if _present(stock) else None,
            min_stock=_count(min_stock, "Minimum stock") if _present(min_stock) else None,
            sku=_text(sku),
        )

    def provided(self) -> dict[str, Any]:
        """Return only the fields that were set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def is_empty(self) -> bool:
        return not self.provided()


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, Category):
        return value.value
    text = str(value).strip()
    return text or None


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def _count(value: Any, label: str) -> int:
    try:
        number = int(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"{label} must be a whole number, got {value!r}") from exc
    if number < 0:
        raise ValidationError(f"{label} cannot be negative, got {number}")
    return number
