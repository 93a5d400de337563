"""Application service: the in-memory product catalog.

The store never applies a change locally before the backend has
confirmed it.  A failed call leaves the snapshot exactly as it was, so
the caller can retry the same operation.  There is no optimistic
update, no retry and no rollback.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime, timezone

from stockroom.application.observable import Observable
from stockroom.domain.exceptions import PersistenceError
from stockroom.domain.model.product import Product, ProductInput
from stockroom.domain.model.statistics import InventoryStatistics
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class InventoryStore(Observable):

    def __init__(self, product_repo: ProductRepository) -> None:
        super().__init__()
        self._product_repo = product_repo
        self._products: list[Product] = []
        self.is_loaded = False

    # --- Queries --------------------------------------------------------------

    @property
    def products(self) -> list[Product]:
        """Current snapshot, most recently created first."""
        return list(self._products)

    def list(self) -> list[Product]:
        return self.products

    def get(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def low_stock(self) -> list[Product]:
        return [p for p in self._products if p.is_low_stock]

    def stats(self, monthly_revenue: Money | None = None) -> InventoryStatistics:
        """Recomputed from the snapshot on every call."""
        return InventoryStatistics.derive(self._products, monthly_revenue)

    def __iter__(self) -> Iterator[Product]:
        return iter(self.products)

    def __len__(self) -> int:
        return len(self._products)

    # --- Commands -------------------------------------------------------------

    async def load(self) -> list[Product]:
        """Replace the snapshot with the backend's current catalog."""
        try:
            products = await self._product_repo.list_all()
        except PersistenceError as exc:
            logger.error("Error fetching products: %s", exc)
            raise
        self._products = list(products)
        self.is_loaded = True
        logger.debug("Loaded %d products", len(self._products))
        self._notify()
        return self.products

    refresh = load

    async def add(self, data: ProductInput) -> Product:
        """Persist a new product and prepend it to the snapshot."""
        try:
            product = await self._product_repo.insert(data.provided())
        except PersistenceError as exc:
            logger.error("Error adding product: %s", exc)
            raise
        self._products = [product, *self._products]
        logger.info("Product %s '%s' added", product.id, product.name)
        self._notify()
        return product

    async def update(self, product_id: str, data: ProductInput) -> Product:
        """Apply the provided fields of *data* to one product.

        The backend is written first; the local entry is replaced only
        with the row the backend returns.
        """
        fields = data.provided()
        fields["updated_at"] = datetime.now(timezone.utc)
        try:
            product = await self._product_repo.update(product_id, fields)
        except PersistenceError as exc:
            logger.error("Error updating product %s: %s", product_id, exc)
            raise
        self._products = [
            product if existing.id == product_id else existing
            for existing in self._products
        ]
        logger.info("Product %s updated", product_id)
        self._notify()
        return product

    async def remove(self, product_id: str) -> None:
        """Delete remotely, then drop the local entry if it is present."""
        try:
            await self._product_repo.delete(product_id)
        except PersistenceError as exc:
            logger.error("Error deleting product %s: %s", product_id, exc)
            raise
        self._products = [p for p in self._products if p.id != product_id]
        logger.info("Product %s deleted", product_id)
        self._notify()

    def clear(self) -> None:
        """Forget the snapshot (used on sign-out)."""
        self._products = []
        self.is_loaded = False
        self._notify()
