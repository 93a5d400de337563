"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (JSON file, hosted REST
backend) live in the infrastructure layer.

Every method may suspend; implementations raise ``PersistenceError``
(or its ``EntityNotFoundError`` subclass) on failure and never retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from stockroom.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    async def list_all(self) -> list[Product]:
        """Return every product, most recently created first."""

    @abstractmethod
    async def insert(self, fields: dict[str, Any]) -> Product:
        """Create a product from *fields* and return the stored row."""

    @abstractmethod
    async def update(self, product_id: str, fields: dict[str, Any]) -> Product:
        """Apply *fields* to one product and return the updated row.

        Raises EntityNotFoundError if no product has *product_id*.
        """

    @abstractmethod
    async def delete(self, product_id: str) -> None:
        """Delete one product by id."""
