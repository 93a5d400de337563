"""ProductRepository backed by the hosted ``products`` table."""

from __future__ import annotations

from typing import Any

from stockroom.domain.exceptions import EntityNotFoundError, PersistenceError
from stockroom.domain.model.product import Product
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.infrastructure.persistence.rows import product_fields_to_row, product_from_row
from stockroom.infrastructure.supabase_client import SupabaseClient

TABLE = "products"


class SupabaseProductRepository(ProductRepository):

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def list_all(self) -> list[Product]:
        rows = await self._client.rest(
            "GET", TABLE, params={"select": "*", "order": "created_at.desc"}
        )
        return [product_from_row(row) for row in rows or []]

    async def insert(self, fields: dict[str, Any]) -> Product:
        rows = await self._client.rest(
            "POST", TABLE, json=[product_fields_to_row(fields)], return_rows=True
        )
        if not rows:
            raise PersistenceError("Insert returned no product row")
        return product_from_row(rows[0])

    async def update(self, product_id: str, fields: dict[str, Any]) -> Product:
        rows = await self._client.rest(
            "PATCH",
            TABLE,
            params={"id": f"eq.{product_id}"},
            json=product_fields_to_row(fields),
            return_rows=True,
        )
        if not rows:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product_from_row(rows[0])

    async def delete(self, product_id: str) -> None:
        await self._client.rest("DELETE", TABLE, params={"id": f"eq.{product_id}"})
