"""JSON-file-backed implementation of ProductRepository.

Rows are kept newest first, which is the order ``list_all`` promises.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from stockroom.domain.exceptions import EntityNotFoundError, PersistenceError
from stockroom.domain.model.product import Product
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.infrastructure.persistence.rows import (
    PRODUCT_COLUMNS,
    product_fields_to_row,
    product_from_row,
)


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    async def list_all(self) -> list[Product]:
        return [product_from_row(row) for row in self._load()]

    async def insert(self, fields: dict[str, Any]) -> Product:
        row = product_fields_to_row(fields)
        missing = [column for column in PRODUCT_COLUMNS if row.get(column) is None]
        if missing:
            raise PersistenceError(
                f"Cannot insert product without: {', '.join(missing)}"
            )

        now = datetime.now(timezone.utc).isoformat()
        row = {"id": str(uuid.uuid4()), **row, "created_at": now, "updated_at": now}
        rows = self._load()
        self._persist([row, *rows])
        return product_from_row(row)

    async def update(self, product_id: str, fields: dict[str, Any]) -> Product:
        rows = self._load()
        for index, row in enumerate(rows):
            if row["id"] == product_id:
                updated = {**row, **product_fields_to_row(fields)}
                rows[index] = updated
                self._persist(rows)
                return product_from_row(updated)
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    async def delete(self, product_id: str) -> None:
        rows = self._load()
        self._persist([row for row in rows if row["id"] != product_id])

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> list[dict[str, Any]]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self._file_path}: {exc}") from exc

    def _persist(self, rows: list[dict[str, Any]]) -> None:
        try:
            self._file_path.write_text(
                json.dumps(rows, indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
