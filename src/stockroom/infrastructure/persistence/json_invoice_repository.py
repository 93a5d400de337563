"""JSON-file-backed implementation of InvoiceRepository.

Each stored invoice embeds its line items under ``items``.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from stockroom.domain.exceptions import PersistenceError
from stockroom.domain.model.invoice import InvoiceRecord
from stockroom.domain.repository.invoice_repository import InvoiceRepository
from stockroom.infrastructure.persistence.rows import (
    invoice_from_rows,
    invoice_item_to_row,
    invoice_to_row,
)


class JsonInvoiceRepository(InvoiceRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    async def save(self, record: InvoiceRecord) -> None:
        invoice_id = str(uuid.uuid4())
        row = {"id": invoice_id, **invoice_to_row(record)}
        row["items"] = [invoice_item_to_row(item, invoice_id) for item in record.items]
        rows = self._load()
        rows.append(row)
        self._persist(rows)

    async def list_since(self, moment: datetime) -> list[InvoiceRecord]:
        records = [invoice_from_rows(row, row.get("items", [])) for row in self._load()]
        return [record for record in records if record.created_at >= moment]

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
