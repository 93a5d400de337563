"""InvoiceRepository backed by the hosted ``invoices`` and ``invoice_items`` tables.

The header row and the item rows are two separate requests; there is no
transaction around them.
"""

from __future__ import annotations

from datetime import datetime

from stockroom.domain.exceptions import PersistenceError
from stockroom.domain.model.invoice import InvoiceRecord
from stockroom.domain.repository.invoice_repository import InvoiceRepository
from stockroom.infrastructure.persistence.rows import (
    invoice_from_rows,
    invoice_item_to_row,
    invoice_to_row,
)
from stockroom.infrastructure.supabase_client import SupabaseClient


class SupabaseInvoiceRepository(InvoiceRepository):

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def save(self, record: InvoiceRecord) -> None:
        rows = await self._client.rest(
            "POST", "invoices", json=[invoice_to_row(record)], return_rows=True
        )
        if not rows:
            raise PersistenceError("Insert returned no invoice row")
        invoice_id = str(rows[0]["id"])
        await self._client.rest(
            "POST",
            "invoice_items",
            json=[invoice_item_to_row(item, invoice_id) for item in record.items],
        )

    async def list_since(self, moment: datetime) -> list[InvoiceRecord]:
        rows = await self._client.rest(
            "GET",
            "invoices",
            params={
                "select": "*,invoice_items(*)",
                "created_at": f"gte.{moment.isoformat()}",
                "order": "created_at.desc",
            },
        )
        return [invoice_from_rows(row, row.get("invoice_items") or []) for row in rows or []]
