"""Application service: Invoice Builder.

Holds one ``InvoiceDraft`` and edits it field by field.  Product lookups
go through the inventory store's current snapshot and are read-only;
the builder never writes to the catalog.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from stockroom.application.inventory_store import InventoryStore
from stockroom.application.observable import Observable
from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.invoice import (
    InvoiceDraft,
    InvoiceLineItem,
    InvoiceRecord,
    InvoiceTotals,
)

logger = logging.getLogger(__name__)

LINE_FIELDS = ("product_id", "product_name", "price", "quantity")


class InvoiceBuilder(Observable):

    def __init__(self, catalog: InventoryStore, draft: InvoiceDraft | None = None) -> None:
        super().__init__()
        self._catalog = catalog
        self._draft = draft or InvoiceDraft()

    # --- Queries --------------------------------------------------------------

    @property
    def draft(self) -> InvoiceDraft:
        return self._draft

    @property
    def lines(self) -> list[InvoiceLineItem]:
        return list(self._draft.lines)

    @property
    def customer_name(self) -> str:
        return self._draft.customer_name

    @property
    def customer_phone(self) -> str:
        return self._draft.customer_phone

    def line(self, line_id: str) -> InvoiceLineItem | None:
        return self._draft.find_line(line_id)

    def compute_totals(self) -> InvoiceTotals:
        return self._draft.totals

    # --- Editing --------------------------------------------------------------

    def set_customer(self, name: str | None = None, phone: str | None = None) -> None:
        if name is not None:
            self._draft.customer_name = name
        if phone is not None:
            self._draft.customer_phone = phone
        self._notify()

    def add_line(self) -> str:
        """Append an empty line (no product, quantity 1) and return its id."""
        line = self._draft.add_line()
        self._notify()
        return line.id

    def remove_line(self, line_id: str) -> None:
        self._draft.remove_line(line_id)
        self._notify()

    def set_line_field(self, line_id: str, field: str, value: Any) -> None:
        """Update one field of one line.

        The line total is a property of price and quantity, so it is
        correct immediately after this call returns.  Unknown line ids
        are ignored.
        """
        if field not in LINE_FIELDS:
            raise ValidationError(f"Unknown invoice line field: {field!r}")
        line = self._draft.find_line(line_id)
        if line is None:
            return

        if field == "product_id":
            product_id = "" if value is None else str(value)
            line.select_product(product_id, self._catalog.get(product_id))
        elif field == "product_name":
            line.product_name = "" if value is None else str(value)
        elif field == "price":
            line.set_price(value)
        else:
            line.set_quantity(value)
        self._notify()

    # --- Finalization ---------------------------------------------------------

    def snapshot(self, now: datetime | None = None) -> InvoiceRecord:
        """Validate and assemble the invoice without clearing the draft."""
        return self._draft.to_record(now)

    def reset(self) -> None:
        self._draft.reset()
        self._notify()

    def generate(self, now: datetime | None = None) -> InvoiceRecord:
        """Build the invoice record and reset the draft.

        On a validation failure the draft is left untouched.
        """
        record = self.snapshot(now)
        logger.info(
            "Invoice %s generated for %s (%d items, total %s)",
            record.invoice_number,
            record.customer_name,
            len(record.items),
            record.total,
        )
        self.reset()
        return record
