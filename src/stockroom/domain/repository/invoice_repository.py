"""Abstract repository for issued invoices."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from stockroom.domain.model.invoice import InvoiceRecord


class InvoiceRepository(ABC):

    @abstractmethod
    async def save(self, record: InvoiceRecord) -> None:
        """Persist an issued invoice together with its line items."""

    @abstractmethod
    async def list_since(self, moment: datetime) -> list[InvoiceRecord]:
        """Return invoices created at or after *moment*."""
