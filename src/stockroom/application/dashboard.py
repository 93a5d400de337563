"""Application service: the store dashboard.

This is the only place that coordinates the session gate, the
inventory store and invoice issuing.  The gate authorizes first; once a
user is signed in the catalog is fetched from the backend, and invoice
builders work on that snapshot.
"""

from __future__ import annotations

import logging
from datetime import datetime

from stockroom.application.inventory_store import InventoryStore
from stockroom.application.invoice_builder import InvoiceBuilder
from stockroom.application.session_gate import SessionGate
from stockroom.domain.exceptions import PersistenceError
from stockroom.domain.model.clock import utc_moment
from stockroom.domain.model.invoice import InvoiceRecord
from stockroom.domain.model.session import User
from stockroom.domain.model.statistics import InventoryStatistics
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.auth_gateway import AuthGateway
from stockroom.domain.repository.invoice_repository import InvoiceRepository
from stockroom.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class StoreDashboard:

    def __init__(
        self,
        auth_gateway: AuthGateway,
        product_repo: ProductRepository,
        invoice_repo: InvoiceRepository | None = None,
    ) -> None:
        self.gate = SessionGate(auth_gateway)
        self._store = InventoryStore(product_repo)
        self._invoice_repo = invoice_repo

    # --- Session --------------------------------------------------------------

    async def open(self) -> User | None:
        """Resume an active session, loading the catalog if there is one."""
        user = await self.gate.initialize()
        if user is not None:
            await self._store.load()
        return user

    async def sign_in(self, identifier: str, secret: str) -> User:
        user = await self.gate.sign_in(identifier, secret)
        await self._store.load()
        return user

    async def sign_out(self) -> None:
        await self.gate.sign_out()
        self._store.clear()

    # --- Gated components -----------------------------------------------------

    @property
    def inventory(self) -> InventoryStore:
        self.gate.require()
        return self._store

    def new_invoice(self) -> InvoiceBuilder:
        self.gate.require()
        return InvoiceBuilder(self._store)

    async def stats(self, now: datetime | None = None) -> InventoryStatistics:
        self.gate.require()
        revenue = await self.monthly_revenue(now)
        return self._store.stats(monthly_revenue=revenue)

    async def monthly_revenue(self, now: datetime | None = None) -> Money:
        """Sum of invoice totals issued since the start of this month.

        Zero when no invoice backend is configured.
        """
        self.gate.require()
        if self._invoice_repo is None:
            return Money.zero()
        now = utc_moment(now)
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        records = await self._invoice_repo.list_since(month_start)
        return Money.sum(record.total for record in records)

    async def issue_invoice(
        self, builder: InvoiceBuilder, now: datetime | None = None
    ) -> InvoiceRecord:
        """Generate the builder's invoice, persisting it when possible.

        The draft is cleared only after the invoice backend has accepted
        the record; a persistence failure leaves the draft as it was.
        """
        self.gate.require()
        if self._invoice_repo is None:
            return builder.generate(now)

        record = builder.snapshot(now)
        try:
            await self._invoice_repo.save(record)
        except PersistenceError as exc:
            logger.error("Error saving invoice %s: %s", record.invoice_number, exc)
            raise
        builder.reset()
        logger.info("Invoice %s saved for %s", record.invoice_number, record.customer_name)
        return record
