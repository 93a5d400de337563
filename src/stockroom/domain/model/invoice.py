"""Invoice draft, line items and the immutable invoice record.

The draft is the mutable, not-yet-finalized invoice under construction.
Its subtotal, tax and total are pure functions of the line items and are
never stored.  Generating an invoice turns the draft into an
``InvoiceRecord`` snapshot that no later edit can change.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from stockroom.domain.exceptions import (
    MissingCustomerNameError,
    NoLineItemsError,
    ValidationError,
)
from stockroom.domain.model.clock import utc_moment
from stockroom.domain.model.product import Product
from stockroom.domain.model.value_objects import Money, Quantity

TAX_RATE = Decimal("0.08")


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class InvoiceLineItem:
    """One row of a draft.

    ``product_id`` is a weak reference: the product may be deleted from
    the catalog later and the line keeps its name/price snapshot.
    An empty ``product_id`` means no product has been selected yet.
    """

    id: str = field(default_factory=_new_id)
    product_id: str = ""
    product_name: str = ""
    product_sku: str = ""
    price: Money = field(default_factory=Money.zero)
    quantity: Quantity = field(default_factory=lambda: Quantity(1))

    @property
    def total(self) -> Money:
        return self.price * self.quantity.value

    def select_product(self, product_id: str, product: Product | None) -> None:
        """Point the line at *product_id*.

        When the product is known its current name, sku and price are
        copied into the line.  An unknown or empty id keeps the previous
        snapshot.
        """
        self.product_id = product_id
        if product is not None:
            self.product_name = product.name
            self.product_sku = product.sku
            self.price = product.price

    def set_price(self, raw: Any) -> None:
        """Invalid, empty or negative input becomes a price of zero."""
        try:
            self.price = Money.of(raw)
        except ValidationError:
            self.price = Money.zero()

    def set_quantity(self, raw: Any) -> None:
        """Invalid, empty or non-positive input becomes a quantity of one."""
        try:
            self.quantity = Quantity(int(str(raw).strip()))
        except (ValueError, ValidationError):
            self.quantity = Quantity(1)


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Money
    tax: Money
    total: Money


@dataclass(frozen=True)
class InvoiceRecordLine:
    product_id: str
    product_name: str
    product_sku: str
    price: Money
    quantity: int
    total: Money


@dataclass(frozen=True)
class InvoiceRecord:
    """An issued invoice.  Immutable once generated."""

    invoice_number: str
    customer_name: str
    customer_phone: str
    items: tuple[InvoiceRecordLine, ...]
    subtotal: Money
    tax: Money
    total: Money
    created_at: datetime


@dataclass
class InvoiceDraft:
    """Aggregate root for the invoice under construction."""

    customer_name: str = ""
    customer_phone: str = ""
    lines: list[InvoiceLineItem] = field(default_factory=list)

    # --- Line management ------------------------------------------------------

    def add_line(self) -> InvoiceLineItem:
        line = InvoiceLineItem()
        self.lines.append(line)
        return line

    def remove_line(self, line_id: str) -> None:
        self.lines = [line for line in self.lines if line.id != line_id]

    def find_line(self, line_id: str) -> InvoiceLineItem | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    # --- Computed properties --------------------------------------------------

    @property
    def totals(self) -> InvoiceTotals:
        subtotal = Money.sum(line.total for line in self.lines)
        tax = subtotal.apply_rate(TAX_RATE)
        return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)

    @property
    def is_empty(self) -> bool:
        return not self.lines and not self.customer_name and not self.customer_phone

    # --- Finalization ---------------------------------------------------------

    def to_record(self, now: datetime | None = None) -> InvoiceRecord:
        """Validate the draft and snapshot it into an ``InvoiceRecord``.

        The draft itself is not modified.
        """
        if not self.customer_name or not self.customer_name.strip():
            raise MissingCustomerNameError("Please enter customer name")
        if not self.lines:
            raise NoLineItemsError("Please add at least one item")

        created_at = utc_moment(now)
        totals = self.totals
        return InvoiceRecord(
            invoice_number=_invoice_number(created_at),
            customer_name=self.customer_name.strip(),
            customer_phone=self.customer_phone.strip(),
            items=tuple(
                InvoiceRecordLine(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    product_sku=line.product_sku,
                    price=line.price,
                    quantity=line.quantity.value,
                    total=line.total,
                )
                for line in self.lines
            ),
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            created_at=created_at,
        )

    def reset(self) -> None:
        self.customer_name = ""
        self.customer_phone = ""
        self.lines = []


def _invoice_number(created_at: datetime) -> str:
    return f"INV-{created_at:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"
