"""Unit tests for the invoice draft and its line items."""

from datetime import datetime, timedelta, timezone

import pytest

from stockroom.domain.exceptions import MissingCustomerNameError, NoLineItemsError
from stockroom.domain.model.invoice import InvoiceDraft, InvoiceLineItem
from stockroom.domain.model.value_objects import Money, Quantity
from tests.fakes import make_product


class TestInvoiceLineItem:

    def test_new_line_is_empty(self):
        line = InvoiceLineItem()
        assert line.product_id == ""
        assert line.quantity == Quantity(1)
        assert line.price == Money.zero()
        assert line.total == Money.zero()

    def test_select_known_product_copies_snapshot(self):
        line = InvoiceLineItem()
        line.set_quantity("3")
        line.select_product("1", make_product(price="15.00", name="Lentils"))
        assert line.product_name == "Lentils"
        assert line.total == Money.of("45.00")

    def test_select_unknown_product_keeps_snapshot(self):
        line = InvoiceLineItem()
        line.select_product("1", make_product(price="15.00"))
        line.select_product("gone", None)
        assert line.product_id == "gone"
        assert line.price == Money.of("15.00")

    @pytest.mark.parametrize("raw", ["", "abc", None, "-4"])
    def test_invalid_price_becomes_zero(self, raw):
        line = InvoiceLineItem(price=Money.of("9.00"))
        line.set_price(raw)
        assert line.price == Money.zero()

    @pytest.mark.parametrize("raw", ["", "two", None, "0", "-1"])
    def test_invalid_quantity_becomes_one(self, raw):
        line = InvoiceLineItem(quantity=Quantity(4))
        line.set_quantity(raw)
        assert line.quantity == Quantity(1)

    def test_ids_are_unique(self):
        assert InvoiceLineItem().id != InvoiceLineItem().id


class TestInvoiceDraftTotals:

    def test_empty_draft_totals_are_zero(self):
        totals = InvoiceDraft().totals
        assert totals.subtotal == Money.zero()
        assert totals.tax == Money.zero()
        assert totals.total == Money.zero()

    def test_tax_is_eight_percent(self):
        draft = InvoiceDraft()
        draft.add_line().set_price("60.00")
        draft.add_line().set_price("40.00")
        totals = draft.totals
        assert totals.subtotal == Money.of("100.00")
        assert totals.tax == Money.of("8.00")
        assert totals.total == Money.of("108.00")

    def test_remove_line(self):
        draft = InvoiceDraft()
        line = draft.add_line()
        draft.remove_line(line.id)
        assert draft.lines == []

    def test_remove_unknown_line_is_noop(self):
        draft = InvoiceDraft()
        draft.add_line()
        draft.remove_line("missing")
        assert len(draft.lines) == 1


class TestInvoiceDraftRecord:

    def test_missing_customer_name_rejected(self):
        draft = InvoiceDraft(customer_name="   ")
        draft.add_line()
        with pytest.raises(MissingCustomerNameError):
            draft.to_record()

    def test_no_lines_rejected(self):
        with pytest.raises(NoLineItemsError):
            InvoiceDraft(customer_name="Asha").to_record()

    def test_record_snapshots_draft(self):
        now = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
        draft = InvoiceDraft(customer_name=" Asha ", customer_phone="555-0100")
        line = draft.add_line()
        line.select_product("1", make_product(price="20.00", name="Flour", sku="FL-1"))
        line.set_quantity(2)

        record = draft.to_record(now)

        assert record.customer_name == "Asha"
        assert record.created_at == now
        assert record.invoice_number.startswith("INV-20260314-")
        assert record.items[0].product_sku == "FL-1"
        assert record.items[0].total == Money.of("40.00")
        assert record.total == Money.of("43.20")

        # Later edits do not reach the record.
        line.set_quantity(5)
        assert record.items[0].quantity == 2

    def test_naive_timestamp_is_taken_as_utc(self):
        draft = InvoiceDraft(customer_name="Asha")
        draft.add_line().set_price("5.00")
        record = draft.to_record(datetime(2026, 3, 14, 9, 30))
        assert record.created_at == datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
        assert record.created_at.tzinfo is timezone.utc

    def test_offset_timestamp_is_converted_to_utc(self):
        draft = InvoiceDraft(customer_name="Asha")
        draft.add_line().set_price("5.00")
        ist = timezone(timedelta(hours=5, minutes=30))
        record = draft.to_record(datetime(2026, 3, 15, 2, 0, tzinfo=ist))
        assert record.created_at.tzinfo is timezone.utc
        assert record.created_at.hour == 20
        assert record.invoice_number.startswith("INV-20260314-")

    def test_reset_clears_everything(self):
        draft = InvoiceDraft(customer_name="Asha", customer_phone="1")
        draft.add_line()
        draft.reset()
        assert draft.is_empty
