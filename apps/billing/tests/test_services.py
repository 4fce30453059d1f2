# apps/billing/tests/test_services.py
"""
Tests for InvoiceService (create, update, set_status, delete, numbering)
and ServiceCatalog.remove.
"""
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError

from apps.billing.exceptions import Conflict, InvalidArgument, InvalidState, NotFound
from apps.billing.models import Invoice, InvoiceItem, InvoiceSequence, Payment, ServiceItem
from apps.billing.services import ServiceCatalog
from apps.billing.status import InvoiceStatus

from .base import BillingTestCase, NEXT_MONTH, SCENARIO_A_ITEMS, TODAY


class CreateInvoiceTest(BillingTestCase):

    def test_create_basic(self):
        invoice = self.make_invoice(notes='Thank you for your business')
        self.assertIsNotNone(invoice.pk)
        self.assertEqual(invoice.client, self.client_record)
        self.assertEqual(invoice.created_by, self.user)
        self.assertEqual(invoice.issue_date, TODAY)
        self.assertEqual(invoice.due_date, NEXT_MONTH)
        self.assertEqual(invoice.version, 1)
        self.assertEqual(invoice.items.count(), 2)
        self.assertEqual(invoice.notes, 'Thank you for your business')

    def test_tax_defaults_to_zero(self):
        invoice = self.invoices.create(
            client_id=self.client_record.pk, items=SCENARIO_A_ITEMS, due_date=NEXT_MONTH,
        )
        self.assertEqual(invoice.tax, Decimal('0.00'))
        self.assertEqual(invoice.total_amount, Decimal('1300.00'))

    def test_due_date_string_accepted(self):
        invoice = self.make_invoice(due_date='2026-05-15')
        self.assertEqual(invoice.due_date, date(2026, 5, 15))

    def test_missing_client(self):
        with self.assertRaises(NotFound):
            self.invoices.create(client_id=999999, items=SCENARIO_A_ITEMS, due_date=NEXT_MONTH)

    def test_missing_due_date(self):
        with self.assertRaises(InvalidArgument):
            self.make_invoice(due_date=None)

    def test_malformed_due_date(self):
        with self.assertRaises(InvalidArgument):
            self.make_invoice(due_date='15/05/2026')

    def test_negative_tax(self):
        with self.assertRaises(InvalidArgument):
            self.make_invoice(tax=Decimal('-1'))

    def test_bad_item_leaves_nothing_behind(self):
        with self.assertRaises(InvalidArgument):
            self.make_invoice(items=[{'name': 'Advice', 'quantity': 0, 'unit_price': '100'}])
        self.assertEqual(Invoice.objects.count(), 0)


class InvoiceNumberTest(BillingTestCase):

    def test_sequential_per_month(self):
        first = self.make_invoice()
        second = self.make_invoice()
        self.assertEqual(first.invoice_number, 'INV-202604-00001')
        self.assertEqual(second.invoice_number, 'INV-202604-00002')

    def test_new_month_restarts(self):
        self.make_invoice()
        may = self.make_invoice(issue_date=date(2026, 5, 2))
        self.assertEqual(may.invoice_number, 'INV-202605-00001')
        self.assertEqual(InvoiceSequence.objects.count(), 2)

    def test_explicit_number(self):
        invoice = self.make_invoice(invoice_number='OLD-0001')
        self.assertEqual(invoice.invoice_number, 'OLD-0001')

    def test_duplicate_explicit_number_conflicts(self):
        self.make_invoice(invoice_number='OLD-0001')
        with self.assertRaises(Conflict):
            self.make_invoice(invoice_number='OLD-0001')
        self.assertEqual(Invoice.objects.count(), 1)

    def test_generated_number_skips_manual_ones(self):
        self.make_invoice(invoice_number='INV-202604-00001')
        invoice = self.make_invoice()
        self.assertEqual(invoice.invoice_number, 'INV-202604-00002')


class UpdateInvoiceTest(BillingTestCase):

    def test_replace_items(self):
        invoice = self.make_invoice()
        invoice = self.invoices.update(invoice.pk, items=[{'service': self.gst.pk, 'quantity': 3}])
        self.assertEqual(invoice.items.count(), 1)
        self.assertEqual(invoice.subtotal, Decimal('2400.00'))
        self.assertEqual(invoice.total_amount, Decimal('2450.00'))
        self.assertEqual(invoice.version, 2)
        self.assertInvariants(invoice)

    def test_item_edit_keeps_payments(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('500'))
        invoice = self.invoices.update(invoice.pk, tax=Decimal('0'))
        self.assertEqual(invoice.payments.count(), 1)
        self.assertEqual(invoice.paid_amount, Decimal('500.00'))
        self.assertEqual(invoice.balance_amount, Decimal('800.00'))
        self.assertEqual(invoice.status, InvoiceStatus.PARTIAL)

    def test_lowering_total_below_paid_marks_paid(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('500'))
        invoice = self.invoices.update(
            invoice.pk, items=[{'name': 'Reduced fee', 'quantity': 1, 'unit_price': '400'}], tax=0,
        )
        self.assertEqual(invoice.balance_amount, Decimal('0.00'))
        self.assertEqual(invoice.status, InvoiceStatus.PAID)

    def test_dates_and_notes(self):
        invoice = self.make_invoice()
        invoice = self.invoices.update(invoice.pk, due_date=date(2026, 6, 30), notes='Revised')
        self.assertEqual(invoice.due_date, date(2026, 6, 30))
        self.assertEqual(invoice.notes, 'Revised')

    def test_client_cannot_change(self):
        invoice = self.make_invoice()
        with self.assertRaises(InvalidArgument):
            self.invoices.update(invoice.pk, client_id=self.other_client.pk)
        # Echoing the same client back is fine
        self.invoices.update(invoice.pk, client_id=self.client_record.pk, notes='ok')

    def test_number_cannot_change(self):
        invoice = self.make_invoice()
        with self.assertRaises(InvalidArgument):
            self.invoices.update(invoice.pk, invoice_number='INV-X')

    def test_cancelled_cannot_be_edited(self):
        invoice = self.make_invoice()
        self.invoices.set_status(invoice.pk, InvoiceStatus.CANCELLED)
        with self.assertRaises(InvalidState):
            self.invoices.update(invoice.pk, tax=Decimal('0'))

    def test_stale_version_conflicts(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('100'))
        with self.assertRaises(Conflict):
            self.invoices.update(invoice.pk, notes='late edit', expected_version=1)
        invoice.refresh_from_db()
        self.assertEqual(invoice.notes, '')

    def test_current_version_accepted(self):
        invoice = self.make_invoice()
        invoice = self.invoices.update(invoice.pk, notes='edit', expected_version=1)
        self.assertEqual(invoice.version, 2)

    def test_missing_invoice(self):
        with self.assertRaises(NotFound):
            self.invoices.update(999999, notes='x')

    def test_failed_update_leaves_invoice_untouched(self):
        invoice = self.make_invoice()
        with self.assertRaises(NotFound):
            self.invoices.update(invoice.pk, items=[{'service': 999999}], tax=Decimal('10'))
        invoice.refresh_from_db()
        self.assertEqual(invoice.items.count(), 2)
        self.assertEqual(invoice.tax, Decimal('50.00'))
        self.assertEqual(invoice.version, 1)


class SetStatusTest(BillingTestCase):

    def test_cancel_is_sticky_across_recompute(self):
        invoice = self.make_invoice()
        invoice = self.invoices.set_status(invoice.pk, InvoiceStatus.CANCELLED)
        self.assertEqual(invoice.status, InvoiceStatus.CANCELLED)

        invoice.recalculate()
        self.assertEqual(invoice.status, InvoiceStatus.CANCELLED)

    def test_uncancel_then_payments_rederive(self):
        invoice = self.make_invoice()
        self.invoices.set_status(invoice.pk, InvoiceStatus.CANCELLED)
        invoice = self.invoices.set_status(invoice.pk, InvoiceStatus.PENDING)
        self.assertEqual(invoice.status, InvoiceStatus.PENDING)

        self.ledger.add_payment(invoice.pk, Decimal('1350'))
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, InvoiceStatus.PAID)

    def test_advisory_value_is_stored(self):
        invoice = self.make_invoice()
        invoice = self.invoices.set_status(invoice.pk, InvoiceStatus.PAID)
        self.assertEqual(invoice.status, InvoiceStatus.PAID)
        self.assertEqual(invoice.balance_amount, Decimal('1350.00'))

    def test_advisory_value_superseded_by_item_edit(self):
        invoice = self.make_invoice()
        self.invoices.set_status(invoice.pk, InvoiceStatus.PAID)
        invoice = self.invoices.update(invoice.pk, notes='touch')
        self.assertEqual(invoice.status, InvoiceStatus.PENDING)

    def test_unknown_status(self):
        invoice = self.make_invoice()
        with self.assertRaises(InvalidArgument):
            self.invoices.set_status(invoice.pk, 'OVERDUE')

    def test_stale_version(self):
        invoice = self.make_invoice()
        self.invoices.set_status(invoice.pk, InvoiceStatus.CANCELLED)
        with self.assertRaises(Conflict):
            self.invoices.set_status(invoice.pk, InvoiceStatus.PENDING, expected_version=1)


class DeleteInvoiceTest(BillingTestCase):

    def test_delete_cascades(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('100'))
        self.invoices.delete(invoice.pk)

        self.assertFalse(Invoice.objects.filter(pk=invoice.pk).exists())
        self.assertEqual(InvoiceItem.objects.count(), 0)
        self.assertEqual(Payment.objects.count(), 0)

    def test_delete_missing(self):
        with self.assertRaises(NotFound):
            self.invoices.delete(999999)


class QueryTest(BillingTestCase):

    def test_list_by_client_and_status(self):
        mine = self.make_invoice()
        self.make_invoice(client=self.other_client)
        self.ledger.add_payment(mine.pk, Decimal('1350'))

        self.assertEqual(list(self.invoices.list(client_id=self.client_record.pk)), [mine])
        self.assertEqual(self.invoices.list(status=InvoiceStatus.PAID).count(), 1)
        self.assertEqual(self.invoices.list().count(), 2)

    def test_get_missing(self):
        with self.assertRaises(NotFound):
            self.invoices.get(999999)


class ServiceCatalogTest(BillingTestCase):

    def test_unreferenced_service_deleted(self):
        result = ServiceCatalog().remove(self.gst.pk)
        self.assertIsNone(result)
        self.assertFalse(ServiceItem.objects.filter(pk=self.gst.pk).exists())

    def test_referenced_service_deactivated(self):
        self.make_invoice(items=[{'service': self.itr.pk}])
        result = ServiceCatalog().remove(self.itr.pk)
        self.assertEqual(result.pk, self.itr.pk)
        self.itr.refresh_from_db()
        self.assertFalse(self.itr.is_active)

    def test_missing_service(self):
        with self.assertRaises(NotFound):
            ServiceCatalog().remove(999999)

    def test_negative_base_price_invalid(self):
        service = ServiceItem(name='Refund', base_price=Decimal('-1.00'), category=ServiceItem.Category.OTHER)
        with self.assertRaises(ValidationError):
            service.full_clean()
