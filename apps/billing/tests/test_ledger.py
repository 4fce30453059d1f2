# apps/billing/tests/test_ledger.py
"""
Tests for PaymentLedger: add_payment, delete_payment, idempotent retries.
"""
from decimal import Decimal

from apps.billing.exceptions import InvalidArgument, InvalidState, NotFound
from apps.billing.models import Payment
from apps.billing.status import InvoiceStatus

from .base import BillingTestCase, TODAY


def ledger_state(invoice):
    invoice.refresh_from_db()
    return (invoice.paid_amount, invoice.balance_amount, invoice.status)


class ScenarioTest(BillingTestCase):
    """The reference sequence: create, pay in full, pay in part, undo."""

    def test_scenario_a_new_invoice(self):
        invoice = self.make_invoice()
        self.assertEqual(invoice.subtotal, Decimal('1300.00'))
        self.assertEqual(invoice.total_amount, Decimal('1350.00'))
        self.assertEqual(invoice.paid_amount, Decimal('0.00'))
        self.assertEqual(invoice.balance_amount, Decimal('1350.00'))
        self.assertEqual(invoice.status, InvoiceStatus.PENDING)
        self.assertInvariants(invoice)

    def test_scenario_b_full_payment(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('1350'), payment_method='UPI')
        self.assertEqual(
            ledger_state(invoice),
            (Decimal('1350.00'), Decimal('0.00'), InvoiceStatus.PAID),
        )
        self.assertInvariants(invoice)

    def test_scenario_c_partial_payment(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('500'))
        self.assertEqual(
            ledger_state(invoice),
            (Decimal('500.00'), Decimal('850.00'), InvoiceStatus.PARTIAL),
        )
        self.assertInvariants(invoice)

    def test_scenario_d_delete_restores_state(self):
        invoice = self.make_invoice()
        before = ledger_state(invoice)

        payment = self.ledger.add_payment(invoice.pk, Decimal('500'))
        self.ledger.delete_payment(invoice.pk, payment.pk)

        self.assertEqual(ledger_state(invoice), before)
        self.assertEqual(invoice.payments.count(), 0)
        self.assertInvariants(invoice)


class AddPaymentTest(BillingTestCase):

    def test_records_payment_fields(self):
        invoice = self.make_invoice()
        payment = self.ledger.add_payment(
            invoice.pk,
            Decimal('200'),
            payment_method=Payment.Method.CHEQUE,
            payment_date=TODAY,
            transaction_id='CHQ-004512',
            note='Handed over at office',
        )
        self.assertEqual(payment.invoice_id, invoice.pk)
        self.assertEqual(payment.payment_method, 'CHEQUE')
        self.assertEqual(payment.transaction_id, 'CHQ-004512')
        self.assertEqual(payment.recorded_by, self.user)
        self.assertEqual(payment.payment_date, TODAY)

    def test_overpayment_floors_balance_at_zero(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('1400'))
        invoice.refresh_from_db()
        self.assertEqual(invoice.paid_amount, Decimal('1400.00'))
        self.assertEqual(invoice.balance_amount, Decimal('0.00'))
        self.assertEqual(invoice.status, InvoiceStatus.PAID)

    def test_bumps_version(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('100'))
        invoice.refresh_from_db()
        self.assertEqual(invoice.version, 2)

    def test_non_positive_amount_rejected(self):
        invoice = self.make_invoice()
        for amount in (Decimal('0'), Decimal('-10'), 'abc'):
            with self.assertRaises(InvalidArgument):
                self.ledger.add_payment(invoice.pk, amount)
        self.assertEqual(invoice.payments.count(), 0)

    def test_unknown_method_rejected(self):
        invoice = self.make_invoice()
        with self.assertRaises(InvalidArgument):
            self.ledger.add_payment(invoice.pk, Decimal('10'), payment_method='BITCOIN')

    def test_missing_invoice(self):
        with self.assertRaises(NotFound):
            self.ledger.add_payment(999999, Decimal('10'))

    def test_cancelled_invoice_rejected(self):
        invoice = self.make_invoice()
        self.invoices.set_status(invoice.pk, InvoiceStatus.CANCELLED)
        with self.assertRaises(InvalidState):
            self.ledger.add_payment(invoice.pk, Decimal('10'))
        invoice.refresh_from_db()
        self.assertEqual(invoice.paid_amount, Decimal('0.00'))

    def test_payment_supersedes_advisory_status(self):
        invoice = self.make_invoice()
        self.invoices.set_status(invoice.pk, InvoiceStatus.PAID)
        self.ledger.add_payment(invoice.pk, Decimal('100'))
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, InvoiceStatus.PARTIAL)


class IdempotentPaymentTest(BillingTestCase):

    def test_same_operation_id_records_once(self):
        invoice = self.make_invoice()
        first = self.ledger.add_payment(invoice.pk, Decimal('500'), operation_id='op-1')
        second = self.ledger.add_payment(invoice.pk, Decimal('500'), operation_id='op-1')

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(invoice.payments.count(), 1)
        invoice.refresh_from_db()
        self.assertEqual(invoice.paid_amount, Decimal('500.00'))
        self.assertEqual(invoice.version, 2)

    def test_different_operation_ids_record_twice(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('500'), operation_id='op-1')
        self.ledger.add_payment(invoice.pk, Decimal('500'), operation_id='op-2')
        invoice.refresh_from_db()
        self.assertEqual(invoice.paid_amount, Decimal('1000.00'))

    def test_operation_id_scoped_to_invoice(self):
        first = self.make_invoice()
        second = self.make_invoice()
        self.ledger.add_payment(first.pk, Decimal('100'), operation_id='op-1')
        self.ledger.add_payment(second.pk, Decimal('100'), operation_id='op-1')
        self.assertEqual(second.payments.count(), 1)

    def test_no_operation_id_never_deduplicates(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('100'))
        self.ledger.add_payment(invoice.pk, Decimal('100'))
        self.assertEqual(invoice.payments.count(), 2)


class DeletePaymentTest(BillingTestCase):

    def test_payment_on_other_invoice_not_found(self):
        invoice = self.make_invoice()
        other = self.make_invoice()
        payment = self.ledger.add_payment(other.pk, Decimal('100'))
        with self.assertRaises(NotFound):
            self.ledger.delete_payment(invoice.pk, payment.pk)
        self.assertTrue(Payment.objects.filter(pk=payment.pk).exists())

    def test_unknown_payment_not_found(self):
        invoice = self.make_invoice()
        with self.assertRaises(NotFound):
            self.ledger.delete_payment(invoice.pk, 999999)

    def test_missing_invoice(self):
        with self.assertRaises(NotFound):
            self.ledger.delete_payment(999999, 1)

    def test_cancelled_invoice_rejected(self):
        invoice = self.make_invoice()
        payment = self.ledger.add_payment(invoice.pk, Decimal('100'))
        self.invoices.set_status(invoice.pk, InvoiceStatus.CANCELLED)
        with self.assertRaises(InvalidState):
            self.ledger.delete_payment(invoice.pk, payment.pk)
        self.assertTrue(Payment.objects.filter(pk=payment.pk).exists())

    def test_paid_back_to_partial(self):
        invoice = self.make_invoice()
        self.ledger.add_payment(invoice.pk, Decimal('1000'))
        last = self.ledger.add_payment(invoice.pk, Decimal('350'))
        self.assertEqual(ledger_state(invoice)[2], InvoiceStatus.PAID)

        self.ledger.delete_payment(invoice.pk, last.pk)
        self.assertEqual(
            ledger_state(invoice),
            (Decimal('1000.00'), Decimal('350.00'), InvoiceStatus.PARTIAL),
        )


class MutationSequenceTest(BillingTestCase):
    """Invariants hold after every step of a mixed sequence."""

    def test_mixed_sequence(self):
        invoice = self.make_invoice()
        p1 = self.ledger.add_payment(invoice.pk, Decimal('200'))
        self.assertInvariants(invoice)

        self.invoices.update(invoice.pk, tax=Decimal('0'))
        self.assertInvariants(invoice)

        p2 = self.ledger.add_payment(invoice.pk, Decimal('1100'))
        self.assertInvariants(invoice)
        self.assertEqual(invoice.status, InvoiceStatus.PAID)

        self.invoices.update(invoice.pk, items=[
            {'name': 'ITR Filing', 'quantity': 3, 'unit_price': '500'},
        ])
        self.assertInvariants(invoice)
        self.assertEqual(invoice.status, InvoiceStatus.PARTIAL)

        self.ledger.delete_payment(invoice.pk, p1.pk)
        self.assertInvariants(invoice)
        self.ledger.delete_payment(invoice.pk, p2.pk)
        self.assertInvariants(invoice)
        self.assertEqual(invoice.status, InvoiceStatus.PENDING)
        self.assertEqual(invoice.balance_amount, Decimal('1500.00'))
