# apps/billing/tests/base.py
"""
Shared fixtures for billing tests.
"""
from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase

from apps.billing.models import ServiceItem
from apps.billing.services import InvoiceService
from apps.billing.ledger import PaymentLedger
from apps.clients.models import Client
from users.models import User

TODAY = date(2026, 4, 15)
YESTERDAY = TODAY - timedelta(days=1)
NEXT_MONTH = TODAY + timedelta(days=30)

# Two ITR filings at 500 and one consultation at 300
SCENARIO_A_ITEMS = [
    {'name': 'ITR Filing', 'quantity': 2, 'unit_price': Decimal('500')},
    {'name': 'Consultation', 'quantity': 1, 'unit_price': Decimal('300')},
]


class BillingTestCase(TestCase):
    """Base test case with a client, a billing user and a small catalog."""

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            username='manager', password='pass', role=User.ROLE_MANAGER,
        )
        cls.client_record = Client.objects.create(
            name='Sharma Traders', email='accounts@sharmatraders.in', phone='9876543210',
        )
        cls.other_client = Client.objects.create(
            name='Iyer & Sons', email='iyer@example.in', phone='9123456780',
        )
        cls.itr = ServiceItem.objects.create(
            name='ITR Filing (Salaried)',
            description='Income tax return for salaried individuals',
            base_price=Decimal('1500.00'),
            category=ServiceItem.Category.ITR,
        )
        cls.gst = ServiceItem.objects.create(
            name='GST Monthly Return',
            base_price=Decimal('800.00'),
            category=ServiceItem.Category.GST,
        )

    def setUp(self):
        self.invoices = InvoiceService(self.user)
        self.ledger = PaymentLedger(self.user)

    def make_invoice(self, items=None, tax=Decimal('50'), due_date=NEXT_MONTH, client=None, **kwargs):
        return self.invoices.create(
            client_id=(client or self.client_record).pk,
            items=items if items is not None else SCENARIO_A_ITEMS,
            tax=tax,
            due_date=due_date,
            issue_date=kwargs.pop('issue_date', TODAY),
            **kwargs
        )

    def assertInvariants(self, invoice):
        """Totals on the row agree with its items and payments."""
        invoice.refresh_from_db()
        items_total = sum((i.amount for i in invoice.items.all()), Decimal('0'))
        paid_total = sum((p.amount for p in invoice.payments.all()), Decimal('0'))
        self.assertEqual(invoice.subtotal, items_total)
        self.assertEqual(invoice.total_amount, invoice.subtotal + invoice.tax)
        self.assertEqual(invoice.paid_amount, paid_total)
        self.assertEqual(
            invoice.balance_amount,
            max(invoice.total_amount - invoice.paid_amount, Decimal('0')),
        )
        for item in invoice.items.all():
            self.assertEqual(item.amount, (item.quantity * item.unit_price).quantize(Decimal('0.01')))
