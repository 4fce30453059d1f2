# apps/billing/tests/test_status.py
"""
Tests for status derivation.
"""
from decimal import Decimal

from django.test import SimpleTestCase

from apps.billing.status import InvoiceStatus, derive_status, sticky_override


class DeriveStatusTest(SimpleTestCase):

    def test_nothing_paid_is_pending(self):
        self.assertEqual(derive_status(Decimal('1350'), Decimal('0')), InvoiceStatus.PENDING)

    def test_part_paid_is_partial(self):
        self.assertEqual(derive_status(Decimal('1350'), Decimal('500')), InvoiceStatus.PARTIAL)

    def test_fully_paid_is_paid(self):
        self.assertEqual(derive_status(Decimal('1350'), Decimal('1350')), InvoiceStatus.PAID)

    def test_overpaid_is_paid(self):
        self.assertEqual(derive_status(Decimal('1350'), Decimal('1400')), InvoiceStatus.PAID)

    def test_zero_total_nothing_paid_is_pending(self):
        self.assertEqual(derive_status(Decimal('0'), Decimal('0')), InvoiceStatus.PENDING)

    def test_cancelled_override_wins(self):
        for paid in (Decimal('0'), Decimal('500'), Decimal('1350')):
            self.assertEqual(
                derive_status(Decimal('1350'), paid, InvoiceStatus.CANCELLED),
                InvoiceStatus.CANCELLED,
            )

    def test_other_overrides_are_ignored(self):
        self.assertEqual(
            derive_status(Decimal('1350'), Decimal('0'), InvoiceStatus.PAID),
            InvoiceStatus.PENDING,
        )
        self.assertEqual(
            derive_status(Decimal('1350'), Decimal('1350'), InvoiceStatus.PENDING),
            InvoiceStatus.PAID,
        )

    def test_same_inputs_same_result(self):
        args = (Decimal('1000'), Decimal('999.99'))
        self.assertEqual(derive_status(*args), derive_status(*args))
        self.assertEqual(derive_status(*args), InvoiceStatus.PARTIAL)


class StickyOverrideTest(SimpleTestCase):

    def test_only_cancelled_is_carried(self):
        self.assertEqual(sticky_override(InvoiceStatus.CANCELLED), InvoiceStatus.CANCELLED)
        for value in (InvoiceStatus.PENDING, InvoiceStatus.PARTIAL, InvoiceStatus.PAID):
            self.assertIsNone(sticky_override(value))
