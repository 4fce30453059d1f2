# apps/billing/status.py
"""
Invoice status derivation.

Status is a pure function of the invoice totals and at most one manual
override. CANCELLED is the only override that survives a recompute;
any other manually set status is replaced the next time it is derived.
"""
from decimal import Decimal

from django.db import models


class InvoiceStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    PARTIAL = 'PARTIAL', 'Partially Paid'
    PAID = 'PAID', 'Paid'
    CANCELLED = 'CANCELLED', 'Cancelled'


ZERO = Decimal('0.00')


def derive_status(total_amount, paid_amount, manual_override=None):
    """
    Map (total, paid, override) to an InvoiceStatus.

    Args:
        total_amount: Invoice total (Decimal)
        paid_amount: Sum of payments (Decimal)
        manual_override: InvoiceStatus or None. Only CANCELLED has effect.

    Returns:
        InvoiceStatus
    """
    if manual_override == InvoiceStatus.CANCELLED:
        return InvoiceStatus.CANCELLED
    if paid_amount <= ZERO:
        return InvoiceStatus.PENDING
    if paid_amount < total_amount:
        return InvoiceStatus.PARTIAL
    return InvoiceStatus.PAID


def sticky_override(current_status):
    """The override to carry into a recompute, given the stored status."""
    if current_status == InvoiceStatus.CANCELLED:
        return InvoiceStatus.CANCELLED
    return None
