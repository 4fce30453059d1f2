# apps/billing/gate.py
"""
Access gate: per-client payment status and the document-access decision.

The evaluator reads every non-cancelled invoice of one client in a single
query and folds it into a PaymentStatusSummary. A client with any invoice
past its due date and still carrying a balance loses document access
until that invoice is settled.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.db import DatabaseError
from django.utils import timezone

from apps.clients.models import Client

from .exceptions import NotFound, UpstreamUnavailable
from .models import Invoice
from .status import InvoiceStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverdueDetail:
    invoice_number: str
    due_date: date
    balance_amount: Decimal


@dataclass(frozen=True)
class PaymentStatusSummary:
    """Aggregate billing position of one client."""
    client_id: int
    total_invoices: int = 0
    paid_invoices: int = 0
    pending_invoices: int = 0
    overdue_invoices: int = 0
    total_outstanding: Decimal = Decimal('0.00')
    overdue_details: tuple = field(default_factory=tuple)

    @property
    def has_file_access(self):
        return self.overdue_invoices == 0

    def as_dict(self):
        return {
            'client_id': self.client_id,
            'total_invoices': self.total_invoices,
            'paid_invoices': self.paid_invoices,
            'pending_invoices': self.pending_invoices,
            'overdue_invoices': self.overdue_invoices,
            'total_outstanding': self.total_outstanding,
            'overdue_details': [
                {
                    'invoice_number': detail.invoice_number,
                    'due_date': detail.due_date,
                    'balance_amount': detail.balance_amount,
                }
                for detail in self.overdue_details
            ],
            'has_file_access': self.has_file_access,
        }


def summarize(client_id, rows, today):
    """
    Fold invoice rows into a summary.

    Args:
        client_id: Client the rows belong to
        rows: iterable of dicts with invoice_number, status, due_date, balance_amount
        today: date used for the overdue test

    Returns:
        PaymentStatusSummary
    """
    total = paid = pending = 0
    outstanding = Decimal('0.00')
    overdue = []

    for row in rows:
        if row['status'] == InvoiceStatus.CANCELLED:
            continue
        total += 1
        if row['status'] == InvoiceStatus.PAID:
            paid += 1
        elif row['status'] in (InvoiceStatus.PENDING, InvoiceStatus.PARTIAL):
            pending += 1
        outstanding += row['balance_amount']
        if row['due_date'] < today and row['balance_amount'] > 0:
            overdue.append(OverdueDetail(
                invoice_number=row['invoice_number'],
                due_date=row['due_date'],
                balance_amount=row['balance_amount'],
            ))

    overdue.sort(key=lambda detail: (detail.due_date, detail.invoice_number))
    return PaymentStatusSummary(
        client_id=client_id,
        total_invoices=total,
        paid_invoices=paid,
        pending_invoices=pending,
        overdue_invoices=len(overdue),
        total_outstanding=outstanding,
        overdue_details=tuple(overdue),
    )


class AccessGateEvaluator:
    """
    Computes PaymentStatusSummary for a client.

    Usage:
        summary = AccessGateEvaluator().evaluate(client.id)
        if not summary.has_file_access:
            ...

    `today` is a zero-argument callable returning the current date; tests
    pass a fixed one.
    """

    def __init__(self, today=timezone.localdate):
        self.today = today

    def evaluate(self, client_id):
        """
        Raises:
            NotFound: client does not exist
            UpstreamUnavailable: the invoices could not be read
        """
        try:
            client_id = int(client_id)
            if not Client.objects.filter(pk=client_id).exists():
                raise NotFound(f"Client {client_id} not found", client=client_id)
            rows = list(
                Invoice.objects
                .filter(client_id=client_id)
                .exclude(status=InvoiceStatus.CANCELLED)
                .values('invoice_number', 'status', 'due_date', 'balance_amount')
            )
        except (ValueError, TypeError):
            raise NotFound(f"Client {client_id} not found", client=client_id)
        except DatabaseError as exc:
            logger.error(f"Payment status lookup failed for client={client_id}: {exc}")
            raise UpstreamUnavailable(
                "Billing data is temporarily unavailable",
                client=client_id,
            ) from exc

        return summarize(client_id, rows, self.today())
