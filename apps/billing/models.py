# apps/billing/models.py
"""
Billing models.

Models:
- ServiceItem: Catalog of billable services (template for invoice items)
- Invoice: Client invoice with denormalized totals
- InvoiceItem: Line items on an invoice (snapshot of name/price)
- Payment: Payment records against an invoice
- InvoiceSequence: Per-period counter for invoice numbers
"""
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q, Sum
from django.utils import timezone
from simple_history.models import HistoricalRecords
from shared.models import TimestampMixin

from .status import InvoiceStatus, derive_status, sticky_override

CENT = Decimal('0.01')


def quantize_money(value):
    """Round to 2 places, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class ServiceItem(TimestampMixin):
    """
    A billable service in the firm's catalog.

    Invoice items copy name and price from here at selection time, so
    editing a service never changes invoices that were already issued.

    Example:
        ServiceItem: ITR Filing (Salaried)
        Category: ITR
        Base Price: 1500.00
    """

    class Category(models.TextChoices):
        ITR = 'ITR', 'Income Tax Return'
        GST = 'GST', 'GST'
        ACCOUNTING = 'ACCOUNTING', 'Accounting'
        OTHER = 'OTHER', 'Other'

    name = models.CharField(
        max_length=200,
        help_text="Service name"
    )
    description = models.TextField(
        blank=True,
        help_text="Service description"
    )
    base_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Default unit price"
    )
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        help_text="Service category"
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive services cannot be picked for new invoice items"
    )

    history = HistoricalRecords()

    class Meta:
        ordering = ['name']
        verbose_name = "Service"
        verbose_name_plural = "Services"

    def __str__(self):
        return self.name


class Invoice(TimestampMixin):
    """
    Client invoice.

    Totals are denormalized onto the row and recomputed inside every
    mutating call (see apps.billing.services and apps.billing.ledger):

        subtotal       == sum(items.amount)
        total_amount   == subtotal + tax
        paid_amount    == sum(payments.amount)
        balance_amount == max(total_amount - paid_amount, 0)

    `version` increments on every mutation and serves as an optimistic
    concurrency token for API clients.

    Example:
        Invoice: INV-202604-00012
        Client: Sharma Traders
        Total: 1350.00
        Due Date: 2026-05-15
        Status: PARTIAL
    """
    invoice_number = models.CharField(
        max_length=50,
        unique=True,
        help_text="Invoice number (immutable)"
    )
    client = models.ForeignKey(
        'clients.Client',
        on_delete=models.PROTECT,
        related_name='invoices',
        help_text="Client being billed (immutable)"
    )

    # Totals
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Sum of item amounts"
    )
    tax = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Flat tax amount"
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Subtotal plus tax"
    )
    paid_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Sum of payments"
    )
    balance_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Amount still owed (never negative)"
    )

    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.PENDING,
        help_text="Invoice status"
    )

    # Dates
    issue_date = models.DateField(
        default=timezone.localdate,
        help_text="Date invoice was issued"
    )
    due_date = models.DateField(
        help_text="Payment due date"
    )

    notes = models.TextField(
        blank=True,
        help_text="Notes shown on the invoice"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_invoices',
        help_text="User who raised the invoice"
    )
    version = models.PositiveIntegerField(
        default=1,
        help_text="Incremented on every change"
    )

    # Audit trail
    history = HistoricalRecords()

    class Meta:
        verbose_name = "Invoice"
        verbose_name_plural = "Invoices"
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['client', 'status'], name='invoice_client_status_idx'),
            models.Index(fields=['due_date'], name='invoice_due_date_idx'),
        ]

    def __str__(self):
        return self.invoice_number

    @property
    def is_cancelled(self):
        return self.status == InvoiceStatus.CANCELLED

    def is_overdue(self, today=None):
        """Past due with money still owed. Cancelled invoices are never overdue."""
        if self.is_cancelled:
            return False
        today = today or timezone.localdate()
        return self.due_date < today and self.balance_amount > 0

    def calculate_totals(self):
        """Recalculate subtotal and total from items."""
        subtotal = self.items.aggregate(total=Sum('amount'))['total'] or Decimal('0')
        self.subtotal = quantize_money(subtotal)
        self.total_amount = quantize_money(self.subtotal + self.tax)

    def calculate_balance(self):
        """Recalculate paid and balance from the payment rows."""
        paid = self.payments.aggregate(total=Sum('amount'))['total'] or Decimal('0')
        self.paid_amount = quantize_money(paid)
        self.balance_amount = max(self.total_amount - self.paid_amount, Decimal('0.00'))

    def recalculate(self):
        """Recompute every derived field, keeping a CANCELLED pin."""
        self.calculate_totals()
        self.calculate_balance()
        self.status = derive_status(
            self.total_amount, self.paid_amount, sticky_override(self.status)
        )


class InvoiceItem(models.Model):
    """
    Line item on an invoice.

    Name and unit price are copies taken when the item was composed;
    `service` only records where they came from.
    """
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='items',
        help_text="Parent invoice"
    )
    position = models.PositiveIntegerField(
        default=0,
        help_text="Display order"
    )
    service = models.ForeignKey(
        ServiceItem,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invoice_items',
        help_text="Catalog service this item was copied from"
    )
    name = models.CharField(
        max_length=200,
        help_text="Item name"
    )
    description = models.TextField(
        blank=True,
        help_text="Item description"
    )
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('1'),
        help_text="Quantity billed"
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Price per unit"
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="quantity x unit_price (calculated)"
    )

    class Meta:
        verbose_name = "Invoice Item"
        verbose_name_plural = "Invoice Items"
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.invoice.invoice_number}: {self.name}"

    def save(self, *args, **kwargs):
        self.amount = quantize_money(Decimal(self.quantity) * Decimal(self.unit_price))
        super().save(*args, **kwargs)


class Payment(models.Model):
    """
    Payment recorded against an invoice.

    Payments are never edited: a wrong entry is deleted and re-entered.
    `operation_id` is an optional client-supplied key that makes a
    retried submission a no-op.
    """

    class Method(models.TextChoices):
        CASH = 'CASH', 'Cash'
        BANK_TRANSFER = 'BANK_TRANSFER', 'Bank Transfer'
        UPI = 'UPI', 'UPI'
        CHEQUE = 'CHEQUE', 'Cheque'
        OTHER = 'OTHER', 'Other'

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='payments',
        help_text="Invoice being paid"
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Payment amount"
    )
    payment_date = models.DateField(
        default=timezone.localdate,
        help_text="Date payment received"
    )
    payment_method = models.CharField(
        max_length=20,
        choices=Method.choices,
        help_text="Payment method"
    )
    transaction_id = models.CharField(
        max_length=100,
        blank=True,
        help_text="UTR, cheque number, etc."
    )
    note = models.TextField(
        blank=True,
        help_text="Payment note"
    )
    operation_id = models.CharField(
        max_length=64,
        blank=True,
        help_text="Client-supplied idempotency key"
    )
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_payments',
        help_text="User who recorded this payment"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        ordering = ['payment_date', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['invoice', 'operation_id'],
                condition=~Q(operation_id=''),
                name='unique_payment_operation_per_invoice',
            ),
        ]

    def __str__(self):
        return f"Payment {self.amount} on {self.invoice.invoice_number}"


class InvoiceSequence(models.Model):
    """
    Invoice number counter, one row per calendar month.

    Numbers are allocated under a row lock so concurrent creates never
    collide: INV-202604-00001, INV-202604-00002, ...
    """
    period = models.CharField(
        max_length=6,
        unique=True,
        help_text="YYYYMM"
    )
    next_value = models.PositiveIntegerField(
        default=1,
        help_text="Next number to use"
    )

    def __str__(self):
        return f"INV {self.period} -> {self.next_value}"
