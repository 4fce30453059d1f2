# apps/billing/services.py
"""
Invoice lifecycle and service catalog services.

InvoiceService handles:
- Creating invoices (with sequential numbering)
- Editing items, tax, dates and notes
- Manual status overrides (cancel / un-cancel)
- Hard deletion
- Read helpers that join the client explicitly

ServiceCatalog handles removal of catalog entries that old invoice
items may still point at.
"""
import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.clients.models import Client

from .composer import compose_items
from .exceptions import Conflict, InvalidArgument, InvalidState, NotFound
from .ledger import lock_invoice
from .models import Invoice, InvoiceSequence, ServiceItem, quantize_money
from .status import InvoiceStatus

logger = logging.getLogger(__name__)

INVOICE_NUMBER_PREFIX = 'INV'


def _to_date(value, field_name):
    if value is None or isinstance(value, date):
        return value
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidArgument(f"{field_name} must be a date (YYYY-MM-DD)", field=field_name)
    return parsed


def _to_tax(value):
    if isinstance(value, float):
        value = str(value)
    try:
        tax = quantize_money(Decimal(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidArgument("tax must be a number", field='tax')
    if tax < 0:
        raise InvalidArgument("tax cannot be negative", field='tax')
    return tax


class InvoiceService:
    """
    Service for creating and managing client invoices.

    Usage:
        service = InvoiceService(user=request.user)

        invoice = service.create(
            client_id=client.id,
            items=[{'service': itr.id, 'quantity': 1}],
            tax=Decimal('50.00'),
            due_date=date(2026, 5, 15),
        )

        service.update(invoice.id, tax=Decimal('0'), expected_version=invoice.version)
        service.set_status(invoice.id, 'CANCELLED')
    """

    def __init__(self, user=None):
        """
        Args:
            user: User performing operations (for audit trail)
        """
        self.user = user

    # ===== CREATE =====

    def create(
        self,
        client_id,
        items,
        due_date,
        tax=Decimal('0.00'),
        notes='',
        invoice_number=None,
        issue_date=None,
    ):
        """
        Create an invoice from a raw item list.

        Args:
            client_id: Client primary key
            items: Raw item dicts (see apps.billing.composer)
            due_date: Payment due date
            tax: Flat tax amount, must be >= 0
            notes: Notes shown on the invoice
            invoice_number: Explicit number, or None to allocate the next one
            issue_date: Defaults to today

        Returns:
            Invoice instance (PENDING, nothing paid)

        Raises:
            NotFound: client or a referenced service missing
            InvalidArgument: bad tax, dates or items
            Conflict: invoice_number already taken
        """
        due_date = _to_date(due_date, 'due_date')
        if due_date is None:
            raise InvalidArgument("due_date is required", field='due_date')
        issue_date = _to_date(issue_date, 'issue_date') or timezone.localdate()
        tax = _to_tax(tax if tax is not None else Decimal('0.00'))

        with transaction.atomic():
            client = self._get_client(client_id)
            composed = compose_items(items)

            if invoice_number:
                if Invoice.objects.filter(invoice_number=invoice_number).exists():
                    raise Conflict(
                        f"Invoice number {invoice_number} already exists",
                        invoice_number=invoice_number,
                    )
            else:
                invoice_number = self._allocate_number(issue_date)

            try:
                with transaction.atomic():
                    invoice = Invoice.objects.create(
                        invoice_number=invoice_number,
                        client=client,
                        tax=tax,
                        issue_date=issue_date,
                        due_date=due_date,
                        notes=notes or '',
                        status=InvoiceStatus.PENDING,
                        created_by=self.user,
                    )
            except IntegrityError:
                raise Conflict(
                    f"Invoice number {invoice_number} already exists",
                    invoice_number=invoice_number,
                )

            self._save_items(invoice, composed.items)
            invoice.recalculate()
            invoice.save()

        logger.info(
            f"Invoice created: {invoice.invoice_number}, client={client.pk}, "
            f"total={invoice.total_amount}, due={invoice.due_date}"
        )
        return invoice

    # ===== UPDATE =====

    def update(
        self,
        invoice_id,
        items=None,
        tax=None,
        due_date=None,
        notes=None,
        issue_date=None,
        expected_version=None,
        client_id=None,
        invoice_number=None,
    ):
        """
        Edit an invoice. Payments are left untouched.

        `client_id` and `invoice_number` are accepted only so a full PUT
        payload can echo them back; any value that differs from the stored
        one is rejected.

        Args:
            invoice_id: Invoice primary key
            items: Replacement raw item list, or None to keep the items
            tax, due_date, notes, issue_date: New values, or None to keep
            expected_version: Version the caller last read, or None

        Returns:
            The updated Invoice

        Raises:
            NotFound: invoice or a referenced service missing
            InvalidArgument: attempt to change client/number, bad values
            InvalidState: invoice is CANCELLED
            Conflict: expected_version is stale
        """
        due_date = _to_date(due_date, 'due_date')
        issue_date = _to_date(issue_date, 'issue_date')
        if tax is not None:
            tax = _to_tax(tax)

        with transaction.atomic():
            invoice = lock_invoice(invoice_id)

            if client_id is not None and str(client_id) != str(invoice.client_id):
                raise InvalidArgument("The client of an invoice cannot be changed", field='client')
            if invoice_number is not None and invoice_number != invoice.invoice_number:
                raise InvalidArgument("The invoice number cannot be changed", field='invoice_number')

            self._check_version(invoice, expected_version)
            self._check_not_cancelled(invoice)

            if items is not None:
                composed = compose_items(items)
                invoice.items.all().delete()
                self._save_items(invoice, composed.items)
            if tax is not None:
                invoice.tax = tax
            if due_date is not None:
                invoice.due_date = due_date
            if issue_date is not None:
                invoice.issue_date = issue_date
            if notes is not None:
                invoice.notes = notes

            invoice.recalculate()
            invoice.version += 1
            invoice.save()

        logger.info(
            f"Invoice updated: {invoice.invoice_number}, total={invoice.total_amount}, "
            f"balance={invoice.balance_amount}, status={invoice.status}, version={invoice.version}"
        )
        return invoice

    # ===== STATUS =====

    def set_status(self, invoice_id, status, expected_version=None):
        """
        Manually set an invoice's status.

        CANCELLED is pinned until another explicit call clears it. Any other
        value is stored as given but is replaced by the derived status on
        the next payment or item change.

        Raises:
            NotFound: invoice missing
            InvalidArgument: unknown status
            Conflict: expected_version is stale
        """
        if status not in InvoiceStatus.values:
            raise InvalidArgument(f"Unknown status '{status}'", field='status')

        with transaction.atomic():
            invoice = lock_invoice(invoice_id)
            self._check_version(invoice, expected_version)

            previous = invoice.status
            invoice.status = status
            invoice.version += 1
            invoice.save(update_fields=['status', 'version', 'updated_at'])

        logger.info(
            f"Invoice status set: {invoice.invoice_number}, {previous} -> {invoice.status}"
        )
        return invoice

    # ===== DELETE =====

    def delete(self, invoice_id):
        """
        Hard-delete an invoice together with its items and payments.

        Raises:
            NotFound: invoice missing
        """
        with transaction.atomic():
            invoice = lock_invoice(invoice_id)
            number = invoice.invoice_number
            invoice.delete()

        logger.info(f"Invoice deleted: {number}")

    # ===== QUERIES =====

    def get(self, invoice_id):
        """Fetch one invoice with its client, items and payments."""
        try:
            return self._base_queryset().get(pk=invoice_id)
        except (Invoice.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Invoice {invoice_id} not found", invoice=invoice_id)

    def list(self, client_id=None, status=None):
        """List invoices, newest first, optionally for one client or status."""
        qs = self._base_queryset()
        if client_id is not None:
            qs = qs.filter(client_id=client_id)
        if status:
            qs = qs.filter(status=status)
        return qs

    # ===== NUMBERING =====

    def next_invoice_number(self, on_date=None):
        """
        Allocate the next number for the month of `on_date`.

        Returns:
            str: e.g. 'INV-202604-00001'
        """
        on_date = on_date or timezone.localdate()
        period = on_date.strftime('%Y%m')

        with transaction.atomic():
            seq = InvoiceSequence.objects.select_for_update().filter(period=period).first()
            if seq is None:
                try:
                    with transaction.atomic():
                        seq = InvoiceSequence.objects.create(period=period)
                except IntegrityError:
                    # Another request created the row first
                    seq = InvoiceSequence.objects.select_for_update().get(period=period)

            number = f"{INVOICE_NUMBER_PREFIX}-{period}-{seq.next_value:05d}"
            seq.next_value += 1
            seq.save(update_fields=['next_value'])
            return number

    # ===== HELPERS =====

    def _allocate_number(self, issue_date):
        # Skip over numbers that were entered by hand
        number = self.next_invoice_number(issue_date)
        while Invoice.objects.filter(invoice_number=number).exists():
            number = self.next_invoice_number(issue_date)
        return number

    def _base_queryset(self):
        return Invoice.objects.select_related('client').prefetch_related('items', 'payments')

    def _get_client(self, client_id):
        try:
            return Client.objects.get(pk=client_id)
        except (Client.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Client {client_id} not found", client=client_id)

    def _save_items(self, invoice, items):
        for item in items:
            item.invoice = invoice
            item.save()

    def _check_version(self, invoice, expected_version):
        if expected_version is None:
            return
        if int(expected_version) != invoice.version:
            raise Conflict(
                f"Invoice {invoice.invoice_number} was modified (version {invoice.version}, "
                f"expected {expected_version}); reload and retry",
                version=invoice.version,
            )

    def _check_not_cancelled(self, invoice):
        if invoice.is_cancelled:
            raise InvalidState(
                f"Invoice {invoice.invoice_number} is cancelled and cannot be edited",
                invoice=invoice.pk,
            )


class ServiceCatalog:
    """
    Removal rules for catalog services.

    A service still referenced by invoice items is deactivated rather than
    deleted, so the items keep their link to where they were priced from.
    """

    def remove(self, service_id):
        """
        Delete or deactivate a service.

        Returns:
            The deactivated ServiceItem, or None if it was deleted

        Raises:
            NotFound: service missing
        """
        with transaction.atomic():
            try:
                service = ServiceItem.objects.select_for_update().get(pk=service_id)
            except (ServiceItem.DoesNotExist, ValueError, TypeError):
                raise NotFound(f"Service {service_id} not found", service=service_id)

            if service.invoice_items.exists():
                if service.is_active:
                    service.is_active = False
                    service.save(update_fields=['is_active', 'updated_at'])
                logger.info(f"Service deactivated (still referenced): {service.name}")
                return service

            name = service.name
            service.delete()

        logger.info(f"Service deleted: {name}")
        return None
