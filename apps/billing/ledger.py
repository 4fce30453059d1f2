# apps/billing/ledger.py
"""
Payment ledger for client invoices.

PaymentLedger handles:
- Recording a payment against an invoice
- Deleting a wrongly entered payment
- Keeping paid/balance/status in step with the payment rows

Every mutation locks the invoice row and recomputes the derived fields
from the child rows inside the same transaction, so a payment that is
written but not reflected in the totals is never visible.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from .exceptions import InvalidArgument, InvalidState, NotFound
from .models import Invoice, Payment, quantize_money

logger = logging.getLogger(__name__)


def lock_invoice(invoice_id):
    """
    Fetch an invoice under a row lock. Must be called inside a transaction.

    Raises:
        NotFound: invoice does not exist
    """
    try:
        return Invoice.objects.select_for_update().get(pk=invoice_id)
    except (Invoice.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Invoice {invoice_id} not found", invoice=invoice_id)


class PaymentLedger:
    """
    Append/remove log of payments on one invoice at a time.

    Usage:
        ledger = PaymentLedger(user=request.user)

        payment = ledger.add_payment(
            invoice_id=invoice.id,
            amount=Decimal('500.00'),
            payment_method='UPI',
            transaction_id='UTR1234',
        )

        ledger.delete_payment(invoice.id, payment.id)
    """

    def __init__(self, user=None):
        """
        Args:
            user: User performing operations (for audit trail)
        """
        self.user = user

    # ===== ADD =====

    def add_payment(
        self,
        invoice_id,
        amount,
        payment_method=Payment.Method.CASH,
        payment_date=None,
        transaction_id='',
        note='',
        operation_id=None,
    ):
        """
        Record a payment and recompute the invoice.

        A repeated call with the same operation_id returns the payment the
        first call created and changes nothing.

        Args:
            invoice_id: Invoice primary key
            amount: Payment amount, must be > 0
            payment_method: One of Payment.Method
            payment_date: Date received (defaults to today)
            transaction_id: UTR, cheque number, etc.
            note: Free-text note
            operation_id: Optional idempotency key

        Returns:
            Payment instance

        Raises:
            NotFound: invoice does not exist
            InvalidArgument: amount <= 0 or unknown payment method
            InvalidState: invoice is CANCELLED
        """
        amount = self._validate_amount(amount)
        if payment_method not in Payment.Method.values:
            raise InvalidArgument(
                f"Unknown payment method '{payment_method}'",
                field='payment_method',
            )
        if payment_date is None:
            payment_date = timezone.localdate()

        with transaction.atomic():
            invoice = lock_invoice(invoice_id)

            if operation_id:
                existing = invoice.payments.filter(operation_id=operation_id).first()
                if existing is not None:
                    logger.info(
                        f"Payment replay ignored: invoice={invoice.invoice_number}, "
                        f"operation_id={operation_id}, payment={existing.pk}"
                    )
                    return existing

            if invoice.is_cancelled:
                raise InvalidState(
                    f"Cannot record payment on cancelled invoice {invoice.invoice_number}",
                    invoice=invoice.pk,
                )

            payment = Payment.objects.create(
                invoice=invoice,
                amount=amount,
                payment_date=payment_date,
                payment_method=payment_method,
                transaction_id=transaction_id or '',
                note=note or '',
                operation_id=operation_id or '',
                recorded_by=self.user,
            )

            self._recalculate(invoice)

        logger.info(
            f"Payment recorded: invoice={invoice.invoice_number}, amount={amount}, "
            f"paid={invoice.paid_amount}, balance={invoice.balance_amount}, status={invoice.status}"
        )
        return payment

    # ===== DELETE =====

    def delete_payment(self, invoice_id, payment_id):
        """
        Remove a payment and recompute the invoice.

        Args:
            invoice_id: Invoice primary key
            payment_id: Payment primary key, must belong to the invoice

        Returns:
            The updated Invoice

        Raises:
            NotFound: invoice missing, or payment not on this invoice
            InvalidState: invoice is CANCELLED
        """
        with transaction.atomic():
            invoice = lock_invoice(invoice_id)

            try:
                payment = invoice.payments.get(pk=payment_id)
            except (Payment.DoesNotExist, ValueError, TypeError):
                raise NotFound(
                    f"Payment {payment_id} not found on invoice {invoice.invoice_number}",
                    payment=payment_id,
                )

            if invoice.is_cancelled:
                raise InvalidState(
                    f"Cannot delete payment on cancelled invoice {invoice.invoice_number}",
                    invoice=invoice.pk,
                )

            amount = payment.amount
            payment.delete()
            self._recalculate(invoice)

        logger.info(
            f"Payment deleted: invoice={invoice.invoice_number}, amount={amount}, "
            f"paid={invoice.paid_amount}, balance={invoice.balance_amount}, status={invoice.status}"
        )
        return invoice

    # ===== HELPERS =====

    def _validate_amount(self, amount):
        if isinstance(amount, float):
            amount = str(amount)
        try:
            amount = quantize_money(Decimal(amount))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidArgument("Payment amount must be a number", field='amount')
        if amount <= 0:
            raise InvalidArgument("Payment amount must be positive", field='amount')
        return amount

    def _recalculate(self, invoice):
        invoice.recalculate()
        invoice.version += 1
        invoice.save()
