# apps/api/v1/serializers/billing.py
"""
Serializers for billing: ServiceItem, Invoice, InvoiceItem, Payment.

Invoice writes go through apps.billing.services, so the write serializers
here are plain Serializers that only shape and type-check the payload.
"""
from dataclasses import asdict
from decimal import Decimal

from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from apps.billing.models import Invoice, InvoiceItem, Payment, ServiceItem
from apps.billing.status import InvoiceStatus
from apps.clients.models import ClientSummary
from .base import TimestampedModelSerializer
from .clients import ClientSummarySerializer


class ServiceItemSerializer(TimestampedModelSerializer):
    """Serializer for ServiceItem model."""
    base_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.00')
    )

    class Meta:
        model = ServiceItem
        fields = [
            'id', 'name', 'description', 'base_price', 'category', 'is_active',
            'created_at', 'updated_at',
        ]


# ─── Items ───────────────────────────────────────────────────────────────────

class InvoiceItemSerializer(serializers.ModelSerializer):
    """Serializer for InvoiceItem model (read)."""

    class Meta:
        model = InvoiceItem
        fields = [
            'id', 'position', 'service', 'name', 'description',
            'quantity', 'unit_price', 'amount',
        ]


class InvoiceItemInputSerializer(serializers.Serializer):
    """
    One item of an invoice create/update payload.

    Either `service` (catalog id) or `name` + `unit_price`.
    """
    service = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)


# ─── Payments ────────────────────────────────────────────────────────────────

class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for Payment model (read)."""
    recorded_by_name = serializers.CharField(source='recorded_by.username', read_only=True, allow_null=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'amount', 'payment_date', 'payment_method',
            'transaction_id', 'note', 'operation_id',
            'recorded_by', 'recorded_by_name', 'created_at',
        ]


class PaymentCreateSerializer(serializers.Serializer):
    """Payload for recording a payment."""
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_date = serializers.DateField(required=False)
    payment_method = serializers.ChoiceField(choices=Payment.Method.choices, default=Payment.Method.CASH)
    transaction_id = serializers.CharField(required=False, allow_blank=True, max_length=100, default='')
    note = serializers.CharField(required=False, allow_blank=True, default='')
    operation_id = serializers.CharField(
        required=False, allow_blank=True, max_length=64,
        help_text="Idempotency key; resending the same key does not record a second payment"
    )


# ─── Invoices ────────────────────────────────────────────────────────────────

class ClientDetailMixin(serializers.Serializer):
    client_detail = serializers.SerializerMethodField()

    @extend_schema_field(ClientSummarySerializer)
    def get_client_detail(self, obj):
        return asdict(ClientSummary.from_client(obj.client))


class InvoiceListSerializer(ClientDetailMixin, serializers.ModelSerializer):
    """Lightweight serializer for Invoice list views."""
    is_overdue = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_number', 'client', 'client_detail',
            'issue_date', 'due_date', 'status',
            'total_amount', 'paid_amount', 'balance_amount', 'is_overdue',
            'version',
        ]

    def get_is_overdue(self, obj) -> bool:
        return obj.is_overdue()


class InvoiceDetailSerializer(ClientDetailMixin, serializers.ModelSerializer):
    """Detailed serializer for Invoice with nested items and payments."""
    is_overdue = serializers.SerializerMethodField()
    items = InvoiceItemSerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_number', 'client', 'client_detail',
            'issue_date', 'due_date', 'status',
            'items', 'subtotal', 'tax', 'total_amount',
            'payments', 'paid_amount', 'balance_amount', 'is_overdue',
            'notes', 'created_by', 'version',
            'created_at', 'updated_at',
        ]

    def get_is_overdue(self, obj) -> bool:
        return obj.is_overdue()


class InvoiceWriteSerializer(serializers.Serializer):
    """
    Payload for creating or updating an invoice.

    On update every field is optional; `client` and `invoice_number` may be
    sent back unchanged but not altered. `version` is the version the
    caller last read.
    """
    client = serializers.IntegerField()
    invoice_number = serializers.CharField(required=False, allow_blank=True, max_length=50)
    items = InvoiceItemInputSerializer(many=True)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    issue_date = serializers.DateField(required=False)
    due_date = serializers.DateField()
    notes = serializers.CharField(required=False, allow_blank=True)
    version = serializers.IntegerField(required=False, min_value=1)


class InvoiceStatusSerializer(serializers.Serializer):
    """Payload for a manual status change."""
    status = serializers.ChoiceField(choices=InvoiceStatus.choices)
    version = serializers.IntegerField(required=False, min_value=1)


# ─── Payment status ──────────────────────────────────────────────────────────

class OverdueDetailSerializer(serializers.Serializer):
    invoice_number = serializers.CharField()
    due_date = serializers.DateField()
    balance_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class PaymentStatusSummarySerializer(serializers.Serializer):
    """A client's aggregate billing position and document-access decision."""
    client_id = serializers.IntegerField()
    total_invoices = serializers.IntegerField()
    paid_invoices = serializers.IntegerField()
    pending_invoices = serializers.IntegerField()
    overdue_invoices = serializers.IntegerField()
    total_outstanding = serializers.DecimalField(max_digits=14, decimal_places=2)
    overdue_details = OverdueDetailSerializer(many=True)
    has_file_access = serializers.BooleanField()
