# apps/billing/admin.py
"""
Django admin configuration for billing models.

Totals, balance and payments are read-only here: they only change through
apps.billing.services and apps.billing.ledger, which keep them consistent.
"""
from django.contrib import admin, messages
from simple_history.admin import SimpleHistoryAdmin

from .exceptions import BillingError
from .models import Invoice, InvoiceItem, InvoiceSequence, Payment, ServiceItem
from .services import InvoiceService

EDITABLE_INVOICE_FIELDS = ('issue_date', 'due_date', 'tax', 'notes')


class InvoiceItemInline(admin.TabularInline):
    """Read-only view of invoice items."""
    model = InvoiceItem
    extra = 0
    fields = ['position', 'service', 'name', 'quantity', 'unit_price', 'amount']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class PaymentInline(admin.TabularInline):
    """Read-only view of payments."""
    model = Payment
    extra = 0
    fields = ['payment_date', 'amount', 'payment_method', 'transaction_id', 'recorded_by', 'created_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ServiceItem)
class ServiceItemAdmin(SimpleHistoryAdmin):
    """Admin interface for the service catalog."""
    list_display = ['name', 'category', 'base_price', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['name', 'description']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Invoice)
class InvoiceAdmin(SimpleHistoryAdmin):
    """Admin interface for Invoice."""
    list_display = [
        'invoice_number', 'client', 'issue_date', 'due_date',
        'status', 'total_amount', 'paid_amount', 'balance_display'
    ]
    list_filter = ['status', 'issue_date']
    search_fields = ['invoice_number', 'client__name', 'client__email']
    raw_id_fields = ['client', 'created_by']
    date_hierarchy = 'issue_date'
    readonly_fields = [
        'invoice_number', 'client', 'subtotal', 'total_amount', 'paid_amount',
        'balance_amount', 'status', 'version', 'created_by', 'created_at', 'updated_at',
    ]

    fieldsets = [
        (None, {
            'fields': ['invoice_number', 'client', 'status', 'version']
        }),
        ('Dates', {
            'fields': ['issue_date', 'due_date']
        }),
        ('Totals', {
            'fields': ['subtotal', 'tax', 'total_amount', 'paid_amount', 'balance_amount']
        }),
        ('Notes', {
            'fields': ['notes'],
            'classes': ['collapse']
        }),
        ('Timestamps', {
            'fields': ['created_by', 'created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    inlines = [InvoiceItemInline, PaymentInline]

    def has_add_permission(self, request):
        return False

    def get_readonly_fields(self, request, obj=None):
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None and obj.is_cancelled:
            readonly += [name for name in EDITABLE_INVOICE_FIELDS if name not in readonly]
        return readonly

    def save_model(self, request, obj, form, change):
        """
        Apply the edit through InvoiceService so it takes the row lock, refuses
        cancelled invoices and stale versions, and recomputes totals.
        """
        changes = {
            name: form.cleaned_data[name]
            for name in form.changed_data if name in EDITABLE_INVOICE_FIELDS
        }
        if not changes:
            return
        try:
            InvoiceService(request.user).update(obj.pk, expected_version=obj.version, **changes)
        except BillingError as exc:
            self.message_user(request, f"Invoice not saved: {exc}", messages.ERROR)
        obj.refresh_from_db()

    def balance_display(self, obj):
        return f"₹{obj.balance_amount:,.2f}"
    balance_display.short_description = 'Balance'


@admin.register(InvoiceSequence)
class InvoiceSequenceAdmin(admin.ModelAdmin):
    list_display = ['period', 'next_value']
    readonly_fields = ['period']
