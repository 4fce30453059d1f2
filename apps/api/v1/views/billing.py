# apps/api/v1/views/billing.py
"""
ViewSets for billing: service catalog, invoices, payments, payment status.
"""
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view

from apps.billing.gate import AccessGateEvaluator
from apps.billing.ledger import PaymentLedger
from apps.billing.models import ServiceItem
from apps.billing.services import InvoiceService, ServiceCatalog
from apps.api.permissions import CanManageBilling, can_view_client, scope_to_user_client
from apps.api.v1.serializers.billing import (
    ServiceItemSerializer,
    InvoiceListSerializer, InvoiceDetailSerializer, InvoiceWriteSerializer,
    InvoiceStatusSerializer, PaymentCreateSerializer,
    PaymentStatusSummarySerializer,
)


@extend_schema_view(
    list=extend_schema(tags=['billing'], summary='List catalog services'),
    retrieve=extend_schema(tags=['billing'], summary='Get service details'),
    create=extend_schema(tags=['billing'], summary='Create a catalog service'),
    update=extend_schema(tags=['billing'], summary='Update a catalog service'),
    partial_update=extend_schema(tags=['billing'], summary='Partially update a catalog service'),
    destroy=extend_schema(
        tags=['billing'],
        summary='Delete a catalog service',
        description='Services still used by invoice items are deactivated and returned (200) instead.',
    ),
)
class ServiceItemViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the service catalog.

    Provides CRUD operations for billable services.
    """
    serializer_class = ServiceItemSerializer
    permission_classes = [CanManageBilling]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'is_active']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'base_price', 'category']
    ordering = ['name']

    def get_queryset(self):
        return ServiceItem.objects.all()

    def destroy(self, request, *args, **kwargs):
        service = self.get_object()
        deactivated = ServiceCatalog().remove(service.pk)
        if deactivated is not None:
            return Response(self.get_serializer(deactivated).data)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=['billing'], summary='List invoices'),
    retrieve=extend_schema(tags=['billing'], summary='Get invoice details'),
    create=extend_schema(
        tags=['billing'], summary='Create an invoice',
        request=InvoiceWriteSerializer, responses={201: InvoiceDetailSerializer},
    ),
    update=extend_schema(
        tags=['billing'], summary='Update an invoice',
        request=InvoiceWriteSerializer, responses={200: InvoiceDetailSerializer},
    ),
    partial_update=extend_schema(
        tags=['billing'], summary='Partially update an invoice',
        request=InvoiceWriteSerializer, responses={200: InvoiceDetailSerializer},
    ),
    destroy=extend_schema(tags=['billing'], summary='Delete an invoice and its payments'),
)
class InvoiceViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Invoice model.

    Writes are delegated to InvoiceService / PaymentLedger so totals,
    balance and status are always recomputed together. CLIENT users only
    see their own client's invoices and cannot write.
    """
    permission_classes = [CanManageBilling]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['client', 'status']
    search_fields = ['invoice_number', 'client__name']
    ordering_fields = ['invoice_number', 'issue_date', 'due_date', 'total_amount', 'created_at']
    ordering = ['-created_at', '-id']

    def get_queryset(self):
        return scope_to_user_client(InvoiceService().list(), self.request.user)

    def get_serializer_class(self):
        if self.action == 'list':
            return InvoiceListSerializer
        if self.action in ('create', 'update', 'partial_update'):
            return InvoiceWriteSerializer
        return InvoiceDetailSerializer

    def _detail(self, invoice, status_code=status.HTTP_200_OK):
        invoice = InvoiceService().get(invoice.pk)
        serializer = InvoiceDetailSerializer(invoice, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = InvoiceWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        invoice = InvoiceService(request.user).create(
            client_id=data['client'],
            items=data['items'],
            tax=data.get('tax'),
            due_date=data['due_date'],
            issue_date=data.get('issue_date'),
            notes=data.get('notes', ''),
            invoice_number=data.get('invoice_number') or None,
        )
        return self._detail(invoice, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        invoice = self.get_object()
        serializer = InvoiceWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        invoice = InvoiceService(request.user).update(
            invoice.pk,
            items=data.get('items'),
            tax=data.get('tax'),
            due_date=data.get('due_date'),
            issue_date=data.get('issue_date'),
            notes=data.get('notes'),
            expected_version=data.get('version'),
            client_id=data.get('client'),
            invoice_number=data.get('invoice_number') or None,
        )
        return self._detail(invoice)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        invoice = self.get_object()
        InvoiceService(request.user).delete(invoice.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=['billing'],
        summary='Record a payment',
        request=PaymentCreateSerializer,
        responses={201: InvoiceDetailSerializer}
    )
    @action(detail=True, methods=['post'])
    def payments(self, request, pk=None):
        """Record a payment against this invoice."""
        invoice = self.get_object()
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        PaymentLedger(request.user).add_payment(
            invoice.pk,
            amount=data['amount'],
            payment_method=data['payment_method'],
            payment_date=data.get('payment_date'),
            transaction_id=data.get('transaction_id', ''),
            note=data.get('note', ''),
            operation_id=data.get('operation_id') or None,
        )
        return self._detail(invoice, status.HTTP_201_CREATED)

    @extend_schema(
        tags=['billing'],
        summary='Delete a payment',
        responses={200: InvoiceDetailSerializer}
    )
    @action(detail=True, methods=['delete'], url_path=r'payments/(?P<payment_id>[^/.]+)')
    def delete_payment(self, request, pk=None, payment_id=None):
        """Remove a payment from this invoice."""
        invoice = self.get_object()
        PaymentLedger(request.user).delete_payment(invoice.pk, payment_id)
        return self._detail(invoice)

    @extend_schema(
        tags=['billing'],
        summary='Set invoice status manually',
        request=InvoiceStatusSerializer,
        responses={200: InvoiceDetailSerializer}
    )
    @action(detail=True, methods=['patch'], url_path='status')
    def set_status(self, request, pk=None):
        """Cancel, un-cancel or otherwise override the status of this invoice."""
        invoice = self.get_object()
        serializer = InvoiceStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        InvoiceService(request.user).set_status(
            invoice.pk,
            serializer.validated_data['status'],
            expected_version=serializer.validated_data.get('version'),
        )
        return self._detail(invoice)


class PaymentStatusView(APIView):
    """
    GET /api/v1/billing/payment-status/<client_id>/

    The client's invoice counts, outstanding balance, overdue invoices and
    whether its documents may currently be served.
    """

    @extend_schema(
        tags=['billing'],
        summary='Get payment status for a client',
        responses={200: PaymentStatusSummarySerializer}
    )
    def get(self, request, client_id):
        if not can_view_client(request.user, client_id):
            raise PermissionDenied("You can only view your own payment status.")
        summary = AccessGateEvaluator().evaluate(client_id)
        return Response(PaymentStatusSummarySerializer(summary.as_dict()).data)
