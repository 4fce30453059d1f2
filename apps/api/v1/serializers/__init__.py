# API Serializers
from .base import TimestampedModelSerializer
from .clients import ClientSerializer, ClientSummarySerializer
from .billing import (
    ServiceItemSerializer,
    InvoiceItemSerializer, InvoiceItemInputSerializer,
    PaymentSerializer, PaymentCreateSerializer,
    InvoiceListSerializer, InvoiceDetailSerializer, InvoiceWriteSerializer,
    InvoiceStatusSerializer, PaymentStatusSummarySerializer,
)
from .documents import ClientDocumentSerializer, ClientDocumentUploadSerializer
from .company import CompanySettingsSerializer
