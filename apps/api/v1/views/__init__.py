# API Views
from .auth import CurrentUserView
from .billing import ServiceItemViewSet, InvoiceViewSet, PaymentStatusView
from .clients import ClientViewSet
from .company import CompanySettingsView
from .documents import ClientDocumentViewSet
