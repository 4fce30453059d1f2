# apps/api/v1/urls.py
"""
URL routing for API v1.

All API endpoints are mounted under /api/v1/
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
)

from .views.auth import CurrentUserView
from .views.billing import ServiceItemViewSet, InvoiceViewSet, PaymentStatusView
from .views.clients import ClientViewSet
from .views.company import CompanySettingsView
from .views.documents import ClientDocumentViewSet

# Create router and register viewsets
router = DefaultRouter()

# Clients
router.register(r'clients', ClientViewSet, basename='client')

# Billing
router.register(r'billing/services', ServiceItemViewSet, basename='service')
router.register(r'billing/invoices', InvoiceViewSet, basename='invoice')

# Documents
router.register(r'files', ClientDocumentViewSet, basename='file')

urlpatterns = [
    # Authentication
    path('auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', CurrentUserView.as_view(), name='current_user'),

    # Access gate
    path('billing/payment-status/<int:client_id>/', PaymentStatusView.as_view(), name='payment-status'),

    # Settings
    path('settings/company/', CompanySettingsView.as_view(), name='company-settings'),

    # Router URLs
    path('', include(router.urls)),
]
