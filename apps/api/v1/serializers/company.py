# apps/api/v1/serializers/company.py
"""
Serializer for the firm's company settings.
"""
from apps.company.models import CompanySettings
from .base import TimestampedModelSerializer


class CompanySettingsSerializer(TimestampedModelSerializer):
    """Serializer for CompanySettings model."""

    class Meta:
        model = CompanySettings
        fields = ['company_name', 'address', 'email', 'phone', 'logo_url', 'updated_at']
