# apps/api/v1/views/company.py
"""Company settings endpoint - the firm's name and contact details."""
from dataclasses import asdict

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from apps.api.permissions import IsAdminRole
from apps.api.v1.serializers.company import CompanySettingsSerializer
from apps.company.models import CompanySettings, get_company_profile


@extend_schema(
    description="Get or update the firm's company settings",
    tags=["settings"]
)
class CompanySettingsView(APIView):
    """
    GET /api/v1/settings/company/ - Resolved company profile (blanks filled with defaults).
    PUT /api/v1/settings/company/ - Updates the stored settings (admin only).
    """

    def get_permissions(self):
        if self.request.method == 'GET':
            return [IsAuthenticated()]
        return [IsAdminRole()]

    def _serialize(self, row):
        data = asdict(get_company_profile())
        data['logo_url'] = row.logo_url
        data['updated_at'] = row.updated_at
        return data

    @extend_schema(responses={200: CompanySettingsSerializer})
    def get(self, request):
        return Response(self._serialize(CompanySettings.get_solo()))

    @extend_schema(request=CompanySettingsSerializer, responses={200: CompanySettingsSerializer})
    def put(self, request):
        row = CompanySettings.get_solo()
        serializer = CompanySettingsSerializer(row, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        row = serializer.save()
        return Response(self._serialize(row))
