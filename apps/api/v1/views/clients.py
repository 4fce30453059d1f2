# apps/api/v1/views/clients.py
"""
ViewSet for the Client registry.
"""
from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view

from apps.clients.models import Client
from apps.api.permissions import IsFirmUser
from apps.api.v1.serializers.clients import ClientSerializer


@extend_schema_view(
    list=extend_schema(tags=['clients'], summary='List all clients'),
    retrieve=extend_schema(tags=['clients'], summary='Get client details'),
    create=extend_schema(tags=['clients'], summary='Create a new client'),
    update=extend_schema(tags=['clients'], summary='Update a client'),
    partial_update=extend_schema(tags=['clients'], summary='Partially update a client'),
    destroy=extend_schema(tags=['clients'], summary='Delete a client'),
)
class ClientViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Client model.

    Firm users only; CLIENT logins never browse the registry.
    """
    serializer_class = ClientSerializer
    permission_classes = [IsFirmUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'email', 'phone', 'pan_number', 'gst_number', 'physical_file_number']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        return Client.objects.all()
