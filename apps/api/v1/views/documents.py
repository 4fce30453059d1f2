# apps/api/v1/views/documents.py
"""
ViewSet for client documents.

Every listing and download passes through FileAccessGate first.
"""
from rest_framework import mixins, viewsets, filters, status, parsers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.http import FileResponse
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter

from apps.documents.models import ClientDocument
from apps.documents.services import DocumentService, FileAccessGate
from apps.api.permissions import IsFirmUser, scope_to_user_client
from apps.api.v1.serializers.documents import (
    ClientDocumentSerializer, ClientDocumentUploadSerializer,
)


@extend_schema_view(
    retrieve=extend_schema(tags=['documents'], summary='Get document details'),
    destroy=extend_schema(tags=['documents'], summary='Delete a document'),
)
class ClientDocumentViewSet(mixins.RetrieveModelMixin,
                            mixins.DestroyModelMixin,
                            viewsets.GenericViewSet):
    """
    ViewSet for managing client documents.

    Supports upload via multipart/form-data. CLIENT users can only list and
    download their own documents, and not while they have overdue invoices.
    """
    serializer_class = ClientDocumentSerializer
    parser_classes = [parsers.MultiPartParser, parsers.FormParser, parsers.JSONParser]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['file_name', 'original_file_name', 'notes']
    ordering_fields = ['created_at', 'file_name', 'file_size']
    ordering = ['-created_at']

    def get_permissions(self):
        if self.action in ('upload', 'destroy'):
            return [IsFirmUser()]
        return [IsAuthenticated()]

    def get_queryset(self):
        qs = ClientDocument.objects.select_related('client', 'uploaded_by').all()
        return scope_to_user_client(qs, self.request.user)

    def retrieve(self, request, *args, **kwargs):
        document = self.get_object()
        FileAccessGate().check(request.user, document.client_id)
        return Response(self.get_serializer(document).data)

    def perform_destroy(self, instance):
        DocumentService(self.request.user).delete(instance)

    @extend_schema(
        tags=['documents'],
        summary="List a client's documents",
        parameters=[
            OpenApiParameter('category', str, description='ITR, GST, ACCOUNTING or USER_DOCS'),
            OpenApiParameter('year', str, description='e.g. 2025-26'),
            OpenApiParameter('include_archived', bool),
        ],
        responses={200: ClientDocumentSerializer(many=True)},
    )
    @action(detail=False, methods=['get'], url_path=r'client/(?P<client_id>\d+)')
    def for_client(self, request, client_id=None):
        """List documents for one client, after the access check."""
        FileAccessGate().check(request.user, client_id)

        documents = DocumentService(request.user).list_for_client(
            client_id,
            category=request.query_params.get('category'),
            year=request.query_params.get('year'),
            include_archived=request.query_params.get('include_archived') in ('1', 'true', 'True'),
        )
        documents = self.filter_queryset(documents)
        serializer = self.get_serializer(documents, many=True)
        return Response(serializer.data)

    @extend_schema(tags=['documents'], summary='Download a document')
    @action(detail=True, methods=['get'])
    def download(self, request, pk=None):
        """Stream the stored file."""
        document = self.get_object()
        FileAccessGate().check(request.user, document.client_id)

        return FileResponse(
            document.file.open('rb'),
            as_attachment=True,
            filename=document.file_name,
            content_type=document.mime_type or 'application/octet-stream',
        )

    @extend_schema(
        tags=['documents'],
        summary='Upload a document',
        request=ClientDocumentUploadSerializer,
        responses={201: ClientDocumentSerializer},
    )
    @action(detail=False, methods=['post'])
    def upload(self, request):
        """Upload a file into a client's folder."""
        serializer = ClientDocumentUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            document = DocumentService(request.user).upload(
                data['client'],
                data['file'],
                data['category'],
                year=data.get('year', ''),
                month=data.get('month', ''),
                file_name=data.get('file_name', ''),
                tags=data.get('tags'),
                notes=data.get('notes', ''),
            )
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            self.get_serializer(document).data,
            status=status.HTTP_201_CREATED,
        )
