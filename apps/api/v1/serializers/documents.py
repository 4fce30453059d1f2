# apps/api/v1/serializers/documents.py
"""
Serializers for client documents.
"""
from rest_framework import serializers
from apps.clients.models import Client
from apps.documents.models import ClientDocument
from .base import TimestampedModelSerializer


class ClientDocumentSerializer(TimestampedModelSerializer):
    """Serializer for ClientDocument model."""
    uploaded_by_name = serializers.CharField(
        source='uploaded_by.username', read_only=True, allow_null=True
    )
    download_url = serializers.SerializerMethodField()

    class Meta:
        model = ClientDocument
        fields = [
            'id', 'client', 'category', 'year', 'month',
            'file_name', 'original_file_name', 'mime_type', 'file_size',
            'tags', 'is_archived', 'notes',
            'uploaded_by', 'uploaded_by_name',
            'download_url', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'client', 'original_file_name', 'mime_type', 'file_size', 'uploaded_by',
        ]

    def get_download_url(self, obj) -> str:
        request = self.context.get('request')
        if request is None:
            return None
        return request.build_absolute_uri(f'/api/v1/files/{obj.pk}/download/')


class ClientDocumentUploadSerializer(serializers.Serializer):
    """Multipart payload for uploading a document."""
    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all())
    file = serializers.FileField()
    category = serializers.ChoiceField(choices=ClientDocument.Category.choices)
    year = serializers.CharField(required=False, allow_blank=True, max_length=10)
    month = serializers.CharField(required=False, allow_blank=True, max_length=20)
    file_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
