# apps/api/v1/serializers/clients.py
"""
Serializers for the Client registry.
"""
from rest_framework import serializers
from apps.clients.models import Client
from .base import TimestampedModelSerializer


class ClientSerializer(TimestampedModelSerializer):
    """Serializer for Client model."""

    class Meta:
        model = Client
        fields = [
            'id', 'name', 'email', 'phone',
            'pan_number', 'gst_number',
            'physical_file_number', 'rack_location',
            'created_at', 'updated_at',
        ]

    def validate_email(self, value):
        value = value.strip().lower()
        qs = Client.objects.filter(email=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A client with this email already exists.")
        return value


class ClientSummarySerializer(serializers.Serializer):
    """Display fields of a client, embedded in invoice responses."""
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField()
