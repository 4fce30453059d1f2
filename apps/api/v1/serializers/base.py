# apps/api/v1/serializers/base.py
"""
Base serializers shared across the API.
"""
from rest_framework import serializers


class TimestampedModelSerializer(serializers.ModelSerializer):
    """
    ModelSerializer that always exposes created_at/updated_at read-only.

    Usage:
        class ClientSerializer(TimestampedModelSerializer):
            class Meta:
                model = Client
                fields = ['id', 'name', 'created_at', 'updated_at']
    """

    def get_fields(self):
        fields = super().get_fields()
        for name in ('created_at', 'updated_at'):
            if name in fields:
                fields[name].read_only = True
        return fields
