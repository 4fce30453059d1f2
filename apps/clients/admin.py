# apps/clients/admin.py
"""
Django admin configuration for Client.
"""
from django.contrib import admin
from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    """Admin interface for Client."""
    list_display = ['name', 'email', 'phone', 'pan_number', 'gst_number', 'physical_file_number']
    search_fields = ['name', 'email', 'phone', 'pan_number', 'gst_number']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = [
        (None, {
            'fields': ['name', 'email', 'phone']
        }),
        ('Identity & Compliance', {
            'fields': ['pan_number', 'gst_number']
        }),
        ('Office File', {
            'fields': ['physical_file_number', 'rack_location'],
            'classes': ['collapse']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]
