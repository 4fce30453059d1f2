from django.contrib import admin
from .models import ClientDocument

@admin.register(ClientDocument)
class ClientDocumentAdmin(admin.ModelAdmin):
    list_display = ['file_name', 'client', 'category', 'year', 'month', 'mime_type', 'file_size', 'uploaded_by', 'created_at']
    list_filter = ['category', 'is_archived', 'year']
    search_fields = ['file_name', 'original_file_name', 'client__name', 'notes']
    raw_id_fields = ['client', 'uploaded_by']
    readonly_fields = ['file_size', 'created_at', 'updated_at']
