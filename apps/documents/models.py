# apps/documents/models.py
"""
Client document models.

Models:
- ClientDocument: A file the firm keeps for a client (returns, GST filings, books, uploads)
"""
from django.conf import settings
from django.db import models
from shared.models import TimestampMixin


def client_document_path(instance, filename):
    """MEDIA_ROOT/clients/<client_id>/<category>/<filename>"""
    return f"clients/{instance.client_id}/{instance.category.lower()}/{filename}"


class ClientDocument(TimestampMixin):
    """
    A document stored for a client.

    Listing and downloading a client's documents goes through
    apps.documents.services.FileAccessGate, which refuses CLIENT users
    whose account has overdue invoices.

    Example:
        ClientDocument: ITR-V_2025-26.pdf
        Client: Sharma Traders
        Category: ITR, Year: 2025-26
    """

    class Category(models.TextChoices):
        ITR = 'ITR', 'Income Tax Return'
        GST = 'GST', 'GST'
        ACCOUNTING = 'ACCOUNTING', 'Accounting'
        USER_DOCS = 'USER_DOCS', 'Client Uploads'

    client = models.ForeignKey(
        'clients.Client',
        on_delete=models.CASCADE,
        related_name='documents',
        help_text="Client this document belongs to"
    )
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        help_text="Folder the document is filed under"
    )
    year = models.CharField(
        max_length=10,
        blank=True,
        help_text="Assessment / financial year, e.g. 2025-26"
    )
    month = models.CharField(
        max_length=20,
        blank=True,
        help_text="Month for GST and accounting filings"
    )

    # File data
    file = models.FileField(
        upload_to=client_document_path,
        help_text="Stored file"
    )
    file_name = models.CharField(
        max_length=255,
        help_text="Name shown to users"
    )
    original_file_name = models.CharField(
        max_length=255,
        help_text="Name of the file as uploaded"
    )
    mime_type = models.CharField(
        max_length=100,
        blank=True,
        help_text="MIME type (e.g., application/pdf, image/png)"
    )
    file_size = models.PositiveBigIntegerField(
        default=0,
        help_text="File size in bytes"
    )

    # Organization
    tags = models.JSONField(
        default=list,
        blank=True,
        help_text="Free-form labels"
    )
    is_archived = models.BooleanField(
        default=False,
        help_text="Hidden from default listings"
    )
    notes = models.TextField(
        blank=True,
        help_text="Internal notes"
    )

    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='uploaded_documents',
        help_text="User who uploaded this file"
    )

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['client', 'year', 'category'], name='document_client_year_cat_idx'),
        ]

    def __str__(self):
        return f"{self.file_name} ({self.client_id}/{self.category})"

    def save(self, *args, **kwargs):
        if self.file and not self.file_size:
            self.file_size = self.file.size
        if self.file and not self.original_file_name:
            self.original_file_name = self.file.name
        if not self.file_name:
            self.file_name = self.original_file_name
        super().save(*args, **kwargs)
