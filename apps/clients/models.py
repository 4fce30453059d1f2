# apps/clients/models.py
"""
Client registry for the practice.

A Client is the firm's customer: the person or business whose returns,
filings and books the firm handles. Invoices and documents hang off it.
"""
from dataclasses import dataclass

from django.db import models
from shared.models import TimestampMixin


class Client(TimestampMixin):
    """
    A client of the firm.

    Identity numbers (PAN, GSTIN) and the physical file location are
    reference data used by staff; nothing in billing depends on them.
    """
    name = models.CharField(
        max_length=255,
        help_text="Client display name"
    )
    email = models.EmailField(
        unique=True,
        help_text="Primary contact email (unique)"
    )
    phone = models.CharField(
        max_length=30,
        help_text="Primary contact phone"
    )
    pan_number = models.CharField(
        max_length=20,
        blank=True,
        help_text="PAN (stored upper-case)"
    )
    gst_number = models.CharField(
        max_length=20,
        blank=True,
        help_text="GSTIN (stored upper-case)"
    )
    physical_file_number = models.CharField(
        max_length=50,
        blank=True,
        help_text="Office file number"
    )
    rack_location = models.CharField(
        max_length=100,
        blank=True,
        help_text="Where the physical file is kept"
    )

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='client_name_idx'),
            models.Index(fields=['phone'], name='client_phone_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        self.pan_number = (self.pan_number or '').strip().upper()
        self.gst_number = (self.gst_number or '').strip().upper()
        self.physical_file_number = (self.physical_file_number or '').strip().upper()
        super().save(*args, **kwargs)


@dataclass(frozen=True)
class ClientSummary:
    """Display-only view of a client, joined onto invoice responses."""
    id: int
    name: str
    email: str
    phone: str

    @classmethod
    def from_client(cls, client):
        return cls(id=client.pk, name=client.name, email=client.email, phone=client.phone)
