# apps/company/models.py
"""
Firm identity settings.

Models:
- CompanySettings: Single row holding the firm's name and contact details

CompanyProfile is the resolved, read-only view of those settings that
gets handed to anything printing the firm's details (invoice headers,
emails). Blank fields fall back to settings.COMPANY_PROFILE_DEFAULTS.
"""
from dataclasses import dataclass

from django.conf import settings
from django.db import models
from shared.models import TimestampMixin

PROFILE_FIELDS = ('company_name', 'address', 'email', 'phone')


class CompanySettings(TimestampMixin):
    """
    The firm's own details. There is only ever one row (pk=1).
    """
    company_name = models.CharField(
        max_length=200,
        blank=True,
        help_text="Firm name printed on invoices"
    )
    address = models.TextField(
        blank=True,
        help_text="Postal address"
    )
    email = models.EmailField(
        blank=True,
        help_text="Contact email"
    )
    phone = models.CharField(
        max_length=30,
        blank=True,
        help_text="Contact phone"
    )
    logo_url = models.URLField(
        blank=True,
        help_text="Logo image URL"
    )

    class Meta:
        verbose_name = 'Company Settings'
        verbose_name_plural = 'Company Settings'

    def __str__(self):
        return self.company_name or 'Company Settings'

    def save(self, *args, **kwargs):
        self.pk = 1
        # A fresh instance overwrites the existing row, keeping its created_at
        if self._state.adding:
            created_at = type(self).objects.filter(pk=1).values_list('created_at', flat=True).first()
            if created_at is not None:
                self.created_at = created_at
                self._state.adding = False
                kwargs.pop('force_insert', None)
        super().save(*args, **kwargs)

    @classmethod
    def get_solo(cls):
        """Get or create the settings row."""
        obj, created = cls.objects.get_or_create(pk=1)
        return obj


@dataclass(frozen=True)
class CompanyProfile:
    company_name: str
    address: str
    email: str
    phone: str


def get_company_profile():
    """
    Resolve the firm profile, filling blanks from COMPANY_PROFILE_DEFAULTS.

    Returns:
        CompanyProfile
    """
    defaults = settings.COMPANY_PROFILE_DEFAULTS
    row = CompanySettings.objects.filter(pk=1).first()
    values = {}
    for name in PROFILE_FIELDS:
        stored = getattr(row, name, '') if row is not None else ''
        values[name] = stored or defaults.get(name, '')
    return CompanyProfile(**values)
