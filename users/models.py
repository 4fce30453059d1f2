from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Portal user.

    Firm-side users (admin, manager, staff, intern) work across all clients.
    CLIENT users are bound to exactly one Client record and only ever see
    that client's invoices and documents.
    """
    ROLE_ADMIN = 'ADMIN'
    ROLE_MANAGER = 'MANAGER'
    ROLE_STAFF = 'STAFF'
    ROLE_INTERN = 'INTERN'
    ROLE_CLIENT = 'CLIENT'

    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_MANAGER, 'Manager'),
        (ROLE_STAFF, 'Staff'),
        (ROLE_INTERN, 'Intern'),
        (ROLE_CLIENT, 'Client'),
    ]

    BILLING_ROLES = (ROLE_ADMIN, ROLE_MANAGER)
    FIRM_ROLES = (ROLE_ADMIN, ROLE_MANAGER, ROLE_STAFF, ROLE_INTERN)

    name = models.CharField(max_length=255, blank=True)
    role = models.CharField(
        max_length=10,
        choices=ROLE_CHOICES,
        default=ROLE_STAFF,
        help_text="Portal role"
    )
    client = models.ForeignKey(
        'clients.Client',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='portal_users',
        help_text="Client record this login belongs to (CLIENT role only)"
    )

    @property
    def is_client_user(self):
        return self.role == self.ROLE_CLIENT

    @property
    def can_manage_billing(self):
        return self.is_superuser or self.role in self.BILLING_ROLES
