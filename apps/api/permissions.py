# apps/api/permissions.py
"""
Role-based permissions for the REST API.

Firm users (ADMIN, MANAGER, STAFF, INTERN) work across all clients.
CLIENT users are bound to one Client and only see that client's data.
"""
from rest_framework import permissions


class IsFirmUser(permissions.BasePermission):
    """User must be authenticated and not a CLIENT login."""
    message = "Only firm staff can perform this action."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return not request.user.is_client_user


class IsAdminRole(permissions.BasePermission):
    """User must have the ADMIN role or be a superuser."""
    message = "Only administrators can perform this action."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.is_superuser or request.user.role == request.user.ROLE_ADMIN


class CanManageBilling(permissions.BasePermission):
    """
    Reads for every authenticated user (further scoped by the view);
    writes only for ADMIN and MANAGER.
    """
    message = "Only administrators and managers can change billing records."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.can_manage_billing


def scope_to_user_client(queryset, user, field='client'):
    """
    Restrict a queryset to the user's own client when the user is a
    CLIENT login. Firm users get the queryset unchanged.
    """
    if not user.is_client_user:
        return queryset
    if user.client_id is None:
        return queryset.none()
    return queryset.filter(**{f'{field}_id': user.client_id})


def can_view_client(user, client_id):
    """Whether the user may read data for client_id."""
    if not user.is_client_user:
        return True
    return user.client_id is not None and str(user.client_id) == str(client_id)
