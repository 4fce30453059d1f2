# apps/api/v1/views/auth.py
"""
Current-user endpoint.

Token issue and refresh are the stock djangorestframework-simplejwt views,
wired in apps.api.v1.urls.
"""
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema


class CurrentUserView(APIView):
    """
    GET /api/v1/auth/me/

    Who the token belongs to, their role and (for CLIENT logins) the
    client they are bound to.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=['auth'],
        summary='Get the authenticated user',
        responses={200: {'type': 'object'}},
    )
    def get(self, request):
        user = request.user
        return Response({
            'id': user.pk,
            'username': user.username,
            'name': user.name or user.get_full_name(),
            'email': user.email,
            'role': user.role,
            'client': user.client_id,
            'can_manage_billing': user.can_manage_billing,
        })
