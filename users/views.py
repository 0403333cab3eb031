"""
Users — Views

Auth endpoints: login, refresh, logout, me.

@file users/views.py
"""

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from core.constants import AUDIT_ACTION_LOGIN, AUDIT_ACTION_LOGIN_FAILED, AUDIT_ACTION_LOGOUT
from core.services import AuditService

from .models import User
from .serializers import CustomTokenObtainPairSerializer, UserReadSerializer
from .services import AuthService

logger = logging.getLogger('opstrack')


class LoginView(APIView):
    """POST /v1/auth/login — Authenticate and obtain JWT pair."""
    permission_classes = [AllowAny]
    throttle_scope = 'anon'

    def post(self, request):
        serializer = CustomTokenObtainPairSerializer(
            data=request.data, context={'request': request},
        )
        ip_address = AuditService.get_client_ip(request)
        user_agent = request.META.get('HTTP_USER_AGENT', '')

        if not serializer.is_valid():
            AuthService.log_auth_event(
                action=AUDIT_ACTION_LOGIN_FAILED,
                user=User.objects.filter(phone=request.data.get('phone')).first(),
                ip_address=ip_address,
                user_agent=user_agent,
            )
            serializer.is_valid(raise_exception=True)

        user_data = serializer.validated_data.get('user')
        user_obj = User.objects.get(phone=request.data.get('phone'))

        AuthService.log_auth_event(
            action=AUDIT_ACTION_LOGIN,
            user=user_obj,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        return Response({
            'success': True,
            'data': {
                'access': serializer.validated_data['access'],
                'refresh': serializer.validated_data['refresh'],
                'user': user_data,
            },
        })


class LogoutView(APIView):
    """POST /v1/auth/logout — Blacklist the refresh token."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh')
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as exc:
                logger.info('Logout with unusable refresh token for user %s: %s', request.user.pk, exc)

        AuthService.log_auth_event(
            action=AUDIT_ACTION_LOGOUT,
            user=request.user,
            ip_address=AuditService.get_client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT', ''),
        )

        return Response({'success': True, 'data': None}, status=status.HTTP_200_OK)


class TokenRefreshAPIView(TokenRefreshView):
    """POST /v1/auth/refresh — Rotate refresh token."""
    pass


class MeView(APIView):
    """GET /v1/auth/me — Return the current authenticated user."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({
            'success': True,
            'data': UserReadSerializer(request.user).data,
        })
