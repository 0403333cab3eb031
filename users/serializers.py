"""
Users — Serializers

User representation and custom JWT token claims.

@file users/serializers.py
"""

from django.contrib.auth import authenticate
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import User


# ---------------------------------------------------------------------------
# JWT — custom claims
# ---------------------------------------------------------------------------

class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Inject phone and role names into the JWT payload."""

    username_field = 'phone'

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['phone'] = user.phone
        token['roles'] = user.role_names
        return token

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get('request'),
            phone=attrs.get('phone'),
            password=attrs.get('password'),
        )

        if user is None:
            raise serializers.ValidationError(
                {'detail': 'Invalid credentials or account not active.'},
                code='authentication_failed',
            )

        data = super().validate(attrs)
        data['user'] = UserReadSerializer(user).data
        return data


# ---------------------------------------------------------------------------
# User / role serializers
# ---------------------------------------------------------------------------

class UserReadSerializer(serializers.ModelSerializer):
    """Read-only user representation."""

    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'phone', 'email', 'first_name', 'last_name',
            'is_staff', 'is_active', 'date_joined', 'roles',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_roles(self, obj):
        return obj.role_names

