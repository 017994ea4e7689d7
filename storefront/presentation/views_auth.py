# storefront/presentation/views_auth.py
"""
Views para autenticação e registro de usuários (JWT).
"""
import logging

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from storefront.core import dependency_injection as di
from storefront.core.exceptions import InvalidDataError

from .permissions import public
from .serializers import (
    RegisterSerializer, AuthResponseSerializer, UserResponseSerializer, LogoutSerializer,
)

logger = logging.getLogger(__name__)


class StorefrontTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Login por e-mail/senha; o token carrega sub, role e email."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        token['email'] = user.email
        return token


def issue_tokens(user_model):
    refresh = StorefrontTokenObtainPairSerializer.get_token(user_model)
    return {'access': str(refresh.access_token), 'refresh': str(refresh)}


class RegisterView(APIView):
    """Cadastro público; o novo usuário recebe o papel USER e já sai autenticado."""
    authentication_classes = []

    @public
    @extend_schema(tags=['Auth'], summary='Register', request=RegisterSerializer,
                   responses={201: AuthResponseSerializer})
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = di.get_manage_users_use_case().register(serializer.validated_data)
        user_model = get_user_model().objects.get(pk=user.id)

        return Response(
            {'user': UserResponseSerializer(user).data, 'tokens': issue_tokens(user_model)},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=['Auth'], summary='Login with email and password')
class LoginView(TokenObtainPairView):
    serializer_class = StorefrontTokenObtainPairSerializer


@extend_schema(tags=['Auth'], summary='Refresh the access token')
class RefreshView(TokenRefreshView):
    pass


class LogoutView(APIView):
    """Invalida o refresh token informado (blacklist)."""

    @extend_schema(tags=['Auth'], summary='Logout', request=LogoutSerializer, responses={204: None})
    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            RefreshToken(serializer.validated_data['refresh']).blacklist()
        except TokenError as exc:
            raise InvalidDataError(f"Invalid refresh token: {exc}")
        logger.info("Usuário %s encerrou a sessão.", request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
