"""
Accounts Views - Authentication endpoints.

- POST /api/auth/register  create account, return token
- POST /api/auth/login     exchange credentials for a token
- GET  /api/auth/me        current user
"""

import logging

from rest_framework import permissions, status, views
from rest_framework.response import Response

from .authentication import issue_token
from .serializers import LoginSerializer, RegisterSerializer, UserSerializer

logger = logging.getLogger(__name__)


class RegisterView(views.APIView):
    """
    User registration endpoint.

    POST: Create new user account and return a bearer token.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info("Registered %s user %s", user.role, user.id)

        return Response({
            'status': 'success',
            'token': issue_token(user),
            'user': UserSerializer(user).data,
        }, status=status.HTTP_201_CREATED)


class LoginView(views.APIView):
    """
    User login endpoint.

    POST: Authenticate user and return a fresh bearer token.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data['user']

        return Response({
            'status': 'success',
            'token': issue_token(user),
            'user': UserSerializer(user).data,
        })


class CurrentUserView(views.APIView):
    """
    Current authenticated user endpoint.

    GET: Get current user details.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({
            'status': 'success',
            'user': UserSerializer(request.user).data,
        })
