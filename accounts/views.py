# accounts/views.py
import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def _user_payload(user):
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "username": user.username,
        "date_joined": user.date_joined,
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    API Endpoint: POST /api/register/
    Registers a new host and signs them in.
    Expects: first_name, last_name, email, password
    """
    serializer = UserSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.save()
    token, _ = Token.objects.get_or_create(user=user)
    logger.info(f"New account registered: {user.email}")

    return Response({
        "message": "Registration successful.",
        "token": token.key,
        "user": _user_payload(user)
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    API Endpoint: POST /api/login/
    Authenticates user by email and password.
    Returns: token and user info.
    """
    email = request.data.get('email')
    password = request.data.get('password')

    if not email or not password:
        return Response({
            "error": "Email and password are required."
        }, status=status.HTTP_400_BAD_REQUEST)

    user = authenticate(request, email=email, password=password)
    if not user:
        return Response({
            "error": "Invalid credentials."
        }, status=status.HTTP_401_UNAUTHORIZED)

    # One active token per user
    Token.objects.filter(user=user).delete()
    token = Token.objects.create(user=user)

    return Response({
        "token": token.key,
        "user": _user_payload(user)
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    API Endpoint: POST /api/logout/
    Deletes the caller's token.
    """
    Token.objects.filter(user=request.user).delete()
    return Response({"message": "Logged out."}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profile(request):
    """
    API Endpoint: GET /api/profile/
    Returns authenticated user's profile.
    Requires token in Authorization header.
    """
    return Response(_user_payload(request.user))
