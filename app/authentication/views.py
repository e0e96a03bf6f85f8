"""
Authentication views.

This module provides API views for:
- Shop owner registration
- Reading and updating the signed-in shop's profile

Related files:
    - serializers.py: Request/response serialization
    - urls.py: URL routing

Note:
    Token endpoints come from djangorestframework-simplejwt:
    - Obtain pair: /api/v1/auth/token/
    - Refresh: /api/v1/auth/token/refresh/
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import RegisterSerializer, UserSerializer


class RegisterView(APIView):
    """
    API view for shop owner registration.

    POST: Create a shop owner account

    URL: /api/v1/auth/register/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="auth_register",
        summary="Register a shop",
        description="Create a shop owner account with email and password.",
        request=RegisterSerializer,
        responses={
            201: UserSerializer,
            400: OpenApiResponse(description="Validation error"),
        },
        tags=["Auth"],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class ShopProfileView(APIView):
    """
    API view for the signed-in shop's profile.

    GET: Retrieve shop details
    PATCH: Update shop_name / phone

    URL: /api/v1/auth/me/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="auth_me_retrieve",
        summary="Get current shop",
        responses={200: UserSerializer},
        tags=["Auth"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        operation_id="auth_me_update",
        summary="Update current shop",
        request=UserSerializer,
        responses={200: UserSerializer},
        tags=["Auth"],
    )
    def patch(self, request):
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
