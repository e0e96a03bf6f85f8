"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/        - Shop owner registration (POST)
    /api/v1/auth/token/           - Obtain JWT access/refresh pair (POST)
    /api/v1/auth/token/refresh/   - Refresh access token (POST)
    /api/v1/auth/me/              - Current shop profile (GET/PATCH)
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.views import RegisterView, ShopProfileView

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", ShopProfileView.as_view(), name="me"),
]
