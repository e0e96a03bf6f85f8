"""
URL configuration for the shop ledger service.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        register/                  - Shop owner registration
        token/                     - Obtain JWT pair
        token/refresh/             - Refresh access token
        me/                        - Current shop profile (GET/PATCH)
    /api/v1/customers/             - Customer accounts
        {id}/                      - Customer detail/update/deactivate
        {id}/entries/              - Customer's ledger entries
    /api/v1/ledger/                - Ledger
        entries/                   - List/record entries
        entries/{id}/              - Get/reverse entry
        summary/                   - Totals over a date range
        summary/today/             - Totals for the current day

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication (registration, JWT, profile)
    path("auth/", include("authentication.urls")),
    # Customers
    path("customers/", include("customers.urls")),
    # Ledger
    path("ledger/", include("ledger.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Shop Ledger Admin"
admin.site.site_title = "Shop Ledger"
admin.site.index_title = "Customers and ledger entries"
