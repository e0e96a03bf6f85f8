"""
URL configuration for the customers app.

Routes:
    GET/POST /api/v1/customers/
    GET/PATCH/DELETE /api/v1/customers/<customer_id>/
    GET /api/v1/customers/<customer_id>/entries/
"""

from django.urls import path

from .views import CustomerDetailView, CustomerEntriesView, CustomerListCreateView

app_name = "customers"

urlpatterns = [
    path("", CustomerListCreateView.as_view(), name="customer-list"),
    path("<uuid:customer_id>/", CustomerDetailView.as_view(), name="customer-detail"),
    path("<uuid:customer_id>/entries/", CustomerEntriesView.as_view(), name="customer-entries"),
]
