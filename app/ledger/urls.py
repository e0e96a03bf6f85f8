"""
URL configuration for the ledger app.

Routes:
    GET/POST /api/v1/ledger/entries/
    GET/DELETE /api/v1/ledger/entries/<entry_id>/
    GET /api/v1/ledger/summary/
    GET /api/v1/ledger/summary/today/
"""

from django.urls import path

from .views import (
    LedgerEntryDetailView,
    LedgerEntryListCreateView,
    LedgerSummaryView,
    LedgerTodaySummaryView,
)

app_name = "ledger"

urlpatterns = [
    path("entries/", LedgerEntryListCreateView.as_view(), name="entry-list"),
    path("entries/<uuid:entry_id>/", LedgerEntryDetailView.as_view(), name="entry-detail"),
    path("summary/", LedgerSummaryView.as_view(), name="summary"),
    path("summary/today/", LedgerTodaySummaryView.as_view(), name="summary-today"),
]
