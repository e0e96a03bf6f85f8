"""
API views for the customer ledger.

Provides:
- LedgerEntryListCreateView: List entries / record a credit or payment
- LedgerEntryDetailView: Get an entry / reverse (soft delete) it
- LedgerSummaryView: Credit and payment totals over a date range
- LedgerTodaySummaryView: Credit and payment totals for the current day

Every view is scoped to the authenticated shop (request.user). Entries and
customers of other shops behave as if they do not exist.

Error responses:
    400: Request shape errors (DRF) and INVALID_AMOUNT / INVALID_ENTRY_TYPE
    404: CUSTOMER_NOT_FOUND / ENTRY_NOT_FOUND
    409: ALREADY_REVERSED / IDEMPOTENCY_KEY_REUSED
    503: CONCURRENCY_CONFLICT after the façade exhausted its retries
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import BaseApplicationError
from core.views import error_response

from .exceptions import ConcurrencyConflict
from .facade import facade
from .serializers import (
    CreateEntrySerializer,
    EntryListQuerySerializer,
    EntryPageSerializer,
    EntryResultSerializer,
    EntrySummarySerializer,
    LedgerEntrySerializer,
    ReverseEntrySerializer,
    SummaryQuerySerializer,
)
from .types import DateRange

IDEMPOTENCY_HEADER = "Idempotency-Key"


def ledger_error_response(exc: BaseApplicationError) -> Response:
    """Map a ledger failure to a response; conflicts left after retries are 503."""
    if isinstance(exc, ConcurrencyConflict):
        return error_response(exc, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return error_response(exc)


class LedgerEntryListCreateView(APIView):
    """
    List and record ledger entries.

    GET /api/v1/ledger/entries/
        Paginated entries, newest occurred_at first.

    POST /api/v1/ledger/entries/
        Record a credit or payment and update the customer's balance.

    Query Parameters (GET):
        customer: Filter by customer UUID
        type: credit or payment
        start_date / end_date: Inclusive local dates (YYYY-MM-DD)
        include_deleted: Include reversed entries (default: false)
        page: Page number (default: 1)
        page_size: Results per page (default: 20, max: 100)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_ledger_entries",
        summary="List ledger entries",
        description=(
            "List the shop's ledger entries, newest first. Reversed entries are "
            "excluded unless include_deleted=true."
        ),
        parameters=[EntryListQuerySerializer],
        responses={
            200: EntryPageSerializer,
            400: OpenApiResponse(description="Invalid query parameters"),
            404: OpenApiResponse(description="Customer not found"),
        },
        tags=["Ledger"],
    )
    def get(self, request):
        query = EntryListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)
        params = query.validated_data

        try:
            page = facade.list_entries(
                shop_id=request.user.id,
                customer_id=params.get("customer"),
                entry_type=params.get("type"),
                date_range=DateRange.from_dates(params.get("start_date"), params.get("end_date")),
                page=params["page"],
                page_size=params.get("page_size"),
                include_deleted=params["include_deleted"],
            )
        except BaseApplicationError as e:
            return ledger_error_response(e)

        return Response(EntryPageSerializer(page).data)

    @extend_schema(
        operation_id="create_ledger_entry",
        summary="Record a credit or payment",
        description=(
            "Record a credit (customer takes goods on account) or a payment "
            "(customer pays). The customer's balance and running totals are "
            "updated in the same transaction as the entry. Repeating a request "
            "with the same idempotency key returns the original entry with 200."
        ),
        parameters=[
            OpenApiParameter(
                name=IDEMPOTENCY_HEADER,
                type=OpenApiTypes.STR,
                location=OpenApiParameter.HEADER,
                description="Optional repeat-safe key, unique per shop",
                required=False,
            ),
        ],
        request=CreateEntrySerializer,
        responses={
            201: EntryResultSerializer,
            200: OpenApiResponse(
                response=EntryResultSerializer,
                description="Idempotent replay of an existing entry",
            ),
            400: OpenApiResponse(description="Validation error or invalid amount"),
            404: OpenApiResponse(description="Customer not found"),
            409: OpenApiResponse(description="Idempotency key already used for a different entry"),
            503: OpenApiResponse(description="Concurrent update conflict, retry later"),
        },
        tags=["Ledger"],
    )
    def post(self, request):
        serializer = CreateEntrySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        try:
            result = facade.create_entry(
                shop_id=request.user.id,
                customer_id=data["customer"],
                entry_type=data["entry_type"],
                amount=data["amount"],
                description=data.get("description", ""),
                payment_method=data.get("payment_method"),
                occurred_at=data.get("occurred_at"),
                bill_number=data.get("bill_number", ""),
                idempotency_key=data.get("idempotency_key") or request.headers.get(IDEMPOTENCY_HEADER),
                created_by_id=request.user.id,
            )
        except BaseApplicationError as e:
            return ledger_error_response(e)

        return Response(
            EntryResultSerializer(result).data,
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )


class LedgerEntryDetailView(APIView):
    """
    Retrieve or reverse a single ledger entry.

    GET /api/v1/ledger/entries/{entry_id}/
        Entry details, including reversed entries.

    DELETE /api/v1/ledger/entries/{entry_id}/
        Reverse the entry: undo its balance effect and mark it deleted.
        Body (optional): {"reason": "..."}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_ledger_entry",
        summary="Get ledger entry",
        responses={
            200: LedgerEntrySerializer,
            404: OpenApiResponse(description="Entry not found"),
        },
        tags=["Ledger"],
    )
    def get(self, request, entry_id):
        try:
            entry = facade.get_entry(shop_id=request.user.id, entry_id=entry_id)
        except BaseApplicationError as e:
            return ledger_error_response(e)
        return Response(LedgerEntrySerializer(entry).data)

    @extend_schema(
        operation_id="reverse_ledger_entry",
        summary="Reverse ledger entry",
        description=(
            "Soft delete an entry and apply the inverse amount to the customer's "
            "balance. Later entries keep their balance_after values. An entry "
            "can be reversed only once."
        ),
        request=ReverseEntrySerializer,
        responses={
            200: EntryResultSerializer,
            404: OpenApiResponse(description="Entry not found"),
            409: OpenApiResponse(description="Entry already reversed"),
            503: OpenApiResponse(description="Concurrent update conflict, retry later"),
        },
        tags=["Ledger"],
    )
    def delete(self, request, entry_id):
        serializer = ReverseEntrySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = facade.reverse_entry(
                shop_id=request.user.id,
                entry_id=entry_id,
                reason=serializer.validated_data.get("reason"),
            )
        except BaseApplicationError as e:
            return ledger_error_response(e)

        return Response(EntryResultSerializer(result).data)


class LedgerSummaryView(APIView):
    """
    Credit and payment totals for the shop.

    GET /api/v1/ledger/summary/?start_date=&end_date=&customer=
        Totals and counts of non-reversed entries in the window.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="ledger_summary",
        summary="Ledger summary",
        parameters=[SummaryQuerySerializer],
        responses={
            200: EntrySummarySerializer,
            400: OpenApiResponse(description="Invalid query parameters"),
            404: OpenApiResponse(description="Customer not found"),
        },
        tags=["Ledger"],
    )
    def get(self, request):
        query = SummaryQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)
        params = query.validated_data

        try:
            summary = facade.summarize(
                shop_id=request.user.id,
                date_range=DateRange.from_dates(params.get("start_date"), params.get("end_date")),
                customer_id=params.get("customer"),
            )
        except BaseApplicationError as e:
            return ledger_error_response(e)

        return Response(EntrySummarySerializer(summary).data)


class LedgerTodaySummaryView(APIView):
    """
    Credit and payment totals for the current local day.

    GET /api/v1/ledger/summary/today/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="ledger_summary_today",
        summary="Today's ledger summary",
        responses={200: EntrySummarySerializer},
        tags=["Ledger"],
    )
    def get(self, request):
        summary = facade.summarize_today(shop_id=request.user.id)
        return Response(EntrySummarySerializer(summary).data)
