"""
API views for customer accounts.

Provides:
- CustomerListCreateView: List customers with shop stats / register a customer
- CustomerDetailView: Get (with recent entries) / update profile / deactivate
- CustomerEntriesView: List one customer's ledger entries

All views are scoped to the authenticated shop. Balance columns are never
writable here; they change only through the ledger.
"""

from __future__ import annotations

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import BaseApplicationError
from core.helpers import calculate_pagination, clamp_page
from core.views import error_response
from ledger.facade import facade
from ledger.serializers import EntryListQuerySerializer, EntryPageSerializer
from ledger.types import DateRange
from ledger.views import ledger_error_response

from .serializers import (
    CustomerAccountSerializer,
    CustomerDetailSerializer,
    CustomerListQuerySerializer,
    CustomerStatsSerializer,
    CustomerWriteSerializer,
)
from .store import CustomerAccountStore

RECENT_ENTRIES_LIMIT = 10


class CustomerListCreateView(APIView):
    """
    List and register customers.

    GET /api/v1/customers/
        Active customers with shop-wide balance stats.

    POST /api/v1/customers/
        Register a customer with a zero balance.

    Query Parameters (GET):
        search: Match on name or phone
        has_balance: true (balance > 0) or false (balance <= 0)
        sort: recent, name, balance_high, balance_low
        page / page_size: Pagination (default 20, max 100)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_customers",
        summary="List customers",
        parameters=[CustomerListQuerySerializer],
        responses={
            200: OpenApiResponse(description="Paginated customers with stats"),
            400: OpenApiResponse(description="Invalid query parameters"),
        },
        tags=["Customers"],
    )
    def get(self, request):
        query = CustomerListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)
        params = query.validated_data

        queryset = CustomerAccountStore.list_accounts(
            request.user.id,
            search=params.get("search"),
            has_balance=params.get("has_balance"),
            sort=params.get("sort"),
        )
        page, page_size = clamp_page(
            params["page"],
            params.get("page_size"),
            default_size=settings.LEDGER_DEFAULT_PAGE_SIZE,
            max_size=settings.LEDGER_MAX_PAGE_SIZE,
        )
        total = queryset.count()
        offset = (page - 1) * page_size
        pagination = calculate_pagination(total=total, page=page, per_page=page_size)

        return Response(
            {
                "count": total,
                "page": page,
                "page_size": page_size,
                "total_pages": pagination["total_pages"],
                "results": CustomerAccountSerializer(queryset[offset : offset + page_size], many=True).data,
                "stats": CustomerStatsSerializer(CustomerAccountStore.get_stats(request.user.id)).data,
            }
        )

    @extend_schema(
        operation_id="create_customer",
        summary="Register customer",
        request=CustomerWriteSerializer,
        responses={
            201: CustomerAccountSerializer,
            400: OpenApiResponse(description="Validation error"),
            409: OpenApiResponse(description="Phone number already registered"),
        },
        tags=["Customers"],
    )
    def post(self, request):
        serializer = CustomerWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            account = CustomerAccountStore.register(request.user, **serializer.to_profile())
        except BaseApplicationError as e:
            return error_response(e)

        return Response(CustomerAccountSerializer(account).data, status=status.HTTP_201_CREATED)


class CustomerDetailView(APIView):
    """
    Retrieve, update or deactivate a customer.

    GET /api/v1/customers/{customer_id}/
        Account details with the 10 most recent live entries.

    PATCH /api/v1/customers/{customer_id}/
        Update profile fields. Balance fields in the body are ignored.

    DELETE /api/v1/customers/{customer_id}/
        Deactivate the customer. Refused while the balance is not zero.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_customer",
        summary="Get customer",
        responses={
            200: CustomerDetailSerializer,
            404: OpenApiResponse(description="Customer not found"),
        },
        tags=["Customers"],
    )
    def get(self, request, customer_id):
        try:
            account = CustomerAccountStore.get_account(request.user.id, customer_id)
        except BaseApplicationError as e:
            return error_response(e)

        entries = facade.recent_entries(request.user.id, account.id, limit=RECENT_ENTRIES_LIMIT)
        serializer = CustomerDetailSerializer(account, context={"recent_entries": entries})
        return Response(serializer.data)

    @extend_schema(
        operation_id="update_customer",
        summary="Update customer",
        request=CustomerWriteSerializer,
        responses={
            200: CustomerAccountSerializer,
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(description="Customer not found"),
            409: OpenApiResponse(description="Phone number already registered"),
        },
        tags=["Customers"],
    )
    def patch(self, request, customer_id):
        serializer = CustomerWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            account = CustomerAccountStore.get_account(request.user.id, customer_id)
            account = CustomerAccountStore.update_profile(account, **serializer.to_profile())
        except BaseApplicationError as e:
            return error_response(e)

        return Response(CustomerAccountSerializer(account).data)

    @extend_schema(
        operation_id="deactivate_customer",
        summary="Deactivate customer",
        responses={
            204: OpenApiResponse(description="Customer deactivated"),
            404: OpenApiResponse(description="Customer not found"),
            409: OpenApiResponse(description="Customer has an outstanding balance"),
        },
        tags=["Customers"],
    )
    def delete(self, request, customer_id):
        try:
            CustomerAccountStore.deactivate(request.user.id, customer_id)
        except BaseApplicationError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CustomerEntriesView(APIView):
    """
    List one customer's ledger entries.

    GET /api/v1/customers/{customer_id}/entries/
        Same filters as /api/v1/ledger/entries/, scoped to the customer.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_customer_entries",
        summary="List customer entries",
        parameters=[EntryListQuerySerializer],
        responses={
            200: EntryPageSerializer,
            404: OpenApiResponse(description="Customer not found"),
        },
        tags=["Customers"],
    )
    def get(self, request, customer_id):
        query = EntryListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)
        params = query.validated_data

        try:
            page = facade.list_entries(
                shop_id=request.user.id,
                customer_id=customer_id,
                entry_type=params.get("type"),
                date_range=DateRange.from_dates(params.get("start_date"), params.get("end_date")),
                page=params["page"],
                page_size=params.get("page_size"),
                include_deleted=params["include_deleted"],
            )
        except BaseApplicationError as e:
            return ledger_error_response(e)

        return Response(EntryPageSerializer(page).data)
