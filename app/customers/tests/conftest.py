"""
Test configuration and fixtures for customers tests.

Provides:
- shop / other_shop: two independent shop owners
- customer: an account under `shop`
- api_client / shop_client: unauthenticated and JWT-authenticated clients
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from customers.tests.factories import CustomerAccountFactory


@pytest.fixture
def shop(db):
    return UserFactory(shop_name="Sharma General Store")


@pytest.fixture
def other_shop(db):
    return UserFactory(shop_name="Gupta Traders")


@pytest.fixture
def customer(shop):
    return CustomerAccountFactory(shop=shop, name="Ramesh", phone="9876543210")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def shop_client(shop):
    """API client authenticated as `shop`."""
    client = APIClient()
    refresh = RefreshToken.for_user(shop)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client
