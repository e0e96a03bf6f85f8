"""
Test configuration and fixtures for ledger tests.

Provides:
- shop / other_shop: two independent shop owners
- customer: zero-balance account under `shop`
- foreign_customer: account under `other_shop`
- shop_client: API client authenticated as `shop`
- no_sleep_facade: LedgerFacade that never sleeps between attempts
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from customers.tests.factories import CustomerAccountFactory
from ledger.facade import LedgerFacade


@pytest.fixture
def shop(db):
    return UserFactory(shop_name="Sharma General Store")


@pytest.fixture
def other_shop(db):
    return UserFactory(shop_name="Gupta Traders")


@pytest.fixture
def customer(shop):
    return CustomerAccountFactory(shop=shop, name="Ramesh")


@pytest.fixture
def foreign_customer(other_shop):
    return CustomerAccountFactory(shop=other_shop, name="Outsider")


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


@pytest.fixture
def sleeps():
    """Records every delay a facade would have slept for."""
    return []


@pytest.fixture
def no_sleep_facade(sleeps):
    return LedgerFacade(max_attempts=3, base_delay=0.05, sleep=sleeps.append)
