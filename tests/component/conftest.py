"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── ledger/      Gateway client over httpx.MockTransport
    ├── campaign/    Campaign coordinator and read API
    └── route/       Route coordinator and read API

Usage:
    pytest tests/component -v
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from core.ledger_session import SessionContext
from core.ledger_types import FeePolicy
from microservices.campaign_service.campaign_service import CampaignService
from microservices.route_service.route_service import RouteService
from tests.contracts.ledger.data_contract import GP_ADDRESS, ROUTES_ADDRESS, TOKEN_ADDRESS
from tests.fixtures import FakeLedgerClient, FakeSigner


@pytest.fixture
def ledger() -> FakeLedgerClient:
    return FakeLedgerClient()


@pytest.fixture
def fee_policy() -> FeePolicy:
    return FeePolicy(max_fee_per_gas=2_000_000_000, max_priority_fee_per_gas=1_000_000_000)


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def session(signer) -> SessionContext:
    """Session for the default test account"""
    return SessionContext(account=signer.address, signer=signer)


@pytest.fixture
def campaign_service(ledger, fee_policy) -> CampaignService:
    return CampaignService(
        ledger=ledger,
        group_purchasing_address=GP_ADDRESS,
        token_address=TOKEN_ADDRESS,
        fee_policy=fee_policy,
        confirmation_timeout=5.0,
    )


@pytest.fixture
def route_service(ledger, fee_policy, campaign_service) -> RouteService:
    return RouteService(
        ledger=ledger,
        shipping_routes_address=ROUTES_ADDRESS,
        campaigns=campaign_service,
        fee_policy=fee_policy,
        confirmation_timeout=5.0,
    )


def pytest_collection_modifyitems(config, items):
    """Everything under tests/component carries the component marker"""
    for item in items:
        if item.nodeid.startswith("tests/component/"):
            item.add_marker(pytest.mark.component)
