"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Coordinators against the in-memory ledger, gateway client
                    against httpx.MockTransport, FastAPI apps via TestClient
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ.setdefault("ENV", "testing")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.contracts.ledger.data_contract import LedgerRecordFactory


@pytest.fixture
def records() -> LedgerRecordFactory:
    """Provide the raw ledger record factory"""
    return LedgerRecordFactory()


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "component: Component tests")
    config.addinivalue_line("markers", "unit: Unit tests")
