"""
Shared Test Fixtures

Fakes for the external collaborators of the coordinators:
    - ledger_fixtures.py: FakeLedgerClient, FakeSigner, FakeBalanceProvider
"""

from .ledger_fixtures import (
    FakeBalanceProvider,
    FakeLedgerClient,
    FakeSigner,
)

__all__ = [
    "FakeBalanceProvider",
    "FakeLedgerClient",
    "FakeSigner",
]
