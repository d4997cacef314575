#!/usr/bin/env python3
"""
Core Module for the Trade Hub Services

Shared components for campaign_service and route_service.

COMPONENTS:
    - config/: Environment-driven settings (ledger gateway, logging, ports)
    - ledger_types.py: Fee policy, receipts, operation outcomes, error kinds
    - ledger_codec.py: Fixed-point money, epoch timestamps, ids, positional records
    - ledger_protocols.py: Ledger client, signer and balance interfaces
    - ledger_session.py: Per-account session context and approval cache
    - ledger_client.py: httpx client for the ledger gateway

USAGE:
    from core.config import get_settings
    from core.ledger_client import GatewayLedgerClient

    ledger = GatewayLedgerClient.from_config(get_settings().ledger)
"""

from .ledger_client import GatewayLedgerClient
from .ledger_session import ApprovalCache, SessionContext
from .ledger_types import (
    ErrorKind,
    FeePolicy,
    LedgerResponse,
    TransactionReceipt,
)

# Export public API
__all__ = [
    "GatewayLedgerClient",
    "ApprovalCache",
    "SessionContext",
    "ErrorKind",
    "FeePolicy",
    "LedgerResponse",
    "TransactionReceipt",
]

__version__ = "1.0.0"
