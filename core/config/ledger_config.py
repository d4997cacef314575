#!/usr/bin/env python3
"""Ledger gateway configuration

Endpoints and contract addresses for the remote ledger, plus the fee policy
every write is submitted with.
"""
import os
from dataclasses import dataclass
from typing import Optional

GWEI = 1_000_000_000


def _int(val: Optional[str], default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


def _float(val: Optional[str], default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class LedgerConfig:
    """Remote ledger endpoints and write defaults"""

    # ===========================================
    # Gateway
    # ===========================================
    gateway_url: str = "http://localhost:9080"
    chain_id: int = 31337

    # ===========================================
    # Contracts
    # ===========================================
    token_address: str = ""
    group_purchasing_address: str = ""
    shipping_routes_address: str = ""

    # ===========================================
    # Fee policy (wei)
    # ===========================================
    max_fee_per_gas: int = 2 * GWEI
    max_priority_fee_per_gas: int = 1 * GWEI

    # ===========================================
    # Timing (seconds)
    # ===========================================
    request_timeout: float = 30.0
    confirmation_timeout: float = 120.0  # 0 waits forever
    receipt_poll_interval: float = 1.0

    @classmethod
    def from_env(cls) -> 'LedgerConfig':
        """Load ledger configuration from environment variables"""
        return cls(
            gateway_url=os.getenv("LEDGER_GATEWAY_URL") or os.getenv("GATEWAY_URL", "http://localhost:9080"),
            chain_id=_int(os.getenv("LEDGER_CHAIN_ID"), 31337),
            token_address=os.getenv("LEDGER_TOKEN_ADDRESS", ""),
            group_purchasing_address=os.getenv("LEDGER_GROUP_PURCHASING_ADDRESS", ""),
            shipping_routes_address=os.getenv("LEDGER_SHIPPING_ROUTES_ADDRESS", ""),
            max_fee_per_gas=_int(os.getenv("LEDGER_MAX_FEE_PER_GAS"), 2 * GWEI),
            max_priority_fee_per_gas=_int(os.getenv("LEDGER_MAX_PRIORITY_FEE_PER_GAS"), 1 * GWEI),
            request_timeout=_float(os.getenv("LEDGER_REQUEST_TIMEOUT"), 30.0),
            confirmation_timeout=_float(os.getenv("LEDGER_CONFIRMATION_TIMEOUT"), 120.0),
            receipt_poll_interval=_float(os.getenv("LEDGER_RECEIPT_POLL_INTERVAL"), 1.0),
        )

    @property
    def confirmation_deadline(self) -> Optional[float]:
        """Confirmation timeout, or None when unbounded"""
        return self.confirmation_timeout if self.confirmation_timeout > 0 else None
