"""Ledger record data contracts"""

from .data_contract import (
    GP_ADDRESS,
    ROUTES_ADDRESS,
    TOKEN_ADDRESS,
    LedgerRecordFactory,
)

__all__ = [
    "GP_ADDRESS",
    "ROUTES_ADDRESS",
    "TOKEN_ADDRESS",
    "LedgerRecordFactory",
]
