"""
Ledger Protocols (Interfaces)

These interfaces define the contracts of the external collaborators the
coordinators depend on: the ledger client, the session's signer and the
balance query. NO import-time I/O dependencies - safe to import anywhere.
"""
from decimal import Decimal
from typing import Any, Dict, Optional, Protocol, Sequence, runtime_checkable

from .ledger_types import FeePolicy, TransactionReceipt


@runtime_checkable
class SignerProtocol(Protocol):
    """Signing capability of the active account"""

    @property
    def address(self) -> str:
        """Account address the signer signs for"""
        ...

    async def sign(self, payload: Dict[str, Any]) -> str:
        """Sign a write payload, returning the signature"""
        ...


@runtime_checkable
class BalanceProviderProtocol(Protocol):
    """Balance query of the session provider"""

    async def get_balance(self, address: str) -> Decimal:
        """Native balance of an account"""
        ...


@runtime_checkable
class LedgerClientProtocol(Protocol):
    """
    Raw call/send primitive to the remote contracts.

    Reads return the contract's fixed positional tuple (or scalar / list).
    Writes take a fixed positional argument list plus the fee override.
    """

    async def call(self, contract: str, function: str, *args: Any) -> Any:
        """Execute a read-only named call"""
        ...

    async def send(
        self,
        contract: str,
        function: str,
        args: Sequence[Any],
        signer: SignerProtocol,
        fee_policy: FeePolicy,
    ) -> str:
        """Submit a write; returns the transaction hash"""
        ...

    async def wait_for_receipt(
        self, tx_hash: str, timeout: Optional[float] = None
    ) -> TransactionReceipt:
        """Wait until the write is mined"""
        ...


__all__ = [
    "SignerProtocol",
    "BalanceProviderProtocol",
    "LedgerClientProtocol",
]
