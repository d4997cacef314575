"""
Ledger Session Context

The explicit per-call session value: the active account, its signing
capability, an optional balance query, and the approval cache bound to that
account. Coordinators take it as their first argument instead of reaching
for ambient signer state.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from .ledger_protocols import BalanceProviderProtocol, SignerProtocol
from .ledger_types import LedgerValidationError

logger = logging.getLogger(__name__)


def _account_key(account: str) -> str:
    return account.strip().lower()


class ApprovalCache:
    """
    Remembers that one account holds an effectively unlimited allowance.

    Only positive results are stored. Recording a result for a different
    account discards the previous one; lookups for any other account miss.
    The lock serializes one session's check-then-approve sequence.
    """

    def __init__(self):
        self._account: Optional[str] = None
        self._approved = False
        self.lock = asyncio.Lock()

    def get(self, account: str) -> Optional[bool]:
        """Cached approval for this account, or None on a miss"""
        if self._account is None or self._account != _account_key(account):
            return None
        return self._approved or None

    def record(self, account: str, approved: bool) -> None:
        key = _account_key(account)
        if self._account != key:
            if self._account is not None:
                logger.debug(f"Approval cache invalidated: account changed to {key}")
            self._account = key
            self._approved = False
        if approved:
            self._approved = True

    def clear(self) -> None:
        self._account = None
        self._approved = False

    @property
    def account(self) -> Optional[str]:
        return self._account


@dataclass(frozen=True)
class SessionContext:
    """Active account identity plus its capabilities"""
    account: str
    signer: SignerProtocol
    balance_provider: Optional[BalanceProviderProtocol] = None
    approval_cache: ApprovalCache = field(default_factory=ApprovalCache)

    def __post_init__(self):
        if not self.account or not str(self.account).strip():
            raise LedgerValidationError("Session has no active account", field="account")
        if self.signer is None:
            raise LedgerValidationError("Session has no signer", field="signer")

    def switch_account(
        self,
        account: str,
        signer: SignerProtocol,
        balance_provider: Optional[BalanceProviderProtocol] = None,
    ) -> "SessionContext":
        """New context for another account, with a fresh approval cache"""
        return replace(
            self,
            account=account,
            signer=signer,
            balance_provider=balance_provider or self.balance_provider,
            approval_cache=ApprovalCache(),
        )

    def is_account(self, address: Optional[str]) -> bool:
        """Case-insensitive address comparison against the active account"""
        return bool(address) and _account_key(address) == _account_key(self.account)


__all__ = ["ApprovalCache", "SessionContext"]
