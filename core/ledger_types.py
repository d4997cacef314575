"""
Ledger Boundary Types

Shared models for talking to the remote ledger: fee policy, transaction
receipts, the structured outcome every write returns, and the error kinds
raised inside the coordinators.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# ====================
# Wire Models
# ====================


class FeePolicy(BaseModel):
    """Fee-rate override sent with every write (wei per gas)"""
    max_fee_per_gas: int = Field(..., ge=0)
    max_priority_fee_per_gas: int = Field(..., ge=0)

    def as_overrides(self) -> Dict[str, str]:
        return {
            "maxFeePerGas": str(self.max_fee_per_gas),
            "maxPriorityFeePerGas": str(self.max_priority_fee_per_gas),
        }


class TransactionReceipt(BaseModel):
    """Confirmation of a mined write"""
    tx_hash: str
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    succeeded: bool = True
    revert_reason: Optional[str] = None


# ====================
# Outcomes
# ====================


class ErrorKind(str, Enum):
    """Why a single-entity operation failed"""
    VALIDATION = "validation"
    REMOTE_CALL = "remote_call"
    APPROVAL = "approval"


class LedgerResponse(BaseModel):
    """Standard coordinator operation response"""
    success: bool
    message: str
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    tx_hash: Optional[str] = None
    entity_id: Optional[str] = None
    already_approved: Optional[bool] = None
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, message: str, **kwargs) -> "LedgerResponse":
        return cls(success=True, message=message, **kwargs)

    @classmethod
    def failed(cls, exc: Exception, message: str) -> "LedgerResponse":
        """Build a failure outcome, keeping the raw error text"""
        if isinstance(exc, LedgerValidationError):
            kind = ErrorKind.VALIDATION
        elif isinstance(exc, ApprovalError):
            kind = ErrorKind.APPROVAL
        else:
            kind = ErrorKind.REMOTE_CALL
        return cls(success=False, message=message, error=str(exc), error_kind=kind)


# ====================
# Custom Exceptions
# ====================


class LedgerCoordinatorError(Exception):
    """Base exception for coordinator errors"""
    pass


class LedgerValidationError(LedgerCoordinatorError):
    """Raised when input is missing or malformed; no call has been issued"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class RemoteCallError(LedgerCoordinatorError):
    """Raised when the ledger rejects a call or the round trip fails"""

    def __init__(self, message: str, code: Optional[str] = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data


class ApprovalError(RemoteCallError):
    """Raised when the allowance step of a two-phase write fails"""
    pass


class PartialDecodeError(LedgerCoordinatorError):
    """Raised when one ledger record cannot be decoded"""

    def __init__(self, record_id: Any, reason: str):
        super().__init__(f"Record {record_id} could not be decoded: {reason}")
        self.record_id = record_id
        self.reason = reason


__all__ = [
    "FeePolicy",
    "TransactionReceipt",
    "ErrorKind",
    "LedgerResponse",
    "LedgerCoordinatorError",
    "LedgerValidationError",
    "RemoteCallError",
    "ApprovalError",
    "PartialDecodeError",
]
