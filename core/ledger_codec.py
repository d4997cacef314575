"""
Ledger Codec

Shared decode/compute helpers for the ledger boundary:
- positional tuple -> field dict mapping driven by a fixed schema
- fixed-point monetary conversion (integers scaled by 10^6)
- whole-second epoch <-> aware UTC datetime conversion
- ledger identifier normalization and sentinel filtering
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Context, Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from .ledger_types import LedgerValidationError, PartialDecodeError

logger = logging.getLogger(__name__)

FIXED_POINT_DECIMALS = 6
MAX_UINT256 = 2 ** 256 - 1
# Allowances at or above this count as "effectively unlimited"
UNLIMITED_ALLOWANCE_THRESHOLD = MAX_UINT256 // 2

# ====================
# Fixed-point
# ====================


def to_decimal(value: Any, field: Optional[str] = None) -> Decimal:
    """Parse a user-supplied amount into a finite Decimal"""
    if value is None or isinstance(value, bool):
        raise LedgerValidationError(f"{field or 'amount'} is required", field=field)
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise LedgerValidationError(f"{field or 'amount'} is not a number: {value!r}", field=field)
    if not amount.is_finite():
        raise LedgerValidationError(f"{field or 'amount'} is not a number: {value!r}", field=field)
    return amount


def _exact_context(amount: Decimal, decimals: int) -> Context:
    """A context wide enough that scaling never rounds"""
    return Context(prec=max(28, len(amount.as_tuple().digits) + decimals + 1))


def to_fixed(value: Any, decimals: int = FIXED_POINT_DECIMALS, field: Optional[str] = None) -> int:
    """
    Convert a decimal amount to ledger minor units.

    Raises LedgerValidationError for negative amounts or more fractional
    digits than the representation carries.
    """
    amount = to_decimal(value, field)
    if amount < 0:
        raise LedgerValidationError(f"{field or 'amount'} must not be negative", field=field)
    scaled = amount.scaleb(decimals, _exact_context(amount, decimals))
    if scaled != scaled.to_integral_value():
        raise LedgerValidationError(
            f"{field or 'amount'} has more than {decimals} decimal places", field=field
        )
    return int(scaled)


def from_fixed(raw: Any, decimals: int = FIXED_POINT_DECIMALS) -> Decimal:
    """Convert ledger minor units to a Decimal with trailing zeros stripped"""
    if raw is None or raw == "":
        return Decimal(0)
    value = Decimal(int(raw))
    ctx = _exact_context(value, decimals)
    amount = value.scaleb(-decimals, ctx)
    if amount == amount.to_integral_value():
        return amount.quantize(Decimal(1), context=ctx)
    return amount.normalize(ctx)


# ====================
# Timestamps
# ====================


def to_epoch(value: Union[datetime, date, str, int], field: Optional[str] = None) -> int:
    """Convert a calendar date-time to whole epoch seconds (naive = UTC)"""
    if isinstance(value, bool) or value is None or value == "":
        raise LedgerValidationError(f"{field or 'timestamp'} is required", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise LedgerValidationError(
                f"{field or 'timestamp'} is not an ISO date-time: {value!r}", field=field
            )
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return math.floor(value.timestamp())
    if isinstance(value, date):
        return int(datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp())
    raise LedgerValidationError(f"{field or 'timestamp'} has unsupported type", field=field)


def from_epoch(raw: Any) -> datetime:
    """Convert epoch seconds from the ledger to an aware UTC datetime"""
    return datetime.fromtimestamp(int(raw), tz=timezone.utc)


# ====================
# Identifiers
# ====================


def normalize_id(raw: Any) -> str:
    """Ledger ids are arbitrary-precision integers serialized as decimal strings"""
    if isinstance(raw, bool):
        raise ValueError("boolean is not an identifier")
    return str(int(str(raw).strip()))


def is_sentinel_id(raw: Any) -> bool:
    """Fixed-size slots use 0 or the empty string for "no assignment" """
    if raw is None:
        return True
    text = str(raw).strip()
    if text == "":
        return True
    try:
        return int(text) == 0
    except ValueError:
        return False


def filter_sentinel_ids(raws: Iterable[Any]) -> List[str]:
    """Drop sentinel slots and return the remaining ids as decimal strings"""
    ids = []
    for raw in raws or []:
        if is_sentinel_id(raw):
            continue
        try:
            ids.append(normalize_id(raw))
        except ValueError:
            logger.warning(f"Ignoring malformed identifier in slot: {raw!r}")
    return ids


def require_id(raw: Any, field: str = "id", allow_zero: bool = False) -> str:
    """
    Validate a caller-supplied ledger id before any call is issued.

    Campaign ids start at 1; route ids start at 0, pass allow_zero for those.
    """
    kind = "a non-negative" if allow_zero else "a positive"
    try:
        value = normalize_id(raw)
    except (TypeError, ValueError):
        raise LedgerValidationError(f"{field} must be {kind} integer: {raw!r}", field=field)
    if int(value) < (0 if allow_zero else 1):
        raise LedgerValidationError(f"{field} must be {kind} integer: {raw!r}", field=field)
    return value


def require_address(raw: Any, field: str = "address") -> str:
    """A contract or account address must be a non-blank string"""
    if not isinstance(raw, str) or not raw.strip():
        raise LedgerValidationError(f"Invalid contract address for {field}: {raw!r}", field=field)
    return raw.strip()


# ====================
# Positional decoding
# ====================


def as_text(raw: Any) -> str:
    return "" if raw is None else str(raw)


def as_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError("expected integer, got boolean")
    return int(raw)


def as_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        if raw.lower() in ("true", "1"):
            return True
        if raw.lower() in ("false", "0", ""):
            return False
        raise ValueError(f"expected boolean, got {raw!r}")
    return bool(raw)


@dataclass(frozen=True)
class PositionalField:
    """One slot of a positional record: index -> field name, converter"""
    index: int
    name: str
    convert: Callable[[Any], Any]


def decode_positional(
    record: Sequence[Any],
    schema: Sequence[PositionalField],
    record_id: Any,
) -> Dict[str, Any]:
    """
    Map a positional tuple to named fields using a fixed schema.

    Any missing slot or failed conversion raises PartialDecodeError naming
    the offending field.
    """
    if record is None or isinstance(record, (str, bytes, dict)):
        raise PartialDecodeError(record_id, "record is not a positional tuple")
    width = max(f.index for f in schema) + 1
    if len(record) < width:
        raise PartialDecodeError(record_id, f"expected {width} fields, got {len(record)}")

    decoded: Dict[str, Any] = {}
    for slot in schema:
        try:
            decoded[slot.name] = slot.convert(record[slot.index])
        except (TypeError, ValueError, ArithmeticError) as e:
            raise PartialDecodeError(record_id, f"field {slot.index} ({slot.name}): {e}")
    return decoded


__all__ = [
    "FIXED_POINT_DECIMALS",
    "MAX_UINT256",
    "UNLIMITED_ALLOWANCE_THRESHOLD",
    "to_decimal",
    "to_fixed",
    "from_fixed",
    "to_epoch",
    "from_epoch",
    "normalize_id",
    "is_sentinel_id",
    "filter_sentinel_ids",
    "require_id",
    "require_address",
    "as_text",
    "as_int",
    "as_bool",
    "PositionalField",
    "decode_positional",
]
