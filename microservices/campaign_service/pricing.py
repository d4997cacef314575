"""
Campaign Pricing

Derived prices computed from independently fetched records. All arithmetic
is Decimal; rounding happens once, at the end, before conversion to ledger
minor units.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from core.ledger_codec import to_decimal
from core.ledger_types import LedgerValidationError

CENT = Decimal("0.01")


def product_cost(quantity: int, price_per_unit: Any) -> Decimal:
    """quantity x price_per_unit, exact"""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise LedgerValidationError("quantity must be a positive integer", field="quantity")
    price = to_decimal(price_per_unit, "price_per_unit")
    if price < 0:
        raise LedgerValidationError("price_per_unit must not be negative", field="price_per_unit")
    return price * quantity


def container_price_per_kg(target_amount: Any, max_weight_kg: Any) -> Decimal:
    """Container capacity is sold pro rata: target_amount / max_weight_kg"""
    target = to_decimal(target_amount, "target_amount")
    max_weight = to_decimal(max_weight_kg, "max_weight_kg")
    if max_weight <= 0:
        raise LedgerValidationError("max_weight_kg must be positive", field="max_weight_kg")
    return target / max_weight


def container_payment(weight_kg: Any, target_amount: Any, max_weight_kg: Any) -> Decimal:
    """weight x price-per-kg, rounded half-up to cents"""
    weight = to_decimal(weight_kg, "weight_kg")
    if weight <= 0:
        raise LedgerValidationError("weight_kg must be positive", field="weight_kg")
    price_per_kg = container_price_per_kg(target_amount, max_weight_kg)
    return (weight * price_per_kg).quantize(CENT, rounding=ROUND_HALF_UP)


__all__ = [
    "CENT",
    "product_cost",
    "container_price_per_kg",
    "container_payment",
]
