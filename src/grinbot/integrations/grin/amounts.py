"""Conversions between whole grin and nanogrin (one billionth of a grin)."""

from __future__ import annotations

from decimal import Decimal, DecimalException, InvalidOperation
from typing import Union

NANOGRIN_PER_GRIN = Decimal(1_000_000_000)
# Amounts travel as u64 nanogrin in the wallet API.
MAX_NANOGRIN = 2**64 - 1


class AmountTooLarge(ValueError):
    """The amount does not fit in a u64 nanogrin value."""


def grin_to_nanogrin(amount: Decimal) -> int:
    # Fractions of a nanogrin are truncated.
    try:
        nanogrin = int(amount * NANOGRIN_PER_GRIN)
    except DecimalException as exc:
        raise AmountTooLarge(f"amount out of range: {amount}") from exc
    if nanogrin > MAX_NANOGRIN:
        raise AmountTooLarge(f"amount out of range: {amount}")
    return nanogrin


def nanogrin_to_grin(value: Union[str, int]) -> Decimal:
    try:
        nanogrin = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"not a nanogrin amount: {value!r}") from exc
    if not nanogrin.is_finite():
        raise ValueError(f"not a nanogrin amount: {value!r}")
    return nanogrin / NANOGRIN_PER_GRIN


def format_grin(amount: Decimal) -> str:
    if amount == 0:
        return "0"
    return f"{amount.normalize():f}"
