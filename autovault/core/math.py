"""Checked integer arithmetic for the vault formulas.

Every function is stateless and operates on plain Python ints. Values model
unsigned 256-bit words: a result below zero or above ``MAX_UINT256`` traps
with ``ArithmeticIntegrityError`` instead of wrapping.

Division is Python's ``//``; all operands are non-negative, so it truncates
toward zero.
"""

from __future__ import annotations

from .errors import ArithmeticIntegrityError

MAX_UINT256: int = 2**256 - 1
BPS_DENOM: int = 10_000
PRICE_PER_SHARE_SCALE: int = 10**18


def require_uint(value: int, *, name: str) -> int:
    """Return *value* if it is an int in ``[0, MAX_UINT256]``."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ArithmeticIntegrityError(f"{name} underflow: {value}")
    if value > MAX_UINT256:
        raise ArithmeticIntegrityError(f"{name} overflow: {value}")
    return value


# -- Checked operations ------------------------------------------------------

def checked_add(a: int, b: int) -> int:
    return require_uint(a + b, name="sum")


def checked_sub(a: int, b: int) -> int:
    """``a - b``; traps when ``b > a``."""
    if b > a:
        raise ArithmeticIntegrityError(f"subtraction underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    return require_uint(a * b, name="product")


def mul_div(a: int, b: int, denom: int) -> int:
    """``floor(a * b / denom)`` with the intermediate product range-checked."""
    if denom == 0:
        raise ArithmeticIntegrityError("division by zero")
    return checked_mul(a, b) // denom


def bps_of(amount: int, bps: int) -> int:
    """``floor(amount * bps / 10000)``."""
    return mul_div(amount, bps, BPS_DENOM)
