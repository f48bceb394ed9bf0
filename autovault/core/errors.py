"""Exception types for the autocompounding vault.

Every failure is raised synchronously and aborts the whole operation; the
engine rolls back any effect applied before the failure.
"""

from __future__ import annotations


class VaultError(Exception):
    """Base class for all vault failures."""

    code: str = "vault_error"


class InvalidAmountError(VaultError):
    """Raised for a zero (or negative) deposit, withdraw or fee amount."""

    code = "invalid_amount"


class ExceedsMaximumError(VaultError):
    """Raised when a fee parameter is above its ceiling."""

    code = "exceeds_maximum"


class UnauthorizedError(VaultError):
    """Raised when a non-strategist calls a strategist-only operation."""

    code = "unauthorized"


class InsufficientSharesError(VaultError):
    """Raised when a holder tries to redeem more shares than it owns."""

    code = "insufficient_shares"


class ArithmeticIntegrityError(VaultError):
    """Raised on underflow, 256-bit overflow or division by zero."""

    code = "arithmetic"


class VaultInvariantError(VaultError):
    """Raised when a post-operation state violates one or more invariants."""

    code = "invariant"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
