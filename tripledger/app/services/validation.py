"""
services/validation.py — Input checks shared by the engine services.

The HTTP schemas are the first gate; these checks make the engine safe to
call directly (tests, scripts) with the same error codes.
"""

from __future__ import annotations

from tripledger.app.errors import ErrorCode, invalid_input
from tripledger.app.models.expense import MAX_AMOUNT


def require_text(value, field: str) -> str:
    """Raises MISSING_FIELD unless `value` is a string that is non-blank after trim."""
    if not isinstance(value, str) or not value.strip():
        raise invalid_input(
            ErrorCode.MISSING_FIELD,
            f"{field} is required and must not be blank.",
            field=field,
        )
    return value


def require_account(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise invalid_input(
            ErrorCode.INVALID_FIELD,
            f"{field} must be a non-blank account id.",
            field=field,
        )
    return value


def require_amount(value) -> int:
    """Raises INVALID_AMOUNT unless `value` is an int in [0, MAX_AMOUNT]."""
    # bool is an int subclass; True is not an amount.
    if isinstance(value, bool) or not isinstance(value, int):
        raise invalid_input(
            ErrorCode.INVALID_AMOUNT,
            "amount must be a non-negative integer.",
            field="amount",
        )
    if value < 0 or value > MAX_AMOUNT:
        raise invalid_input(
            ErrorCode.INVALID_AMOUNT,
            f"amount must be between 0 and {MAX_AMOUNT}.",
            field="amount",
        )
    return value
