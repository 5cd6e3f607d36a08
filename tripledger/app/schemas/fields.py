"""
schemas/fields.py — Custom marshmallow fields and validators shared by the schemas.

IMPORTANT: Schemas inherit from marshmallow.Schema directly, so these
fields work without a Flask application context (unit tests load schemas
on their own).
"""

from __future__ import annotations

import re

from marshmallow import ValidationError, fields, validate

from tripledger.app.errors import ErrorCode
from tripledger.app.models.expense import MAX_AMOUNT

_DIGITS = re.compile(r"[0-9]+")
_MAX_DIGITS = len(str(MAX_AMOUNT))


def validate_non_empty_after_trim(value: str) -> None:
    """
    Raises ValidationError if the string is blank or contains only whitespace.
    validate.Length(min=1) alone lets "   " through.
    """
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


class AccountIdField(fields.Str):
    """An account id: non-blank, at most 64 characters."""

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("validate", [
            validate.Length(min=1, max=64, error="Account ids must be between 1 and 64 characters."),
            validate_non_empty_after_trim,
        ])
        super().__init__(**kwargs)


class AmountField(fields.Field):
    """
    A loan amount: a non-negative integer no larger than MAX_AMOUNT.

    Accepts a JSON integer or a string of ASCII digits. Amounts routinely
    exceed 2**53, which JSON numbers do not survive in most clients, so
    responses render them as strings (Expense.to_dict).
    """

    default_error_messages = {
        "invalid": "Amount must be a non-negative integer or a string of digits.",
    }

    def _deserialize(self, value, attr, data, **kwargs) -> int:
        if isinstance(value, bool):
            raise self.make_error("invalid")
        if isinstance(value, int):
            amount = value
        elif isinstance(value, str) and _DIGITS.fullmatch(value):
            # int() refuses very long digit strings with ValueError.
            digits = value.lstrip("0") or "0"
            if len(digits) > _MAX_DIGITS:
                raise ValidationError(ErrorCode.INVALID_AMOUNT)
            amount = int(digits)
        else:
            raise self.make_error("invalid")

        if amount < 0 or amount > MAX_AMOUNT:
            raise ValidationError(ErrorCode.INVALID_AMOUNT)
        return amount
