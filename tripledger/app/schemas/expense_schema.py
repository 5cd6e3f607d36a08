"""
schemas/expense_schema.py — Marshmallow schemas for expense endpoints.

Validation responsibility:
  - This file:
      - Field types and lengths, non-empty-after-trim names
      - Amount shape and range (INVALID_AMOUNT)
  - services/expense_service.py:
      - SELF_LOAN          (400) — kept in the ledger so direct callers get it too
      - OWER_NOT_MEMBER / LENDER_NOT_MEMBER / FORBIDDEN (403) — need the trip
      - NOT_CURRENT_LENDER (403) — needs the stored expense
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from tripledger.app.schemas.fields import (
    AccountIdField,
    AmountField,
    validate_non_empty_after_trim,
)

_NAME_VALIDATORS = [
    validate.Length(
        min=1,
        max=255,
        error="Expense name must be between 1 and 255 characters.",
    ),
    validate_non_empty_after_trim,
]


class CreateExpenseSchema(Schema):
    """POST /trips/:id/expenses"""

    name   = fields.Str(required=True, validate=_NAME_VALIDATORS)
    ower   = AccountIdField(required=True)
    lender = AccountIdField(required=True)
    amount = AmountField(required=True)


class UpdateExpenseSchema(Schema):
    """
    PUT /trips/:id/expenses/:expense_id

    Full replacement of ower, lender and amount. `name` may be omitted (or
    null), in which case the stored name is kept.
    """

    name   = fields.Str(load_default=None, allow_none=True, validate=_NAME_VALIDATORS)
    ower   = AccountIdField(required=True)
    lender = AccountIdField(required=True)
    amount = AmountField(required=True)
