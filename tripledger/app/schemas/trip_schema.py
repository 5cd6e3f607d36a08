"""
schemas/trip_schema.py — Marshmallow schemas for trip endpoints.

Validation responsibility:
  - This file: field types, string lengths, non-empty checks (including trim).
  - services/trip_service.py:
      - TRIP_NOT_FOUND       (requires a registry lookup)
      - FORBIDDEN            (caller must be a member to add members)
      - NO_MEMBERS_PROVIDED  (an empty members list is a ledger rule, not a
                              shape rule, so the list length is not checked here)
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from tripledger.app.schemas.fields import AccountIdField, validate_non_empty_after_trim


class CreateTripSchema(Schema):
    """
    POST /trips

    name    — non-empty after trim, max 100 chars.
    members — optional list of account ids. The caller is appended by the
              ledger when absent; omit the list for a caller-only trip.
    """

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=100,
                error="Trip name must be between 1 and 100 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )

    members = fields.List(
        AccountIdField(),
        load_default=None,
        allow_none=True,
    )


class AddMembersSchema(Schema):
    """POST /trips/:id/members"""

    members = fields.List(
        AccountIdField(),
        required=True,
    )
