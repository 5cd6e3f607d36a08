"""
errors.py — AppError base class and error code registry.

Every error returned by the TripLedger engine or API must use a code defined
here. Do not raise strings or generic exceptions from service or route code.

Rules:
  - New error codes require: add constant here + add a test.
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose. They may be improved at any time.
  - Never conflate 401 (unauthenticated) with 403 (unauthorized). See AUTH below.
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field  # which request field caused the error

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"AppError(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Organised by taxonomy. HTTP status is indicated in the comment.
#
# IMPORTANT: these are the string values sent in the API response.
# Do not rename them without a major version bump.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── InvalidInput (400) ─────────────────────────────────────────────────
    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FIELD              = "INVALID_FIELD"
    INVALID_AMOUNT             = "INVALID_AMOUNT"
    SELF_LOAN                  = "SELF_LOAN"             # ower == lender
    NO_MEMBERS_PROVIDED        = "NO_MEMBERS_PROVIDED"

    # ── NotFound (404) ─────────────────────────────────────────────────────
    TRIP_NOT_FOUND             = "TRIP_NOT_FOUND"
    EXPENSE_NOT_FOUND          = "EXPENSE_NOT_FOUND"
    ACCOUNT_NOT_FOUND          = "ACCOUNT_NOT_FOUND"     # account is in no trips
    NO_EXPENSES                = "NO_EXPENSES"           # trip has no expense map

    # ── Unauthorized (403) ─────────────────────────────────────────────────
    FORBIDDEN                  = "FORBIDDEN"             # caller not a trip member
    OWER_NOT_MEMBER            = "OWER_NOT_MEMBER"
    LENDER_NOT_MEMBER          = "LENDER_NOT_MEMBER"
    ACCOUNT_NOT_MEMBER         = "ACCOUNT_NOT_MEMBER"
    NOT_CURRENT_LENDER         = "NOT_CURRENT_LENDER"

    # ── InvalidState (409) ─────────────────────────────────────────────────
    NO_COUNTERPART             = "NO_COUNTERPART"        # fewer than two members

    # ── Auth Errors ────────────────────────────────────────────────────────
    # 401 = we do not know who you are (unauthenticated)
    # 403 = we know who you are, but you are not allowed (see Unauthorized)
    TOKEN_MISSING              = "TOKEN_MISSING"          # 401
    TOKEN_INVALID              = "TOKEN_INVALID"          # 401
    TOKEN_EXPIRED              = "TOKEN_EXPIRED"          # 401

    # ── System Errors (500) ────────────────────────────────────────────────
    INTERNAL_ERROR             = "INTERNAL_ERROR"


# ── Taxonomy helpers ───────────────────────────────────────────────────────
# Each taxonomy bucket has exactly one HTTP status. Service code builds errors
# through these so the status never drifts from the bucket.

def invalid_input(code: str, message: str, field: str | None = None) -> AppError:
    return AppError(code, message, 400, field=field)


def not_found(code: str, message: str) -> AppError:
    return AppError(code, message, 404)


def unauthorized(code: str, message: str) -> AppError:
    return AppError(code, message, 403)


def invalid_state(code: str, message: str) -> AppError:
    return AppError(code, message, 409)
