"""
services/balance_service.py — Net balance summary for one account in one trip.

This file is the SINGLE SOURCE OF TRUTH for how balances are computed.
Stateless: reads the TripRegistry and ExpenseLedger, writes nothing.

Sign convention, from the point of view of `account_id`:
  positive  → the counterpart owes account_id
  negative  → account_id owes the counterpart

Python ints do not overflow, so summing many 128-bit amounts is exact.
"""

from __future__ import annotations

from dataclasses import dataclass

from tripledger.app.errors import ErrorCode, invalid_state, not_found, unauthorized
from tripledger.app.models.trip import AccountId, TripId
from tripledger.app.services.expense_service import ExpenseLedger
from tripledger.app.services.trip_service import TripRegistry


@dataclass(frozen=True)
class TripSummary:
    trip_id: TripId
    trip_name: str
    balances: list[tuple[AccountId, int]]

    def to_dict(self) -> dict:
        return {
            "trip_id": self.trip_id,
            "trip_name": self.trip_name,
            "balances": [
                {"account_id": account_id, "balance": str(balance)}
                for account_id, balance in self.balances
            ],
        }


def _require_account_in_trip(
        registry: TripRegistry,
        trip_id: TripId,
        account_id: AccountId,
) -> None:
    """
    ACCOUNT_NOT_FOUND (404) if the account is in no trips at all,
    ACCOUNT_NOT_MEMBER (403) if it is in other trips but not this one.
    """
    if not registry.index.has_trips(account_id):
        raise not_found(
            ErrorCode.ACCOUNT_NOT_FOUND,
            f"Account {account_id} has not been added to any trips.",
        )
    registry.require_member(trip_id, account_id, ErrorCode.ACCOUNT_NOT_MEMBER, role="account")


def compute_summary(
        trip_id: TripId,
        account_id: AccountId,
        registry: TripRegistry,
        ledger: ExpenseLedger,
) -> TripSummary:
    """
    Nets every expense involving account_id against each other trip member.

    Algorithm:
      1. Start every other member at 0, in member-list order (output order).
      2. For each live expense: lender == account_id → +amount on the ower;
         ower == account_id → -amount on the lender; otherwise skip.
      3. Emit one entry per member from step 1, zero balances included.

    Raises:
      AppError(TRIP_NOT_FOUND, 404)
      AppError(ACCOUNT_NOT_FOUND, 404) / AppError(ACCOUNT_NOT_MEMBER, 403)
      AppError(NO_COUNTERPART, 409)  — the trip has a single member
      AppError(NO_EXPENSES, 404)     — no live expenses in the trip
    """
    trip = registry.get_trip(trip_id)
    _require_account_in_trip(registry, trip_id, account_id)

    # Checked before the expense map: a one-member trip can never hold an
    # expense, so NO_EXPENSES would otherwise always mask this error.
    if len(trip.members) < 2:
        raise invalid_state(
            ErrorCode.NO_COUNTERPART,
            f"Trip {trip_id} has no other account to net against.",
        )

    expenses = ledger.expenses_of(trip_id)

    balances: dict[AccountId, int] = {
        member: 0 for member in trip.members if member != account_id
    }

    for expense in expenses:
        if expense.lender == account_id:
            balances[expense.ower] += expense.amount
        elif expense.ower == account_id:
            balances[expense.lender] -= expense.amount

    return TripSummary(
        trip_id=trip.id,
        trip_name=trip.name,
        balances=list(balances.items()),
    )
