"""
services/expense_service.py — Expense ledger: per-trip loan records.

Invariants enforced here:
  - ower != lender on every stored expense (SELF_LOAN, 400).
  - ower and lender are trip members at the time of the call that sets them
    (OWER_NOT_MEMBER / LENDER_NOT_MEMBER, 403). No retroactive re-validation.
  - Expense ids are "1", "2", ... per trip, taken from a counter stored with
    the trip's expense map. Deleting expenses never rewinds the counter, so
    an id is never handed out twice within a trip.

Authorization rules:
  - Create: caller must be a trip member; caller need not be a party.
  - Edit:   caller must be a member AND the expense's current lender.
  - Delete: same as edit.
  The lender check always reads the stored record at call time. An edit may
  hand the expense to a new lender, after which only the new lender may
  edit or delete it.

Every check runs before the first write.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tripledger.app.errors import ErrorCode, invalid_input, not_found, unauthorized
from tripledger.app.models.expense import Expense, ExpenseId
from tripledger.app.models.trip import AccountId, TripId
from tripledger.app.services.metering import footprint
from tripledger.app.services.trip_service import TripRegistry
from tripledger.app.services.validation import require_amount, require_text


@dataclass
class TripExpenses:
    """A trip's expense map plus the last expense number ever assigned in it."""

    expenses: dict[ExpenseId, Expense] = field(default_factory=dict)
    last_seq: int = 0


# ── Private helpers ────────────────────────────────────────────────────────

def _expense_footprint(expense: Expense) -> int:
    return footprint(expense.to_dict())


def _validate_parties(
        registry: TripRegistry,
        trip_id: TripId,
        caller: AccountId,
        ower: AccountId,
        lender: AccountId,
) -> None:
    """Caller, ower and lender must each be members; ower and lender must differ."""
    registry.require_member(trip_id, caller)
    registry.require_member(trip_id, ower, ErrorCode.OWER_NOT_MEMBER, role="ower")
    registry.require_member(trip_id, lender, ErrorCode.LENDER_NOT_MEMBER, role="lender")

    if ower == lender:
        raise invalid_input(
            ErrorCode.SELF_LOAN,
            "Lender and ower cannot be the same account.",
            field="lender",
        )


# ── Ledger ─────────────────────────────────────────────────────────────────

class ExpenseLedger:

    def __init__(self, registry: TripRegistry) -> None:
        self.registry = registry
        self._by_trip: dict[TripId, TripExpenses] = {}
        self.footprint = 0

    def _expense_map(self, trip_id: TripId) -> TripExpenses:
        """
        Returns the trip's expense map or raises NO_EXPENSES (404).

        A trip that never had an expense has no map at all; a trip whose
        expenses were all deleted has an empty one. Both report NO_EXPENSES.
        """
        trip_expenses = self._by_trip.get(trip_id)
        if trip_expenses is None or not trip_expenses.expenses:
            raise not_found(
                ErrorCode.NO_EXPENSES,
                f"Trip {trip_id} doesn't have any expenses.",
            )
        return trip_expenses

    def _get_expense_or_404(self, trip_id: TripId, expense_id: ExpenseId) -> Expense:
        expense = self._expense_map(trip_id).expenses.get(expense_id)
        if expense is None:
            raise not_found(
                ErrorCode.EXPENSE_NOT_FOUND,
                f"Expense {expense_id} doesn't exist in trip {trip_id}.",
            )
        return expense

    def _require_current_lender(self, caller: AccountId, expense: Expense, action: str) -> None:
        if caller != expense.lender:
            raise unauthorized(
                ErrorCode.NOT_CURRENT_LENDER,
                f"Cannot {action} expense {expense.id} since caller is not its current lender.",
            )

    # ── Public operations ──────────────────────────────────────────────────

    def add_expense(
            self,
            caller: AccountId,
            trip_id: TripId,
            name: str,
            ower: AccountId,
            lender: AccountId,
            amount: int,
    ) -> Expense:
        """
        Records a loan of `amount` from `lender` to `ower` in the trip.

        Enforces, in order:
          TRIP_NOT_FOUND (404), MISSING_FIELD (400) for name,
          INVALID_AMOUNT (400), FORBIDDEN / OWER_NOT_MEMBER /
          LENDER_NOT_MEMBER (403), SELF_LOAN (400).
        """
        self.registry.get_trip(trip_id)
        require_text(name, "name")
        require_amount(amount)
        _validate_parties(self.registry, trip_id, caller, ower, lender)

        trip_expenses = self._by_trip.get(trip_id)
        if trip_expenses is None:
            trip_expenses = TripExpenses()
            self._by_trip[trip_id] = trip_expenses

        trip_expenses.last_seq += 1
        expense = Expense(
            id=str(trip_expenses.last_seq),
            name=name,
            ower=ower,
            lender=lender,
            amount=amount,
        )
        trip_expenses.expenses[expense.id] = expense
        self.footprint += _expense_footprint(expense)
        return expense

    def update_expense(
            self,
            caller: AccountId,
            trip_id: TripId,
            expense_id: ExpenseId,
            name: str | None,
            ower: AccountId,
            lender: AccountId,
            amount: int,
    ) -> Expense:
        """
        Replaces ower, lender and amount of an expense; name only when given.

        The lender check uses the lender stored before this call.
        """
        self.registry.get_trip(trip_id)
        if name is not None:
            require_text(name, "name")
        require_amount(amount)
        _validate_parties(self.registry, trip_id, caller, ower, lender)

        current = self._get_expense_or_404(trip_id, expense_id)
        self._require_current_lender(caller, current, "edit")

        updated = Expense(
            id=current.id,
            name=name if name is not None else current.name,
            ower=ower,
            lender=lender,
            amount=amount,
        )
        self._by_trip[trip_id].expenses[expense_id] = updated
        self.footprint += _expense_footprint(updated) - _expense_footprint(current)
        return updated

    def delete_expense(
            self,
            caller: AccountId,
            trip_id: TripId,
            expense_id: ExpenseId,
    ) -> bool:
        """Hard-deletes an expense. Its id is never assigned again in this trip."""
        self.registry.get_trip(trip_id)
        self.registry.require_member(trip_id, caller)

        expense = self._get_expense_or_404(trip_id, expense_id)
        self._require_current_lender(caller, expense, "delete")

        del self._by_trip[trip_id].expenses[expense_id]
        self.footprint -= _expense_footprint(expense)
        return True

    def list_expense_ids(self, trip_id: TripId) -> list[ExpenseId]:
        """Returns the trip's live expense ids sorted by numeric value ("9" before "10")."""
        self.registry.get_trip(trip_id)
        trip_expenses = self._expense_map(trip_id)
        return sorted(trip_expenses.expenses, key=int)

    def get_expense(self, trip_id: TripId, expense_id: ExpenseId) -> Expense:
        self.registry.get_trip(trip_id)
        return self._get_expense_or_404(trip_id, expense_id)

    def expenses_of(self, trip_id: TripId) -> list[Expense]:
        """Returns the trip's live expenses; raises NO_EXPENSES (404) if there are none."""
        return list(self._expense_map(trip_id).expenses.values())
