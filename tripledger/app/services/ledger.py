"""
services/ledger.py — The Ledger: one object owning every store.

The Flask app builds exactly one Ledger in create_app() and keeps it on
app.extensions (see extensions.py). Tests build their own. There is no
module-level ledger state anywhere.

Each public method is one operation of the external interface. Mutating
operations:
  1. run under the ledger's lock,
  2. snapshot the total store footprint,
  3. delegate to TripRegistry / ExpenseLedger (which validate everything
     before writing, so a failure leaves every store untouched),
  4. report the byte delta to the StorageMeter,
  5. emit one LedgerEvent to the EventSink.

Steps 4 and 5 run after the stores are written. A meter or sink that raises
is logged with its traceback and the call still returns its result.

Reads take the same lock so they never see a half-applied mutation. One
global lock is enough while trip counts stay small.

Layer rules:
  - No Flask imports. Receives plain strings and ints; returns model
    records or raises AppError.
"""

from __future__ import annotations

import logging
import threading

from tripledger.app.models.expense import Expense, ExpenseId
from tripledger.app.models.trip import AccountId, Trip, TripId
from tripledger.app.services import balance_service
from tripledger.app.services.balance_service import TripSummary
from tripledger.app.services.event_log import EventSink, LedgerEvent, LoggerEventSink
from tripledger.app.services.expense_service import ExpenseLedger
from tripledger.app.services.membership_index import MembershipIndex
from tripledger.app.services.metering import PricedStorageMeter, StorageMeter, StorageReport
from tripledger.app.services.trip_service import TripRegistry

logger = logging.getLogger(__name__)


class Ledger:

    def __init__(
            self,
            meter: StorageMeter | None = None,
            events: EventSink | None = None,
    ) -> None:
        self.index = MembershipIndex()
        self.trips = TripRegistry(self.index)
        self.expenses = ExpenseLedger(self.trips)
        self.meter = meter if meter is not None else PricedStorageMeter(byte_cost=0)
        self.events = events if events is not None else LoggerEventSink()
        self._lock = threading.RLock()

    @property
    def footprint(self) -> int:
        """Total serialized size in bytes of every stored record."""
        return self.index.footprint + self.trips.footprint + self.expenses.footprint

    # ── Side channels ──────────────────────────────────────────────────────

    def _report(self, operation: str, caller: AccountId, before: int) -> None:
        report = StorageReport(
            operation=operation,
            caller=caller,
            byte_delta=self.footprint - before,
        )
        try:
            self.meter.report(report)
        except Exception:
            logger.exception(
                "Storage meter failed for %s (%+d bytes)", operation, report.byte_delta,
            )

    def _emit(self, method: str, params: dict) -> None:
        try:
            self.events.emit(LedgerEvent(method=method, params=params))
        except Exception:
            logger.exception("Event sink failed for %s", method)

    # ── Trips ──────────────────────────────────────────────────────────────

    def create_trip(
            self,
            caller: AccountId,
            name: str,
            members: list[AccountId] | None = None,
    ) -> Trip:
        with self._lock:
            before = self.footprint
            trip = self.trips.create_trip(caller, name, members)
            self._report("create_trip", caller, before)
            self._emit("create_trip", {
                "trip_id": trip.id,
                "trip_name": trip.name,
                "trip_members": list(trip.members),
            })
        logger.debug("trip %s created by %s", trip.id, caller)
        return trip

    def add_members(
            self,
            caller: AccountId,
            trip_id: TripId,
            new_members: list[AccountId] | None,
    ) -> Trip:
        with self._lock:
            before = self.footprint
            old_members = list(self.trips.get_trip(trip_id).members)
            trip = self.trips.add_members(caller, trip_id, new_members)
            self._report("add_members", caller, before)
            self._emit("add_members", {
                "trip_id": trip.id,
                "trip_name": trip.name,
                "old_members": old_members,
                "new_members": list(new_members),
                "all_members": list(trip.members),
            })
        return trip

    def get_trip(self, trip_id: TripId) -> Trip:
        with self._lock:
            return self.trips.get_trip(trip_id)

    def trips_of(self, account_id: AccountId) -> list[TripId]:
        with self._lock:
            return self.index.trips_of(account_id)

    # ── Expenses ───────────────────────────────────────────────────────────

    def add_expense(
            self,
            caller: AccountId,
            trip_id: TripId,
            name: str,
            ower: AccountId,
            lender: AccountId,
            amount: int,
    ) -> Expense:
        with self._lock:
            before = self.footprint
            expense = self.expenses.add_expense(caller, trip_id, name, ower, lender, amount)
            self._report("add_expense", caller, before)
            self._emit("add_expense", _expense_params(trip_id, expense))
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
        with self._lock:
            before = self.footprint
            expense = self.expenses.update_expense(
                caller, trip_id, expense_id, name, ower, lender, amount,
            )
            self._report("update_expense", caller, before)
            self._emit("update_expense", _expense_params(trip_id, expense))
        return expense

    def delete_expense(
            self,
            caller: AccountId,
            trip_id: TripId,
            expense_id: ExpenseId,
    ) -> bool:
        with self._lock:
            before = self.footprint
            deleted = self.expenses.delete_expense(caller, trip_id, expense_id)
            self._report("delete_expense", caller, before)
            self._emit("delete_expense", {
                "trip_id": trip_id,
                "expense_id": expense_id,
            })
        return deleted

    def list_expense_ids(self, trip_id: TripId) -> list[ExpenseId]:
        with self._lock:
            return self.expenses.list_expense_ids(trip_id)

    def get_expense(self, trip_id: TripId, expense_id: ExpenseId) -> Expense:
        with self._lock:
            return self.expenses.get_expense(trip_id, expense_id)

    # ── Balances ───────────────────────────────────────────────────────────

    def compute_summary(self, trip_id: TripId, account_id: AccountId) -> TripSummary:
        with self._lock:
            return balance_service.compute_summary(
                trip_id, account_id, self.trips, self.expenses,
            )


def _expense_params(trip_id: TripId, expense: Expense) -> dict:
    return {
        "trip_id": trip_id,
        "expense_id": expense.id,
        "expense_name": expense.name,
        "ower_id": expense.ower,
        "lender_id": expense.lender,
        "loan_amount": str(expense.amount),
    }
