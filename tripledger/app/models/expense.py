"""
models/expense.py — Expense record.

An expense is a single directional loan between two trip members: `ower`
owes `lender` exactly `amount`.

Key design points:
  - `id` is unique within its trip only, never across trips.
  - `amount` is a plain int bounded by MAX_AMOUNT (128-bit unsigned), so a
    trip's summed balances never need more than Python's native int.
  - `to_dict()` renders `amount` as a decimal string. Values this large do
    not survive a round trip through JSON numbers in most clients.
"""

from __future__ import annotations

from dataclasses import dataclass

from tripledger.app.models.trip import AccountId

ExpenseId = str

MAX_AMOUNT = 2 ** 128 - 1


@dataclass(frozen=True)
class Expense:
    id: ExpenseId
    name: str
    ower: AccountId
    lender: AccountId
    amount: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "ower": self.ower,
            "lender": self.lender,
            "amount": str(self.amount),
        }
