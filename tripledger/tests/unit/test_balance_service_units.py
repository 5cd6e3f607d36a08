"""
tests/unit/test_balance_service_units.py — Unit tests for balance_service.compute_summary.

What this file proves:
  - Lender side adds, ower side subtracts, unrelated expenses are ignored
  - Output follows member-list order with the requested account skipped
  - Zero balances are always emitted
  - Amounts far beyond 64 bits sum exactly
  - Every precondition raises its own code
"""

from __future__ import annotations

import pytest

from tripledger.app.errors import AppError, ErrorCode
from tripledger.app.models.expense import MAX_AMOUNT
from tripledger.app.services.balance_service import compute_summary
from tripledger.app.services.expense_service import ExpenseLedger
from tripledger.app.services.membership_index import MembershipIndex
from tripledger.app.services.trip_service import TripRegistry

A1 = "a1.near"
A2 = "a2.near"
A3 = "a3.near"


@pytest.fixture
def stores():
    registry = TripRegistry(MembershipIndex())
    ledger = ExpenseLedger(registry)
    registry.create_trip(A1, "Road trip", [A2, A3])
    return registry, ledger


def _summary(stores, account_id, trip_id="1"):
    registry, ledger = stores
    return compute_summary(trip_id, account_id, registry, ledger)


def test_end_to_end_example(stores):
    registry, ledger = stores
    assert registry.get_trip("1").members == (A2, A3, A1)

    ledger.add_expense(A1, "1", "e1", A2, A3, 10000000000000000000000)
    ledger.add_expense(A1, "1", "e2", A1, A3, 90000000000000000000000)

    lender_view = _summary(stores, A3)
    assert lender_view.trip_id == "1"
    assert lender_view.trip_name == "Road trip"
    assert lender_view.balances == [
        (A2, 10000000000000000000000),
        (A1, 90000000000000000000000),
    ]

    ower_view = _summary(stores, A1)
    assert ower_view.balances == [
        (A2, 0),
        (A3, -90000000000000000000000),
    ]


def test_expenses_in_both_directions_net_out(stores):
    _, ledger = stores
    ledger.add_expense(A1, "1", "taxi", A2, A1, 300)
    ledger.add_expense(A2, "1", "hotel", A1, A2, 500)

    assert _summary(stores, A1).balances == [(A2, -200), (A3, 0)]
    assert _summary(stores, A2).balances == [(A3, 0), (A1, 200)]


def test_expense_between_other_members_is_ignored(stores):
    _, ledger = stores
    ledger.add_expense(A1, "1", "snacks", A2, A3, 40)
    assert _summary(stores, A1).balances == [(A2, 0), (A3, 0)]


def test_deleted_and_updated_expenses_reflect_current_state(stores):
    _, ledger = stores
    ledger.add_expense(A1, "1", "e1", A2, A1, 10)
    ledger.add_expense(A1, "1", "e2", A3, A1, 20)
    ledger.delete_expense(A1, "1", "1")
    ledger.update_expense(A1, "1", "2", None, A1, A3, 5)

    assert _summary(stores, A1).balances == [(A2, 0), (A3, -5)]


def test_sums_beyond_128_bits_are_exact(stores):
    _, ledger = stores
    for _ in range(4):
        ledger.add_expense(A1, "1", "big", A2, A1, MAX_AMOUNT)
    assert _summary(stores, A1).balances[0] == (A2, 4 * MAX_AMOUNT)


def test_to_dict_renders_balances_as_strings(stores):
    _, ledger = stores
    ledger.add_expense(A1, "1", "e1", A1, A2, 7)
    assert _summary(stores, A1).to_dict() == {
        "trip_id": "1",
        "trip_name": "Road trip",
        "balances": [
            {"account_id": A2, "balance": "-7"},
            {"account_id": A3, "balance": "0"},
        ],
    }


# ═══════════════════════════════════════════════════════════════════════════
# Preconditions
# ═══════════════════════════════════════════════════════════════════════════

def _raises(code: str, stores, account_id, trip_id="1") -> AppError:
    with pytest.raises(AppError) as exc_info:
        _summary(stores, account_id, trip_id)
    assert exc_info.value.code == code
    return exc_info.value


def test_unknown_trip(stores):
    assert _raises(ErrorCode.TRIP_NOT_FOUND, stores, A1, trip_id="2").http_status == 404


def test_account_in_no_trips(stores):
    assert _raises(ErrorCode.ACCOUNT_NOT_FOUND, stores, "nobody.near").http_status == 404


def test_account_in_other_trips_only(stores):
    registry, _ = stores
    registry.create_trip("elsewhere.near", "Other")
    assert _raises(ErrorCode.ACCOUNT_NOT_MEMBER, stores, "elsewhere.near").http_status == 403


def test_trip_with_no_expenses(stores):
    assert _raises(ErrorCode.NO_EXPENSES, stores, A1).http_status == 404


def test_trip_with_all_expenses_deleted(stores):
    _, ledger = stores
    ledger.add_expense(A1, "1", "e1", A2, A1, 10)
    ledger.delete_expense(A1, "1", "1")
    _raises(ErrorCode.NO_EXPENSES, stores, A1)


def test_single_member_trip_has_no_counterpart(stores):
    registry, _ = stores
    registry.create_trip("solo.near", "Solo")
    err = _raises(ErrorCode.NO_COUNTERPART, stores, "solo.near", trip_id="2")
    assert err.http_status == 409
