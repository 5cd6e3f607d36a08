"""
services/membership_index.py — Reverse index: account → trip ids.

Invariant: account A appears in trip T's member list if and only if T's id
appears in A's entry here. TripRegistry is the only writer and updates both
sides in the same call; nothing else may call link().

Entries are created lazily on first membership and only ever grow. Each entry
is an insertion-ordered dict used as an ordered set, so membership tests are
O(1) and trips_of() still returns trips in the order the account joined them.
"""

from __future__ import annotations

from tripledger.app.errors import ErrorCode, not_found
from tripledger.app.models.trip import AccountId, TripId
from tripledger.app.services.metering import footprint


class MembershipIndex:

    def __init__(self) -> None:
        self._trip_ids_by_account: dict[AccountId, dict[TripId, None]] = {}
        self.footprint = 0

    def trips_of(self, account_id: AccountId) -> list[TripId]:
        """Returns the account's trip ids in join order, or raises ACCOUNT_NOT_FOUND (404)."""
        entry = self._trip_ids_by_account.get(account_id)
        if entry is None:
            raise not_found(
                ErrorCode.ACCOUNT_NOT_FOUND,
                f"Account {account_id} has not been added to any trips.",
            )
        return list(entry)

    def has_trips(self, account_id: AccountId) -> bool:
        return account_id in self._trip_ids_by_account

    def contains(self, account_id: AccountId, trip_id: TripId) -> bool:
        entry = self._trip_ids_by_account.get(account_id)
        return entry is not None and trip_id in entry

    def link(self, account_id: AccountId, trip_id: TripId) -> bool:
        """
        Adds trip_id to the account's entry if absent. Idempotent.

        Returns True when the entry changed.
        """
        entry = self._trip_ids_by_account.get(account_id)
        if entry is None:
            entry = {}
            self._trip_ids_by_account[account_id] = entry
            before = 0
        elif trip_id in entry:
            return False
        else:
            before = _entry_footprint(account_id, entry)

        entry[trip_id] = None
        self.footprint += _entry_footprint(account_id, entry) - before
        return True


def _entry_footprint(account_id: AccountId, entry: dict[TripId, None]) -> int:
    return footprint([account_id, list(entry)])
