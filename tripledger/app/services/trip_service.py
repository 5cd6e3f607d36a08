"""
services/trip_service.py — Trip registry: creation and member growth.

Invariants enforced here:
  - Trip ids are "1", "2", ... in creation order, never reassigned.
  - Member lists are duplicate-free and append-only.
  - Every member list change re-links the MembershipIndex in the same call.

Authorization rules:
  - Creating a trip:  any authenticated caller; the caller always ends up a member.
  - Adding members:   any current member of the trip.

All checks run before the first write, so a failed call leaves the registry
and the index exactly as they were.
"""

from __future__ import annotations

from collections.abc import Iterable

from tripledger.app.errors import AppError, ErrorCode, invalid_input, not_found, unauthorized
from tripledger.app.models.trip import AccountId, Trip, TripId
from tripledger.app.services.membership_index import MembershipIndex
from tripledger.app.services.metering import footprint
from tripledger.app.services.validation import require_account, require_text


# ── Private helpers ────────────────────────────────────────────────────────

def _dedupe(accounts: Iterable[AccountId]) -> list[AccountId]:
    """Drops repeats, keeping each account at its first-seen position."""
    return list(dict.fromkeys(accounts))


def _validate_accounts(accounts, field: str) -> list[AccountId]:
    if isinstance(accounts, str) or not isinstance(accounts, (list, tuple)):
        raise invalid_input(
            ErrorCode.INVALID_FIELD,
            f"{field} must be a list of account ids.",
            field=field,
        )
    for account_id in accounts:
        require_account(account_id, field)
    return list(accounts)


def _trip_footprint(trip: Trip) -> int:
    return footprint(trip.to_dict())


# ── Registry ───────────────────────────────────────────────────────────────

class TripRegistry:

    def __init__(self, index: MembershipIndex) -> None:
        self.index = index
        self._trips: dict[TripId, Trip] = {}
        self.footprint = 0

    def __len__(self) -> int:
        return len(self._trips)

    def get_trip(self, trip_id: TripId) -> Trip:
        """Returns the Trip or raises TRIP_NOT_FOUND (404)."""
        trip = self._trips.get(trip_id)
        if trip is None:
            raise not_found(
                ErrorCode.TRIP_NOT_FOUND,
                f"Trip {trip_id} does not exist.",
            )
        return trip

    def require_member(
            self,
            trip_id: TripId,
            account_id: AccountId,
            code: str = ErrorCode.FORBIDDEN,
            role: str = "caller",
    ) -> None:
        """
        Raises `code` (403) if account_id is not a current member of trip_id.

        Reads the MembershipIndex, which mirrors every trip's member list.
        """
        if not self.index.contains(account_id, trip_id):
            raise unauthorized(
                code,
                f"{role.capitalize()} {account_id} is not a member of trip {trip_id}.",
            )

    def create_trip(
            self,
            caller: AccountId,
            name: str,
            members: list[AccountId] | None = None,
    ) -> Trip:
        """
        Creates a trip and links every member in the MembershipIndex.

        Member order: the provided list as given (repeats dropped), then the
        caller if not already present. Without a list the trip is [caller].
        """
        require_account(caller, "caller")
        require_text(name, "name")

        if members is None:
            final_members = [caller]
        else:
            final_members = _dedupe(_validate_accounts(members, "members"))
            if caller not in final_members:
                final_members.append(caller)

        trip_id = str(len(self._trips) + 1)
        if trip_id in self._trips:
            # Cannot happen while ids come from the count and trips are never deleted.
            raise AppError(
                ErrorCode.INTERNAL_ERROR,
                f"Trip id {trip_id} already exists.",
                500,
            )

        trip = Trip(id=trip_id, name=name, members=tuple(final_members))
        self._trips[trip_id] = trip
        self.footprint += _trip_footprint(trip)

        for account_id in trip.members:
            self.index.link(account_id, trip_id)

        return trip

    def add_members(
            self,
            caller: AccountId,
            trip_id: TripId,
            new_members: list[AccountId] | None,
    ) -> Trip:
        """
        Appends members not already in the trip, in first-seen order.

        Re-adding an existing member is not an error. After the list is final
        the index is re-linked for every member, not just the new ones, so
        repeated calls with overlapping lists converge.

        Raises:
          AppError(TRIP_NOT_FOUND, 404)       — trip does not exist
          AppError(FORBIDDEN, 403)            — caller is not a member
          AppError(NO_MEMBERS_PROVIDED, 400)  — new_members empty or absent
        """
        trip = self.get_trip(trip_id)
        self.require_member(trip_id, caller)

        if not new_members:
            raise invalid_input(
                ErrorCode.NO_MEMBERS_PROVIDED,
                "No member ids provided.",
                field="members",
            )
        requested = _validate_accounts(new_members, "members")

        members = list(trip.members)
        for account_id in requested:
            if account_id not in members:
                members.append(account_id)

        updated = Trip(id=trip.id, name=trip.name, members=tuple(members))
        self._trips[trip_id] = updated
        self.footprint += _trip_footprint(updated) - _trip_footprint(trip)

        for account_id in updated.members:
            self.index.link(account_id, trip_id)

        return updated
