"""
models/trip.py — Trip record.

A trip is a named group with an ordered, append-only member list.
No business logic. No imports from services or routes.

Records are frozen: the registry replaces a trip with a new instance when
members are appended, so a Trip handed to a caller never changes under it.
"""

from __future__ import annotations

from dataclasses import dataclass

TripId = str
AccountId = str


@dataclass(frozen=True)
class Trip:
    id: TripId
    name: str
    members: tuple[AccountId, ...]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "members": list(self.members),
        }

