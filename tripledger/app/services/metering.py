"""
services/metering.py — State-growth reporting for mutating ledger calls.

Every store keeps a running byte footprint of the records it holds (compact
JSON of each record). The Ledger snapshots the total before a mutation and
reports `after - before` to a StorageMeter once the mutation has succeeded.

The meter decides what the bytes cost; the engine's only obligation is to
report the delta honestly. Deletions shrink state and report a negative
delta.

Layer rules:
  - No Flask imports. Meters receive plain values.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


def footprint(record: dict | list) -> int:
    """Byte size of a record's compact JSON encoding."""
    return len(json.dumps(record, separators=(",", ":")).encode("utf-8"))


@dataclass(frozen=True)
class StorageReport:
    operation: str
    caller: str
    byte_delta: int


class StorageMeter(Protocol):
    def report(self, report: StorageReport) -> None:
        ...


class PricedStorageMeter:
    """
    Prices state growth at a fixed cost per byte and logs the charge.

    Shrinking state (negative delta) is logged with a zero charge; any
    refund policy belongs to whoever consumes these logs.
    """

    def __init__(self, byte_cost: int) -> None:
        self.byte_cost = byte_cost

    def cost_of(self, byte_delta: int) -> int:
        return max(byte_delta, 0) * self.byte_cost

    def report(self, report: StorageReport) -> None:
        logger.info(
            "storage delta %+d bytes for %s by %s (charge %d)",
            report.byte_delta,
            report.operation,
            report.caller,
            self.cost_of(report.byte_delta),
        )
