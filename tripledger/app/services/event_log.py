"""
services/event_log.py — Append-only structured events for mutating calls.

Each successful mutating Ledger call emits exactly one LedgerEvent. Sinks are
fire-and-forget: the Ledger logs a sink failure and carries on, so emitting
never changes a call's return value.

Wire shape (one line per event):
    {"method type": "add_expense", "params": {...}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class LedgerEvent:
    method: str
    params: dict = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(
            {"method type": self.method, "params": self.params},
            separators=(",", ":"),
        )


class EventSink(Protocol):
    def emit(self, event: LedgerEvent) -> None:
        ...


class LoggerEventSink:
    """Writes each event as one JSON line to a named logger at INFO."""

    def __init__(self, logger_name: str = "tripledger.events") -> None:
        self._logger = logging.getLogger(logger_name)

    def emit(self, event: LedgerEvent) -> None:
        self._logger.info(event.to_json())
