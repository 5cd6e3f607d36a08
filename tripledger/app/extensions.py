"""
extensions.py — Flask extension singleton for the Ledger.

Pattern (the standard Flask application-factory pattern):
    1. Create the extension object here (no app attached yet).
    2. Call init_app(app) inside the app factory in app/__init__.py.
    3. Import `ledger_ext` from here wherever the current app's ledger is needed.

    from tripledger.app.extensions import ledger_ext
    ledger_ext.ledger.create_trip(...)

The extension object itself holds no state. Each app gets its own Ledger,
stored under app.extensions["tripledger"], so separate test apps never
share trips or expenses.
"""

from __future__ import annotations

from flask import Flask, current_app

from tripledger.app.services.event_log import LoggerEventSink
from tripledger.app.services.ledger import Ledger
from tripledger.app.services.metering import PricedStorageMeter

EXTENSION_KEY = "tripledger"


class LedgerExtension:

    def init_app(self, app: Flask, ledger: Ledger | None = None) -> None:
        """Attaches `ledger`, or one built from the app config, to the app."""
        if ledger is None:
            ledger = Ledger(
                meter=PricedStorageMeter(byte_cost=app.config["STORAGE_BYTE_COST"]),
                events=LoggerEventSink(app.config["EVENT_LOGGER_NAME"]),
            )
        app.extensions[EXTENSION_KEY] = ledger

    @property
    def ledger(self) -> Ledger:
        """The Ledger of the app handling the current request."""
        return current_app.extensions[EXTENSION_KEY]


ledger_ext = LedgerExtension()
