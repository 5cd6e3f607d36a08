"""
tests/integration/conftest.py — Fixtures and helpers for all integration tests.

Design:
  - Each test gets a fresh app created with create_app("testing") and its
    own Ledger, so tests are isolated without any cleanup step.
  - The Ledger is wired to recording collaborators so tests can inspect
    storage reports and emitted events.
  - Bearer tokens are minted here with PyJWT using the testing secret,
    standing in for the external identity provider.

Helper functions (not fixtures) are provided for common operations:
  - token(app, account_id)       → signed bearer token
  - auth_headers(token)          → {"Authorization": "Bearer <token>"}
  - make_trip(client, ...)       → trip dict
  - add_members(client, ...)     → HTTP response
  - make_expense(client, ...)    → HTTP response

These are plain functions (not pytest fixtures) so they can be called with
arbitrary arguments in any test.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from tripledger.app import create_app
from tripledger.app.services.ledger import Ledger
from tripledger.tests.recorders import RecordingMeter, RecordingSink


# ═══════════════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def meter() -> RecordingMeter:
    return RecordingMeter()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def app(meter, sink):
    """A testing app with a fresh Ledger wired to the recording collaborators."""
    return create_app("testing", ledger=Ledger(meter=meter, events=sink))


@pytest.fixture
def client(app):
    return app.test_client()


# ═══════════════════════════════════════════════════════════════════════════
# Shared helper functions (not fixtures)
# ═══════════════════════════════════════════════════════════════════════════

def token(app, account_id: str, expires_in: timedelta | None = timedelta(minutes=15)) -> str:
    """Signs a bearer token for `account_id` the way the identity provider would."""
    payload: dict = {"sub": account_id}
    if expires_in is not None:
        payload["exp"] = datetime.now(timezone.utc) + expires_in
    return jwt.encode(
        payload,
        app.config["JWT_SECRET_KEY"],
        algorithm=app.config["JWT_ALGORITHM"],
    )


def auth_headers(bearer: str) -> dict:
    """Returns the Authorization header dict for use in test requests."""
    return {"Authorization": f"Bearer {bearer}"}


def as_account(app, account_id: str) -> dict:
    return auth_headers(token(app, account_id))


def make_trip(
    client,
    app,
    caller: str,
    name: str = "Test Trip",
    members: list[str] | None = None,
) -> dict:
    """Creates a trip as `caller` and returns the trip data dict."""
    payload: dict = {"name": name}
    if members is not None:
        payload["members"] = members
    resp = client.post(
        "/api/v1/trips/",
        json=payload,
        headers=as_account(app, caller),
    )
    assert resp.status_code == 201, f"make_trip failed: {resp.get_json()}"
    return resp.get_json()["data"]


def add_members(client, app, caller: str, trip_id: str, members):
    """Adds members to a trip as `caller`. Returns the HTTP response."""
    return client.post(
        f"/api/v1/trips/{trip_id}/members",
        json={"members": members},
        headers=as_account(app, caller),
    )


def make_expense(
    client,
    app,
    caller: str,
    trip_id: str,
    ower: str,
    lender: str,
    amount,
    name: str = "Test Expense",
):
    """Creates an expense as `caller`. Returns the HTTP response."""
    return client.post(
        f"/api/v1/trips/{trip_id}/expenses",
        json={"name": name, "ower": ower, "lender": lender, "amount": amount},
        headers=as_account(app, caller),
    )
