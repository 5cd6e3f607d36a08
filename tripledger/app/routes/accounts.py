"""
routes/accounts.py — Account route handlers.

Endpoints (base url_prefix=/api/v1/accounts):
  GET /accounts/:account_id/trips   → 200  trip ids the account belongs to
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from tripledger.app.extensions import ledger_ext
from tripledger.app.middleware.auth_middleware import require_auth

accounts_bp = Blueprint("accounts", __name__)


@accounts_bp.route("/<account_id>/trips", methods=["GET"])
@require_auth
def trips_of(account_id: str):
    trip_ids = ledger_ext.ledger.trips_of(account_id)
    return jsonify({
        "data": {"account_id": account_id, "trip_ids": trip_ids},
        "warnings": [],
    }), 200
