"""
routes/balances.py — Balance summary route handler.

Endpoints (base url_prefix=/api/v1/trips):
  GET /trips/:id/summary              → 200  net balances for the caller
  GET /trips/:id/summary?account=X    → 200  net balances for account X

Balances are strings: they can exceed the range of JSON numbers.
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from tripledger.app.extensions import ledger_ext
from tripledger.app.middleware.auth_middleware import require_auth

balances_bp = Blueprint("balances", __name__)


@balances_bp.route("/<trip_id>/summary", methods=["GET"])
@require_auth
def get_summary(trip_id: str):
    account_id = request.args.get("account") or g.account_id
    summary = ledger_ext.ledger.compute_summary(trip_id, account_id)
    return jsonify({"data": summary.to_dict(), "warnings": []}), 200
