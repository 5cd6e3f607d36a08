"""
routes/trips.py — Trip route handlers.

Layer rules:
  - Parse, validate, call ONE ledger operation, return envelope.
  - No business logic.

Endpoints (base url_prefix=/api/v1/trips):
  POST /trips                  → 201  create trip
  GET  /trips/:id              → 200  get trip + members
  POST /trips/:id/members      → 200  add members (any current member)
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from tripledger.app.extensions import ledger_ext
from tripledger.app.middleware.auth_middleware import require_auth
from tripledger.app.schemas.trip_schema import AddMembersSchema, CreateTripSchema

trips_bp = Blueprint("trips", __name__)


@trips_bp.route("/", methods=["POST"])
@require_auth
def create_trip():
    """POST /trips — Create a trip. The caller is always a member."""
    data = CreateTripSchema().load(request.get_json(force=True, silent=True) or {})
    trip = ledger_ext.ledger.create_trip(
        caller=g.account_id,
        name=data["name"],
        members=data["members"],
    )
    return jsonify({"data": trip.to_dict(), "warnings": []}), 201


@trips_bp.route("/<trip_id>", methods=["GET"])
@require_auth
def get_trip(trip_id: str):
    """GET /trips/:id — Trip name and members."""
    trip = ledger_ext.ledger.get_trip(trip_id)
    return jsonify({"data": trip.to_dict(), "warnings": []}), 200


@trips_bp.route("/<trip_id>/members", methods=["POST"])
@require_auth
def add_members(trip_id: str):
    """POST /trips/:id/members — Append members. Existing members are skipped silently."""
    data = AddMembersSchema().load(request.get_json(force=True, silent=True) or {})
    trip = ledger_ext.ledger.add_members(
        caller=g.account_id,
        trip_id=trip_id,
        new_members=data["members"],
    )
    return jsonify({"data": trip.to_dict(), "warnings": []}), 200
