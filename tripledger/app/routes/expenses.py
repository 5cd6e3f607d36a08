"""
routes/expenses.py — Expense route handlers.

Registered at url_prefix=/api/v1/trips: every expense path is scoped to a
trip because expense ids are only unique within their trip.

Layer rules:
  - Parse, validate, call ONE ledger operation, return envelope.
  - No business logic.

Endpoints:
  POST   /trips/:id/expenses               → 201  create expense
  GET    /trips/:id/expenses               → 200  list expense ids (numeric order)
  GET    /trips/:id/expenses/:expense_id   → 200  get expense
  PUT    /trips/:id/expenses/:expense_id   → 200  replace expense (current lender only)
  DELETE /trips/:id/expenses/:expense_id   → 200  hard delete (current lender only)
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from tripledger.app.extensions import ledger_ext
from tripledger.app.middleware.auth_middleware import require_auth
from tripledger.app.schemas.expense_schema import CreateExpenseSchema, UpdateExpenseSchema

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.route("/<trip_id>/expenses", methods=["POST"])
@require_auth
def add_expense(trip_id: str):
    """POST /trips/:id/expenses — Record that `ower` owes `lender` `amount`."""
    data = CreateExpenseSchema().load(request.get_json(force=True, silent=True) or {})
    expense = ledger_ext.ledger.add_expense(
        caller=g.account_id,
        trip_id=trip_id,
        name=data["name"],
        ower=data["ower"],
        lender=data["lender"],
        amount=data["amount"],
    )
    return jsonify({"data": expense.to_dict(), "warnings": []}), 201


@expenses_bp.route("/<trip_id>/expenses", methods=["GET"])
@require_auth
def list_expense_ids(trip_id: str):
    """GET /trips/:id/expenses — Live expense ids, ascending by number."""
    expense_ids = ledger_ext.ledger.list_expense_ids(trip_id)
    return jsonify({
        "data": {"trip_id": trip_id, "expense_ids": expense_ids},
        "warnings": [],
    }), 200


@expenses_bp.route("/<trip_id>/expenses/<expense_id>", methods=["GET"])
@require_auth
def get_expense(trip_id: str, expense_id: str):
    expense = ledger_ext.ledger.get_expense(trip_id, expense_id)
    return jsonify({"data": expense.to_dict(), "warnings": []}), 200


@expenses_bp.route("/<trip_id>/expenses/<expense_id>", methods=["PUT"])
@require_auth
def update_expense(trip_id: str, expense_id: str):
    """PUT /trips/:id/expenses/:expense_id — Only the current lender may edit."""
    data = UpdateExpenseSchema().load(request.get_json(force=True, silent=True) or {})
    expense = ledger_ext.ledger.update_expense(
        caller=g.account_id,
        trip_id=trip_id,
        expense_id=expense_id,
        name=data["name"],
        ower=data["ower"],
        lender=data["lender"],
        amount=data["amount"],
    )
    return jsonify({"data": expense.to_dict(), "warnings": []}), 200


@expenses_bp.route("/<trip_id>/expenses/<expense_id>", methods=["DELETE"])
@require_auth
def delete_expense(trip_id: str, expense_id: str):
    """DELETE /trips/:id/expenses/:expense_id — Only the current lender may delete."""
    deleted = ledger_ext.ledger.delete_expense(
        caller=g.account_id,
        trip_id=trip_id,
        expense_id=expense_id,
    )
    return jsonify({
        "data": {
            "deleted": deleted,
            "trip_id": trip_id,
            "expense_id": expense_id,
        },
        "warnings": [],
    }), 200
