"""
tests/integration/test_trips.py — Integration tests for trip and account endpoints.

Endpoints covered:
  POST /trips                        → 201
  GET  /trips/:id                    → 200
  POST /trips/:id/members            → 200
  GET  /accounts/:account_id/trips   → 200
"""

from __future__ import annotations

from .conftest import add_members, as_account, make_trip


class TestCreateTrip:

    def test_caller_only_trip(self, client, app):
        trip = make_trip(client, app, "alice.near", name="Goa")
        assert trip == {"id": "1", "name": "Goa", "members": ["alice.near"]}

    def test_caller_appended_to_given_members(self, client, app):
        trip = make_trip(client, app, "a1.near", members=["a2.near", "a3.near"])
        assert trip["members"] == ["a2.near", "a3.near", "a1.near"]

    def test_second_trip_gets_next_id(self, client, app):
        make_trip(client, app, "alice.near")
        assert make_trip(client, app, "bob.near")["id"] == "2"

    def test_blank_name_rejected(self, client, app):
        resp = client.post(
            "/api/v1/trips/",
            json={"name": "   "},
            headers=as_account(app, "alice.near"),
        )
        assert resp.status_code == 400
        error = resp.get_json()["error"]
        assert error["code"] == "INVALID_FIELD"
        assert error["field"] == "name"

    def test_missing_name_rejected(self, client, app):
        resp = client.post(
            "/api/v1/trips/",
            json={"members": ["bob.near"]},
            headers=as_account(app, "alice.near"),
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "MISSING_FIELD"

    def test_creation_reports_storage_and_emits_event(self, client, app, meter, sink):
        make_trip(client, app, "alice.near", name="Goa", members=["bob.near"])

        assert len(meter.reports) == 1
        assert meter.reports[0].operation == "create_trip"
        assert meter.reports[0].caller == "alice.near"
        assert meter.reports[0].byte_delta > 0
        assert sink.events[0].params["trip_members"] == ["bob.near", "alice.near"]


class TestGetTrip:

    def test_get_existing(self, client, app):
        make_trip(client, app, "alice.near", name="Goa")
        resp = client.get("/api/v1/trips/1", headers=as_account(app, "anyone.near"))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["name"] == "Goa"

    def test_unknown_trip_is_404(self, client, app):
        resp = client.get("/api/v1/trips/42", headers=as_account(app, "alice.near"))
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "TRIP_NOT_FOUND"


class TestAddMembers:

    def test_members_appended(self, client, app):
        make_trip(client, app, "alice.near")
        resp = add_members(client, app, "alice.near", "1", ["bob.near", "carol.near"])
        assert resp.status_code == 200
        assert resp.get_json()["data"]["members"] == ["alice.near", "bob.near", "carol.near"]

    def test_overlapping_lists_never_duplicate(self, client, app):
        make_trip(client, app, "alice.near")
        add_members(client, app, "alice.near", "1", ["bob.near"])
        resp = add_members(client, app, "bob.near", "1", ["bob.near", "alice.near", "carol.near"])
        assert resp.get_json()["data"]["members"] == ["alice.near", "bob.near", "carol.near"]

    def test_non_member_forbidden(self, client, app):
        make_trip(client, app, "alice.near")
        resp = add_members(client, app, "mallory.near", "1", ["mallory.near"])
        assert resp.status_code == 403
        assert resp.get_json()["error"]["code"] == "FORBIDDEN"

        trip = client.get("/api/v1/trips/1", headers=as_account(app, "alice.near")).get_json()["data"]
        assert trip["members"] == ["alice.near"]

    def test_empty_list_rejected(self, client, app):
        make_trip(client, app, "alice.near")
        resp = add_members(client, app, "alice.near", "1", [])
        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "NO_MEMBERS_PROVIDED"

    def test_unknown_trip(self, client, app):
        resp = add_members(client, app, "alice.near", "3", ["bob.near"])
        assert resp.status_code == 404


class TestTripsOfAccount:

    def test_lists_trips_in_join_order(self, client, app):
        make_trip(client, app, "alice.near")
        make_trip(client, app, "bob.near")
        add_members(client, app, "bob.near", "2", ["alice.near"])

        resp = client.get("/api/v1/accounts/alice.near/trips", headers=as_account(app, "bob.near"))
        assert resp.status_code == 200
        assert resp.get_json()["data"] == {"account_id": "alice.near", "trip_ids": ["1", "2"]}

    def test_account_without_trips_is_404(self, client, app):
        resp = client.get("/api/v1/accounts/nobody.near/trips", headers=as_account(app, "alice.near"))
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "ACCOUNT_NOT_FOUND"
