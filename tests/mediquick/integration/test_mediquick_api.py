"""Integration tests for the MediQuick HTTP API."""

import json

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from mediquick.api import ROUTERS, register_error_handlers
from mediquick.domain import mediquick


@pytest.fixture()
def client():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with mediquick.domain_context():
            return await call_next(request)

    for router in ROUTERS:
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)


def _as(user_id):
    return {"X-User-Id": user_id}


@pytest.fixture()
def catalogue(client, admin):
    response = client.post(
        "/products",
        json={"name": "Paracetamol 500mg", "price": 10.0, "serial_number": "PX-500", "coins_assigned": 5},
        headers=_as(admin),
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestProfiles:
    def test_select_role_and_read_profile(self, client):
        response = client.post("/profiles/role", json={"role": "customer", "name": "Ayesha"}, headers=_as("cust-7"))
        assert response.status_code == 201

        profile = client.get("/profiles/cust-7").json()
        assert profile["role"] == "customer"
        assert profile["coins"] is None

    def test_admin_approves_salesperson(self, client, admin):
        response = client.post(
            "/profiles/salespersons",
            json={"user_id": "sp-7", "name": "Usman", "cnic": "35202-1"},
            headers=_as(admin),
        )
        assert response.status_code == 201
        assert client.get("/profiles/sp-7").json()["coins"] == 0

    def test_non_admin_approval_is_forbidden(self, client, customer):
        response = client.post(
            "/profiles/institutions",
            json={"user_id": "inst-7", "name": "Clinic"},
            headers=_as(customer),
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Unauthorized"

    def test_unknown_profile_is_404(self, client):
        response = client.get("/profiles/ghost")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_list_institutions(self, client, institution):
        response = client.get("/profiles/institutions")
        assert [p["user_id"] for p in response.json()] == [institution]


class TestOrderJourney:
    def test_order_from_placement_to_coins(self, client, catalogue, customer, salesperson):
        order_id = client.post("/orders", json={"product_id": catalogue}, headers=_as(customer)).json()["id"]

        pickup = client.post(f"/orders/{order_id}/tokens", json={"salesperson_id": salesperson}, headers=_as(customer))
        assert pickup.status_code == 200

        claimed = client.post("/handoffs/claim", json={"token": pickup.json()["token"]}, headers=_as(salesperson))
        assert claimed.status_code == 200
        assert claimed.json() == {"record_kind": "order", "record_id": order_id, "status": "in_delivery"}

        delivery = client.post(f"/orders/{order_id}/tokens", json={}, headers=_as(salesperson)).json()["token"]
        confirmed = client.post("/handoffs/confirm", json={"token": delivery}, headers=_as(customer))
        assert confirmed.json()["status"] == "delivered"

        assert client.get(f"/profiles/{salesperson}").json()["coins"] == 5
        history = client.get("/ledger/history", headers=_as(salesperson)).json()
        assert [(t["type"], t["amount"], t["order_id"]) for t in history] == [("coin_transfer", 5, order_id)]

        orders = client.get("/orders", headers=_as(customer)).json()
        assert orders[0]["status"] == "delivered"
        assert orders[0]["qr_content"] == delivery

    def test_replayed_confirmation_is_invalid_state(self, client, catalogue, customer, salesperson):
        order_id = client.post("/orders", json={"product_id": catalogue}, headers=_as(customer)).json()["id"]
        pickup = client.post(f"/orders/{order_id}/tokens", json={"salesperson_id": salesperson}, headers=_as(customer))
        client.post("/handoffs/claim", json={"token": pickup.json()["token"]}, headers=_as(salesperson))
        delivery = client.post(f"/orders/{order_id}/tokens", json={}, headers=_as(salesperson)).json()["token"]
        client.post("/handoffs/confirm", json={"token": delivery}, headers=_as(customer))

        replay = client.post("/handoffs/confirm", json={"token": delivery}, headers=_as(customer))
        assert replay.status_code == 409
        assert replay.json()["error"] == "InvalidState"

    def test_second_salesperson_gets_already_assigned(self, client, catalogue, customer, salesperson, other_salesperson):
        order_id = client.post("/orders", json={"product_id": catalogue}, headers=_as(customer)).json()["id"]
        pickup = client.post(f"/orders/{order_id}/tokens", json={"salesperson_id": salesperson}, headers=_as(customer))
        client.post("/handoffs/claim", json={"token": pickup.json()["token"]}, headers=_as(salesperson))

        late = json.dumps({"orderId": order_id, "salespersonId": other_salesperson})
        response = client.post("/handoffs/claim", json={"token": late}, headers=_as(other_salesperson))
        assert response.status_code == 409
        assert response.json()["error"] == "AlreadyAssigned"

    def test_malformed_token_is_bad_request(self, client, salesperson):
        response = client.post("/handoffs/claim", json={"token": "not-json"}, headers=_as(salesperson))
        assert response.status_code == 400
        assert response.json()["error"] == "MalformedToken"
        assert "token" in response.json()["messages"]

    def test_doctor_purchase(self, client, catalogue, doctor):
        response = client.post("/orders/doctor-purchase", json={"product_id": catalogue}, headers=_as(doctor))
        assert response.status_code == 201
        orders = client.get("/orders", headers=_as(doctor)).json()
        assert orders[0]["status"] == "purchased_by_doctor"


class TestCheckupJourney:
    def test_checkup_from_request_to_reward(self, client, customer, doctor, salesperson):
        appointment_id = client.post(
            "/appointments",
            json={"doctor_id": doctor, "reason": "Chest pain"},
            headers=_as(customer),
        ).json()["id"]

        accepted = client.put(f"/appointments/{appointment_id}/accept", headers=_as(doctor)).json()
        assert accepted["status"] == "accepted"

        claimed = client.post("/handoffs/claim", json={"token": accepted["token"]}, headers=_as(salesperson))
        assert claimed.json()["status"] == "assigned_to_salesperson"

        completion = client.post(f"/appointments/{appointment_id}/tokens", headers=_as(salesperson)).json()["token"]
        confirmed = client.post("/handoffs/confirm", json={"token": completion}, headers=_as(customer))
        assert confirmed.json() == {"record_kind": "appointment", "record_id": appointment_id, "status": "completed"}

        assert client.get(f"/profiles/{salesperson}").json()["coins"] == 50
        work = client.get("/appointments", headers=_as(salesperson)).json()
        assert work[0]["payment_confirmed"] is True

    def test_wrong_doctor_cannot_accept(self, client, customer, doctor):
        client.post("/profiles/role", json={"role": "doctor"}, headers=_as("doc-2"))
        appointment_id = client.post(
            "/appointments",
            json={"doctor_id": doctor, "reason": "Fever"},
            headers=_as(customer),
        ).json()["id"]

        response = client.put(f"/appointments/{appointment_id}/accept", headers=_as("doc-2"))
        assert response.status_code == 403

    def test_command_field_violation_is_bad_request(self, client, customer):
        response = client.post("/appointments", json={"doctor_id": "", "reason": "Fever"}, headers=_as(customer))
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"
        assert "doctor_id" in response.json()["messages"]


class TestLedger:
    def test_donation_and_reconciliation(self, client, customer, institution):
        response = client.post("/donations", json={"institution_id": institution, "amount": 20}, headers=_as(customer))
        assert response.status_code == 201

        assert client.get(f"/profiles/{institution}").json()["coins"] == 20
        report = client.get("/ledger/reconciliation", headers=_as(institution)).json()
        assert report == {"user_id": institution, "balance": 20, "ledger_total": 20, "balanced": True}

        history = client.get("/ledger/history", params={"type": "donation"}, headers=_as(institution)).json()
        assert [t["amount"] for t in history] == [20]

    def test_invalid_donation_amount(self, client, customer, institution):
        response = client.post("/donations", json={"institution_id": institution, "amount": 0}, headers=_as(customer))
        assert response.status_code == 400
        assert "amount" in response.json()["messages"]

    def test_unknown_history_type(self, client, institution):
        response = client.get("/ledger/history", params={"type": "refund"}, headers=_as(institution))
        assert response.status_code == 400

    def test_missing_user_header(self, client):
        assert client.get("/ledger/history").status_code == 422
