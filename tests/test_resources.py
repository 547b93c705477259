"""
Tests for the owned-resource endpoints (incomes, expenses, assets, liabilities).

The four collections share one implementation, so most tests run once per
collection.
"""

import pytest

from finadvisor.models import Income

CASES = {
    "incomes": {
        "create": {"source": "Salary", "amount": 5000},
        "changed": ("amount", 5200.0),
        "required": "source",
    },
    "expenses": {
        "create": {"title": "Rent", "category": "Housing", "amount": 1500},
        "changed": ("amount", 1550.0),
        "required": "title",
    },
    "assets": {
        "create": {"name": "Car", "type": "Vehicle", "value": 20000},
        "changed": ("value", 18500.0),
        "required": "name",
    },
    "liabilities": {
        "create": {
            "name": "Visa",
            "type": "Credit Card",
            "amount": 1200,
            "interestRate": 19.9,
            "startDate": "2024-01-01T00:00:00Z",
            "dueDate": "2026-01-01T00:00:00Z",
        },
        "changed": ("amount", 900.0),
        "required": "dueDate",
    },
}

LABELS = {"incomes": "Income", "expenses": "Expense", "assets": "Asset", "liabilities": "Liability"}

collections = pytest.mark.parametrize("path", list(CASES))


def create(client, account, path, **overrides):
    body = {**CASES[path]["create"], **overrides}
    response = client.post(f"/api/{path}", json=body, headers=account.headers)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


@collections
class TestOwnedResources:

    def test_create_returns_envelope_with_owner(self, client, alice, path):
        response = client.post(f"/api/{path}", json=CASES[path]["create"], headers=alice.headers)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"]
        assert body["data"]["userId"] == alice.id
        assert body["data"]["createdAt"]
        assert body["data"]["updatedAt"]

    def test_list_only_returns_own_records(self, client, alice, bob, path):
        create(client, alice, path)
        create(client, alice, path)
        create(client, bob, path)

        response = client.get(f"/api/{path}", headers=alice.headers)
        assert response.status_code == 200
        records = response.json()["data"]
        assert len(records) == 2
        assert {r["userId"] for r in records} == {alice.id}

    def test_requires_authentication(self, client, path):
        response = client.get(f"/api/{path}")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authorized, no token"}

    def test_full_update(self, client, alice, path):
        record = create(client, alice, path)
        field, value = CASES[path]["changed"]
        body = {**CASES[path]["create"], field: value}

        response = client.put(f"/api/{path}/{record['id']}", json=body, headers=alice.headers)
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["data"][field] == value
        assert response.json()["data"]["id"] == record["id"]

    def test_partial_update_is_rejected(self, client, alice, path):
        record = create(client, alice, path)
        body = dict(CASES[path]["create"])
        del body[CASES[path]["required"]]

        response = client.put(f"/api/{path}/{record['id']}", json=body, headers=alice.headers)
        assert response.status_code == 400
        assert response.json()["success"] is False

        stored = client.get(f"/api/{path}", headers=alice.headers).json()["data"][0]
        assert stored == record

    def test_update_by_other_user_is_not_authorized(self, client, alice, bob, path):
        record = create(client, alice, path)
        field, value = CASES[path]["changed"]
        body = {**CASES[path]["create"], field: value}

        response = client.put(f"/api/{path}/{record['id']}", json=body, headers=bob.headers)
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authorized"}

        stored = client.get(f"/api/{path}", headers=alice.headers).json()["data"][0]
        assert stored == record

    def test_update_missing_record(self, client, alice, path):
        response = client.put(f"/api/{path}/does-not-exist", json=CASES[path]["create"], headers=alice.headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": f"{LABELS[path]} not found"}

    def test_delete(self, client, alice, path):
        record = create(client, alice, path)
        response = client.delete(f"/api/{path}/{record['id']}", headers=alice.headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": f"{LABELS[path]} removed"}
        assert client.get(f"/api/{path}", headers=alice.headers).json()["data"] == []

    def test_delete_by_other_user_is_not_authorized(self, client, alice, bob, path):
        record = create(client, alice, path)
        response = client.delete(f"/api/{path}/{record['id']}", headers=bob.headers)
        assert response.status_code == 401
        assert len(client.get(f"/api/{path}", headers=alice.headers).json()["data"]) == 1

    def test_delete_missing_record_is_always_not_found(self, client, alice, path):
        record = create(client, alice, path)
        client.delete(f"/api/{path}/{record['id']}", headers=alice.headers)
        for _ in range(3):
            response = client.delete(f"/api/{path}/{record['id']}", headers=alice.headers)
            assert response.status_code == 404
            assert response.json()["message"] == f"{LABELS[path]} not found"

    def test_real_token_with_unreachable_store_is_unauthorized(self, client, alice, path, unreachable_store):
        # alice's token is real, so identity resolution itself fails first
        response = client.get(f"/api/{path}", headers=alice.headers)
        assert response.status_code == 401

    def test_demo_identity_with_unreachable_store_gets_server_error(self, client, path, unreachable_store):
        token = client.post(
            "/api/users/login", json={"email": "user@example.com", "password": "password123"}
        ).json()["token"]
        response = client.get(f"/api/{path}", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error"}


class TestIncomeDefaults:

    def test_defaults_are_applied(self, client, alice):
        data = create(client, alice, "incomes")
        assert data["frequency"] == "monthly"
        assert data["category"] == "Employment"
        assert data["isRecurring"] is True
        assert data["date"]
        assert data["description"] is None

    def test_update_replaces_whole_document(self, client, alice, db):
        record = create(client, alice, "incomes", description="day job", category="Side Gig", frequency="weekly")
        response = client.put(
            f"/api/incomes/{record['id']}",
            json={"source": "Salary", "amount": 10},
            headers=alice.headers,
        )
        data = response.json()["data"]
        assert data["description"] is None
        assert data["category"] == "Employment"
        assert data["frequency"] == "monthly"

        stored = db.get(Income, record["id"])
        assert stored.amount == 10
        assert stored.user_id == alice.id

    def test_unknown_frequency_is_rejected(self, client, alice):
        response = client.post(
            "/api/incomes", json={"source": "Salary", "amount": 10, "frequency": "fortnightly"}, headers=alice.headers
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_negative_amount_is_rejected(self, client, alice):
        response = client.post("/api/incomes", json={"source": "Salary", "amount": -1}, headers=alice.headers)
        assert response.status_code == 400


class TestExpenseAssetLiabilityFields:

    def test_expense_defaults(self, client, alice):
        data = create(client, alice, "expenses", durationMonths=12)
        assert data["frequency"] == "monthly"
        assert data["isRecurring"] is True
        assert data["durationMonths"] == 12

    def test_asset_defaults(self, client, alice):
        data = create(client, alice, "assets")
        assert data["purchasePrice"] == 0
        assert data["isAppreciating"] is True
        assert data["appreciationRate"] == 0
        assert data["acquisitionDate"]

    def test_liability_type_must_be_known(self, client, alice):
        body = {**CASES["liabilities"]["create"], "type": "Payday Loan"}
        response = client.post("/api/liabilities", json=body, headers=alice.headers)
        assert response.status_code == 400

    def test_liability_rejects_negative_rates_and_payments(self, client, alice):
        for field in ("interestRate", "minimumPayment", "remainingPayments"):
            body = {**CASES["liabilities"]["create"], field: -1}
            response = client.post("/api/liabilities", json=body, headers=alice.headers)
            assert response.status_code == 400, field

    def test_liability_dates_are_stored_as_utc(self, client, alice):
        body = {**CASES["liabilities"]["create"], "startDate": "2024-01-01T02:00:00+02:00"}
        data = create(client, alice, "liabilities", **body)
        assert data["startDate"] == "2024-01-01T00:00:00Z"
        assert data["createdAt"].endswith("Z")
        assert data["isFixed"] is True


class TestRecordRemovedDuringUpdate:

    def test_update_answers_not_found_when_record_vanishes(self, db, monkeypatch):
        from finadvisor import crud, schemas
        from finadvisor.errors import NotFoundError

        service = crud.OwnedResourceService(crud.INCOMES)
        record = service.create(db, "owner-1", schemas.IncomeCreate(source="Salary", amount=10))

        # a concurrent delete commits before the updated row is read back
        monkeypatch.setattr(db, "get", lambda *args, **kwargs: None)
        with pytest.raises(NotFoundError) as excinfo:
            service.update(db, "owner-1", record.id, schemas.IncomeCreate(source="Salary", amount=20))
        assert excinfo.value.message == "Income not found"
