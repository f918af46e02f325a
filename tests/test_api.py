"""Tests for the REST endpoints with the store dependency overridden."""

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from components.core import init_db
from components.core.database import DatabaseManager
from components.core.init_db import get_store
from components.ledger.store import SqlLedgerStore
from restapi.router import create_app

from conftest import payment_row


@pytest.fixture
async def client(store):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def project_id(client):
    response = await client.post("/projects/", json={"name": "Living room", "owner_id": 2})
    assert response.status_code == 201
    return response.json()["id"]


class TestApi:
    """Tests for the HTTP surface of the ledger."""

    async def test_health_check(self, client):
        response = await client.get("/health_check/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["api_version"] == "v1"

    async def test_create_payment_returns_schedule(self, client, project_id):
        response = await client.post(
            f"/projects/{project_id}/payments",
            json={
                "description": "Flooring",
                "total_amount": "1000.00",
                "num_installments": 3,
                "first_due_date": "2026-01-15",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert [i["amount"] for i in body["installments"]] == ["333.33", "333.33", "333.34"]
        assert [i["due_date"] for i in body["installments"]] == ["2026-01-15", "2026-02-15", "2026-03-15"]

    async def test_invalid_payment_is_rejected(self, client, project_id):
        response = await client.post(
            f"/projects/{project_id}/payments",
            json={"description": "Flooring", "total_amount": "10", "num_installments": 0,
                  "first_due_date": "2026-01-15"},
        )

        assert response.status_code == 422

    async def test_schedule_is_created_once(self, client, project_id, store):
        payment = store.add("payments", **payment_row(project_id, "90.00", num_installments=2, owner_id=2))
        url = f"/payments/{payment['id']}/installments"

        first = await client.post(url, json={"first_due_date": "2026-04-30"})
        second = await client.post(url, json={"first_due_date": "2026-04-30"})
        listed = await client.get(url)

        assert first.status_code == 201
        assert second.status_code == 400
        assert [i["due_date"] for i in listed.json()] == ["2026-04-30", "2026-05-30"]

    async def test_pay_installment_and_summary(self, client, project_id):
        created = await client.post(
            f"/projects/{project_id}/payments",
            json={"description": "Door", "total_amount": "600.00", "num_installments": 2,
                  "first_due_date": "2026-01-10", "payment_method": "boleto"},
        )
        first_installment = created.json()["installments"][0]["id"]

        paid = await client.post(
            f"/installments/{first_installment}/pay",
            json={"paid_date": "2026-01-09", "payment_method_used": "pix"},
        )
        summary = await client.get(f"/projects/{project_id}/financial-summary")
        monthly = await client.get(f"/projects/{project_id}/monthly-payments")

        assert paid.status_code == 200
        assert paid.json()["status"] == "paid"
        body = summary.json()
        assert body["total_cost"] == "600.00"
        assert body["total_paid"] == "300.00"
        assert body["total_remaining"] == "300.00"
        assert body["percent_paid"] == "50.00"
        assert [m["month"] for m in monthly.json()] == ["2026-01", "2026-02"]

    async def test_item_payment_summary(self, client, project_id):
        item = await client.post(
            f"/projects/{project_id}/items",
            json={"name": "Window", "quantity": "2", "estimated_unit_price": "250.00"},
        )
        item_id = item.json()["id"]
        await client.post(
            f"/projects/{project_id}/payments",
            json={"description": "Window", "total_amount": "500.00", "item_id": item_id,
                  "first_due_date": "2026-02-01"},
        )

        summary = await client.get(f"/projects/{project_id}/items/payment-summary")
        payments = await client.get(f"/items/{item_id}/payments")

        [row] = summary.json()
        assert row["estimated_total"] == "500.00"
        assert row["payment_count"] == 1
        assert row["payment_status"] == "unpaid"
        assert len(payments.json()) == 1

    async def test_choose_quote(self, client, project_id):
        first = (await client.post(f"/projects/{project_id}/quotes",
                                   json={"supplier_id": 1, "total_price": "100.00"})).json()
        second = (await client.post(f"/projects/{project_id}/quotes",
                                    json={"supplier_id": 2, "total_price": "90.00"})).json()

        await client.post(f"/projects/{project_id}/quotes/{first['id']}/choose")
        response = await client.post(f"/projects/{project_id}/quotes/{second['id']}/choose")
        quotes = await client.get(f"/projects/{project_id}/quotes")

        assert response.status_code == 200
        assert response.json()["chosen"] is True
        assert {q["id"]: q["chosen"] for q in quotes.json()} == {first["id"]: False, second["id"]: True}

    async def test_choose_quote_of_other_project(self, client, project_id):
        other = (await client.post("/projects/", json={"name": "Attic", "owner_id": 2})).json()["id"]
        quote = (await client.post(f"/projects/{project_id}/quotes", json={"supplier_id": 1})).json()

        response = await client.post(f"/projects/{other}/quotes/{quote['id']}/choose")

        assert response.status_code == 400

    async def test_not_found(self, client):
        response = await client.get("/projects/999/financial-summary")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    async def test_store_failure(self, client, project_id, store):
        store.fail_on.add("query")

        response = await client.get(f"/projects/{project_id}/financial-summary")

        assert response.status_code == 503

    async def test_payment_without_schedule_is_recoverable(self, client, project_id, store):
        store.fail_on.add(("insert", "installments"))
        failed = await client.post(
            f"/projects/{project_id}/payments",
            json={"description": "Roof", "total_amount": "300.00", "num_installments": 3,
                  "first_due_date": "2026-05-05"},
        )
        [payment_id] = store.tables["payments"]
        store.fail_on.clear()

        recovered = await client.post(
            f"/payments/{payment_id}/installments", json={"first_due_date": "2026-05-05"}
        )

        assert failed.status_code == 503
        assert f"Payment {payment_id}" in failed.json()["detail"]
        assert recovered.status_code == 201
        assert [i["amount"] for i in recovered.json()] == ["100.00", "100.00", "100.00"]

    async def test_lifespan_creates_tables_and_disposes_engine(self, monkeypatch):
        manager = DatabaseManager(engine=create_async_engine("sqlite+aiosqlite://"))
        disposed = []
        dispose = manager.dispose

        async def tracking_dispose():
            disposed.append(True)
            await dispose()

        monkeypatch.setattr(manager, "dispose", tracking_dispose)
        monkeypatch.setattr(init_db, "get_db_manager", lambda: manager)
        app = create_app()

        async with app.router.lifespan_context(app):
            async with manager.get_db() as session:
                rows, total = await SqlLedgerStore(session).query("projects")

        assert (rows, total) == ([], 0)
        assert disposed == [True]
