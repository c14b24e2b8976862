from datetime import date, timedelta

import pytest

from backend.app.core.time import add_months, utc_now
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.services.dashboard_service import get_dashboard_stats
from backend.app.services.store import SqlAlchemyStore


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _create(client, headers, customer_id, due: date, status="pending", salesperson_id=None):
    resp = client.post(
        "/renewals",
        json={
            "customer_id": customer_id,
            "last_service_date": add_months(due, -12).isoformat(),
            "next_due_date": due.isoformat(),
            "status": status,
            "assigned_salesperson_id": salesperson_id,
        },
        headers=headers,
    )
    assert resp.status_code == 201


def test_dashboard_requires_auth(client):
    assert client.get("/dashboard/stats").status_code == 401


def test_dashboard_counts(client, auth_headers):
    sales_id, headers = auth_headers("sales@example.com")
    today = utc_now().date()
    customer_id = client.post("/customers", json={"company_name": "Acme"}, headers=headers).json()["id"]
    client.post("/customers", json={"company_name": "Globex"}, headers=headers)

    _create(client, headers, customer_id, today + timedelta(days=20))
    _create(client, headers, customer_id, today + timedelta(days=30), status="contacted")
    _create(client, headers, customer_id, today + timedelta(days=30), status="completed")
    _create(client, headers, customer_id, today - timedelta(days=3))
    _create(client, headers, customer_id, today - timedelta(days=3), status="renewed")
    _create(client, headers, customer_id, add_months(today, 6), salesperson_id=sales_id)

    resp = client.get("/dashboard/stats", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_renewals"] == 6
    assert data["total_customers"] == 2
    assert data["upcoming_renewals"] == 2
    assert data["overdue_renewals"] == 1
    assert data["pending_notifications"] == 3


def test_dashboard_window_edges():
    db = SessionLocal()
    try:
        stats = get_dashboard_stats(db, today=date(2024, 1, 31))
    finally:
        db.close()
    assert stats["as_of"] == date(2024, 1, 31)
    assert stats["upcoming_renewals"] == 0
    assert stats["total_renewals"] == 0


def _store_renewal(store, customer_id, due, status="pending"):
    store.create_renewal(
        {
            "customer_id": customer_id,
            "last_service_date": add_months(due, -12),
            "next_due_date": due,
            "interval_type": "annual",
            "status": status,
        }
    )


def test_dashboard_boundary_dates():
    today = date(2024, 1, 31)
    db = SessionLocal()
    try:
        store = SqlAlchemyStore(db)
        customer = store.create_customer({"company_name": "Acme", "contact_name": "Jane"})
        _store_renewal(store, customer.id, today)
        _store_renewal(store, customer.id, date(2024, 3, 31))
        _store_renewal(store, customer.id, date(2024, 4, 1))
        _store_renewal(store, customer.id, today, status="completed")

        stats = get_dashboard_stats(db, today=today)
    finally:
        db.close()

    assert stats["overdue_renewals"] == 1
    assert stats["upcoming_renewals"] == 1
    assert stats["total_renewals"] == 4


def test_renewal_due_today_is_overdue_on_the_endpoint(client, auth_headers):
    _, headers = auth_headers("sales@example.com")
    today = utc_now().date()
    customer_id = client.post("/customers", json={"company_name": "Acme"}, headers=headers).json()["id"]
    _create(client, headers, customer_id, today)
    _create(client, headers, customer_id, add_months(today, 2))

    data = client.get("/dashboard/stats", headers=headers).json()
    assert data["overdue_renewals"] == 1
    assert data["upcoming_renewals"] == 1
