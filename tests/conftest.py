import os
import uuid
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_renewals.db")

import pytest
from fastapi.testclient import TestClient

from backend.app.core.security import get_password_hash
from backend.app.db.session import SessionLocal
from backend.app.main import app
from backend.app.models.user import User

RENEWAL_DEFAULTS = {
    "service_type": "Infrared Thermography Analysis",
    "custom_interval_months": None,
    "assigned_salesperson_id": None,
    "status": "pending",
    "notes": None,
}


class InMemoryStore:
    """Dict-backed stand-in for SqlAlchemyStore."""

    def __init__(self, customers=(), users=()):
        self.customers = list(customers)
        self.users = list(users)
        self.renewals = {}
        self.notifications = []
        self.preferences = {}
        self.snapshot_reads = 0

    @staticmethod
    def _record(data):
        return SimpleNamespace(id=str(uuid.uuid4()), **data)

    def create_customer(self, data):
        customer = self._record(data)
        self.customers.append(customer)
        return customer

    def find_customers_all(self):
        self.snapshot_reads += 1
        return list(self.customers)

    def find_users_all(self):
        return list(self.users)

    def get_renewal(self, renewal_id):
        return self.renewals.get(renewal_id)

    def create_renewal(self, data):
        renewal = self._record({**RENEWAL_DEFAULTS, **data})
        self.renewals[renewal.id] = renewal
        return renewal

    def update_renewal(self, renewal_id, data):
        renewal = self.renewals.get(renewal_id)
        if renewal is None:
            return None
        for field, value in data.items():
            setattr(renewal, field, value)
        return renewal

    def delete_renewal(self, renewal_id):
        self.notifications = [n for n in self.notifications if n.renewal_id != renewal_id]
        return self.renewals.pop(renewal_id, None) is not None

    def create_notification(self, data):
        notification = self._record(data)
        self.notifications.append(notification)
        return notification

    def delete_notifications_by_renewal(self, renewal_id):
        before = len(self.notifications)
        self.notifications = [n for n in self.notifications if n.renewal_id != renewal_id]
        return before - len(self.notifications)

    def get_notification_preference(self, user_id):
        return self.preferences.get(user_id)

    def create_or_update_notification_preference(self, data):
        pref = self.preferences.get(data["user_id"])
        if pref is None:
            pref = self._record(data)
            self.preferences[data["user_id"]] = pref
        else:
            for field, value in data.items():
                if value is not None:
                    setattr(pref, field, value)
        return pref


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def create_user():
    def _create(email, role="salesperson", password="password123", status="active", name="Test User"):
        db = SessionLocal()
        try:
            user = User(
                email=email,
                hashed_password=get_password_hash(password),
                name=name,
                role=role,
                status=status,
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            return user.id
        finally:
            db.close()

    return _create


@pytest.fixture
def auth_headers(client, create_user):
    def _login(email, role="salesperson", password="password123"):
        user_id = create_user(email, role=role, password=password)
        resp = client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200
        return user_id, {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login
