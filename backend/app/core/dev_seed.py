import logging
import os

from sqlalchemy.orm import Session

from backend.app.core.security import get_password_hash
from backend.app.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_DEV_USERS = [
    {"email": "admin@example.com", "password": "admin123", "name": "Admin User", "role": "admin"},
    {"email": "sales@example.com", "password": "sales123", "name": "Sample Salesperson", "role": "salesperson"},
]


def ensure_default_dev_users(db: Session) -> None:
    """Seed one admin and one salesperson for local development. No-op under pytest."""
    if os.getenv("PYTEST_CURRENT_TEST"):
        return

    created = False
    for account in DEFAULT_DEV_USERS:
        existing = db.query(User).filter(User.email == account["email"]).first()
        if existing:
            continue

        user = User(
            email=account["email"],
            hashed_password=get_password_hash(account["password"]),
            name=account["name"],
            role=account["role"],
            status="active",
        )
        db.add(user)
        created = True
        logger.info("Seeded %s user %s", account["role"], account["email"])

    if created:
        db.commit()
