"""SQLAlchemy-backed persistence collaborator for the scheduler and import services."""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.time import utc_now
from backend.app.models.customer import Customer
from backend.app.models.notification import Notification
from backend.app.models.notification_preference import NotificationPreference
from backend.app.models.renewal import Renewal
from backend.app.models.user import User


class SqlAlchemyStore:
    """Plain CRUD over the ORM session. Every write commits immediately."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _save(self, obj):
        self.db.add(obj)
        self._commit()
        self.db.refresh(obj)
        return obj

    # Customers
    def create_customer(self, data: Dict[str, Any]) -> Customer:
        return self._save(Customer(**data))

    def find_customers_all(self) -> List[Customer]:
        return self.db.query(Customer).order_by(Customer.created_at.desc()).all()

    # Users
    def find_users_all(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at.desc()).all()

    # Renewals
    def get_renewal(self, renewal_id: str) -> Optional[Renewal]:
        return self.db.query(Renewal).filter(Renewal.id == renewal_id).first()

    def create_renewal(self, data: Dict[str, Any]) -> Renewal:
        return self._save(Renewal(**data))

    def update_renewal(self, renewal_id: str, data: Dict[str, Any]) -> Optional[Renewal]:
        renewal = self.get_renewal(renewal_id)
        if renewal is None:
            return None
        for field, value in data.items():
            setattr(renewal, field, value)
        renewal.updated_at = utc_now()
        return self._save(renewal)

    def delete_renewal(self, renewal_id: str) -> bool:
        renewal = self.get_renewal(renewal_id)
        if renewal is None:
            return False
        self.db.delete(renewal)
        self._commit()
        return True

    # Notifications
    def create_notification(self, data: Dict[str, Any]) -> Notification:
        return self._save(Notification(**data))

    def delete_notifications_by_renewal(self, renewal_id: str) -> int:
        deleted = (
            self.db.query(Notification)
            .filter(Notification.renewal_id == renewal_id)
            .delete(synchronize_session=False)
        )
        self._commit()
        return deleted

    # Notification preferences
    def get_notification_preference(self, user_id: str) -> Optional[NotificationPreference]:
        return self.db.query(NotificationPreference).filter(NotificationPreference.user_id == user_id).first()

    def create_or_update_notification_preference(self, data: Dict[str, Any]) -> NotificationPreference:
        pref = self.get_notification_preference(data["user_id"])
        if pref is None:
            return self._save(NotificationPreference(**data))
        for field, value in data.items():
            if value is not None:
                setattr(pref, field, value)
        return self._save(pref)
