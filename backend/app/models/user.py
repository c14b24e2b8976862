"""User model: admins and salespeople."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base, generate_id

USER_ROLES = ("admin", "salesperson")
USER_STATUSES = ("active", "disabled")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="salesperson")
    status = Column(String, nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    preference = relationship(
        "NotificationPreference", back_populates="user", cascade="all, delete", uselist=False
    )
    notifications = relationship(
        "Notification", back_populates="salesperson", cascade="all, delete", foreign_keys="Notification.salesperson_id"
    )
