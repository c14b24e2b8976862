"""Per-salesperson reminder preferences."""

from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base, generate_id


class NotificationPreference(Base):
    __tablename__ = "notification_preferences"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    enable_2_months = Column(Boolean, nullable=False, default=True)
    enable_1_month = Column(Boolean, nullable=False, default=True)
    enable_1_week = Column(Boolean, nullable=False, default=True)

    user = relationship("User", back_populates="preference")
