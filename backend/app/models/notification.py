"""Scheduled reminder notifications for renewals."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base, generate_id

NOTIFICATION_TYPES = ("2_months", "1_month", "1_week")
NOTIFICATION_STATUSES = ("pending", "sent")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    renewal_id = Column(String(36), ForeignKey("renewals.id", ondelete="CASCADE"), nullable=False, index=True)
    salesperson_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    notification_type = Column(String, nullable=False)
    scheduled_date = Column(Date, nullable=False)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    renewal = relationship("Renewal", back_populates="notifications")
    salesperson = relationship("User", back_populates="notifications", foreign_keys=[salesperson_id])
