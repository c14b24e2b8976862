"""Renewal model: a recurring service obligation for one customer."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base, generate_id

SERVICE_TYPES = (
    "Infrared Thermography Analysis",
    "Arc Flash Hazard Assessment",
    "VUMO",
    "Training",
    "Switchgear Maintenance (EPM)",
)
DEFAULT_SERVICE_TYPE = SERVICE_TYPES[0]
RENEWAL_STATUSES = ("pending", "contacted", "completed", "renewed", "overdue")


class Renewal(Base):
    __tablename__ = "renewals"

    id = Column(String(36), primary_key=True, default=generate_id)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    service_type = Column(String, nullable=False, default=DEFAULT_SERVICE_TYPE)
    site_code = Column(String(5), nullable=True)
    reference_id = Column(Integer, nullable=True)
    address = Column(String, nullable=True)
    last_service_date = Column(Date, nullable=False)
    next_due_date = Column(Date, nullable=False, index=True)
    interval_type = Column(String, nullable=False, default="annual")
    custom_interval_months = Column(Integer, nullable=True)
    status = Column(String, nullable=False, default="pending")
    notes = Column(Text, nullable=True)
    assigned_salesperson_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    salesforce_opportunity_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    customer = relationship("Customer", back_populates="renewals")
    attachments = relationship("Attachment", back_populates="renewal", cascade="all, delete")
    notifications = relationship("Notification", back_populates="renewal", cascade="all, delete")
