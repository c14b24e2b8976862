"""Dashboard schemas."""

from datetime import date

from pydantic import BaseModel


class DashboardStats(BaseModel):
    as_of: date
    total_renewals: int
    total_customers: int
    upcoming_renewals: int
    overdue_renewals: int
    pending_notifications: int
