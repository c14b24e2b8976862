"""Renewal dashboard counters."""

from datetime import date

from sqlalchemy.orm import Session

from backend.app.core.time import add_months
from backend.app.models.customer import Customer
from backend.app.models.notification import Notification
from backend.app.models.renewal import Renewal

OPEN_STATUSES = ("pending", "contacted", "overdue")
UPCOMING_WINDOW_MONTHS = 2


def get_dashboard_stats(db: Session, *, today: date) -> dict:
    """Count renewals due soon or past due, plus the headline totals.

    A renewal due today is overdue; one due exactly two months out is still upcoming.
    """
    window_end = add_months(today, UPCOMING_WINDOW_MONTHS)
    open_renewals = db.query(Renewal).filter(Renewal.status.in_(OPEN_STATUSES))

    upcoming = open_renewals.filter(Renewal.next_due_date > today, Renewal.next_due_date <= window_end).count()
    overdue = open_renewals.filter(Renewal.next_due_date <= today).count()

    return {
        "as_of": today,
        "total_renewals": db.query(Renewal).count(),
        "total_customers": db.query(Customer).count(),
        "upcoming_renewals": upcoming,
        "overdue_renewals": overdue,
        "pending_notifications": db.query(Notification).filter(Notification.status == "pending").count(),
    }
