"""Reminder scheduling for renewals.

A renewal owned by a salesperson gets up to three reminders ahead of its due
date, one per enabled preference flag. Reminders are never scheduled in the
past, and editing a renewal replaces its reminder set wholesale.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from backend.app.core.errors import NotFoundError
from backend.app.core.time import add_months, utc_now
from backend.app.services.intervals import interval_months

logger = logging.getLogger(__name__)

# notification_type -> (preference flag, scheduled date for a given due date)
NOTIFICATION_OFFSETS = {
    "2_months": ("enable_2_months", lambda due: add_months(due, -2)),
    "1_month": ("enable_1_month", lambda due: add_months(due, -1)),
    "1_week": ("enable_1_week", lambda due: due - timedelta(days=7)),
}

DEFAULT_PREFERENCES = {"enable_2_months": True, "enable_1_month": True, "enable_1_week": True}


@dataclass(frozen=True)
class NotificationSpec:
    renewal_id: str
    salesperson_id: str
    notification_type: str
    scheduled_date: date
    status: str = "pending"

    def as_record(self) -> dict:
        return {
            "renewal_id": self.renewal_id,
            "salesperson_id": self.salesperson_id,
            "notification_type": self.notification_type,
            "scheduled_date": self.scheduled_date,
            "status": self.status,
        }


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def _is_after(scheduled_date: date, now) -> bool:
    # A reminder fires at the start of its day, so it is in the future only
    # when its day is later than today.
    return scheduled_date > _as_date(now)


class RenewalScheduler:
    def __init__(self, store, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def schedule_notifications(self, renewal, preferences, now=None) -> List[NotificationSpec]:
        """Compute the reminder specs for ``renewal`` without persisting anything."""
        salesperson_id = renewal.assigned_salesperson_id
        if not salesperson_id:
            return []
        now = now if now is not None else self.clock()
        due_date = _as_date(renewal.next_due_date)

        specs = []
        for notification_type, (flag, offset) in NOTIFICATION_OFFSETS.items():
            if not getattr(preferences, flag, True):
                continue
            scheduled_date = offset(due_date)
            if _is_after(scheduled_date, now):
                specs.append(
                    NotificationSpec(
                        renewal_id=renewal.id,
                        salesperson_id=salesperson_id,
                        notification_type=notification_type,
                        scheduled_date=scheduled_date,
                    )
                )
        return specs

    def resolve_preferences(self, user_id: str):
        prefs = self.store.get_notification_preference(user_id)
        if prefs is not None:
            return prefs
        return self.store.create_or_update_notification_preference({"user_id": user_id, **DEFAULT_PREFERENCES})

    def generate_for_renewal(self, renewal) -> list:
        """Persist the reminders for a freshly created or updated renewal."""
        interval_months(renewal.interval_type, renewal.custom_interval_months)
        if not renewal.assigned_salesperson_id:
            return []
        preferences = self.resolve_preferences(renewal.assigned_salesperson_id)
        created = [
            self.store.create_notification(spec.as_record())
            for spec in self.schedule_notifications(renewal, preferences)
        ]
        logger.info("Scheduled %d notification(s) for renewal %s", len(created), renewal.id)
        return created

    def reschedule_on_update(self, renewal_id: str, renewal: Optional[object] = None) -> list:
        """Drop every reminder of the renewal and rebuild them from its current state."""
        if renewal is None:
            renewal = self.store.get_renewal(renewal_id)
            if renewal is None:
                raise NotFoundError("Renewal not found")
        interval_months(renewal.interval_type, renewal.custom_interval_months)
        self.store.delete_notifications_by_renewal(renewal_id)
        return self.generate_for_renewal(renewal)
