from datetime import UTC, date, datetime
from types import SimpleNamespace

import pytest

from backend.app.core.errors import NotFoundError, ValidationError
from backend.app.services.scheduler import RenewalScheduler

ALL_ON = SimpleNamespace(enable_2_months=True, enable_1_month=True, enable_1_week=True)


def _clock(year, month, day):
    return lambda: datetime(year, month, day, 9, 30, tzinfo=UTC)


def _renewal(store, **overrides):
    data = {
        "customer_id": "customer-1",
        "last_service_date": date(2024, 1, 15),
        "next_due_date": date(2025, 1, 15),
        "interval_type": "annual",
        "assigned_salesperson_id": "sales-1",
    }
    data.update(overrides)
    return store.create_renewal(data)


def _types(items):
    return {item.notification_type: item.scheduled_date for item in items}


def test_all_three_reminders_when_due_date_is_far_away(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    renewal = _renewal(store)
    specs = scheduler.schedule_notifications(renewal, ALL_ON)
    assert _types(specs) == {
        "2_months": date(2024, 11, 15),
        "1_month": date(2024, 12, 15),
        "1_week": date(2025, 1, 8),
    }
    assert {s.renewal_id for s in specs} == {renewal.id}
    assert {s.salesperson_id for s in specs} == {"sales-1"}
    assert all(s.status == "pending" for s in specs)


def test_only_future_reminders_are_emitted(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 12, 20))
    specs = scheduler.schedule_notifications(_renewal(store), ALL_ON)
    assert _types(specs) == {"1_week": date(2025, 1, 8)}


def test_reminder_due_today_is_not_scheduled(store):
    scheduler = RenewalScheduler(store)
    specs = scheduler.schedule_notifications(_renewal(store), ALL_ON, now=datetime(2025, 1, 8, 0, 0, tzinfo=UTC))
    assert specs == []


@pytest.mark.parametrize("now", [date(2024, 1, 1), date(2024, 11, 15), date(2024, 12, 31), date(2025, 3, 1)])
def test_never_schedules_in_the_past(store, now):
    scheduler = RenewalScheduler(store)
    for spec in scheduler.schedule_notifications(_renewal(store), ALL_ON, now=now):
        assert spec.scheduled_date > now


def test_disabled_flags_are_skipped(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    prefs = SimpleNamespace(enable_2_months=False, enable_1_month=True, enable_1_week=False)
    specs = scheduler.schedule_notifications(_renewal(store), prefs)
    assert list(_types(specs)) == ["1_month"]


def test_unassigned_renewal_gets_no_reminders(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    renewal = _renewal(store, assigned_salesperson_id=None)
    assert scheduler.schedule_notifications(renewal, ALL_ON) == []
    assert scheduler.generate_for_renewal(renewal) == []
    assert store.notifications == []
    assert store.preferences == {}


def test_resolve_preferences_creates_defaults_once(store):
    scheduler = RenewalScheduler(store)
    prefs = scheduler.resolve_preferences("sales-1")
    assert (prefs.enable_2_months, prefs.enable_1_month, prefs.enable_1_week) == (True, True, True)
    assert scheduler.resolve_preferences("sales-1") is prefs
    assert len(store.preferences) == 1


def test_resolve_preferences_returns_existing_record(store):
    existing = store.create_or_update_notification_preference(
        {"user_id": "sales-1", "enable_2_months": False, "enable_1_month": True, "enable_1_week": True}
    )
    assert RenewalScheduler(store).resolve_preferences("sales-1") is existing


def test_generate_for_renewal_persists_using_owner_preferences(store):
    store.create_or_update_notification_preference(
        {"user_id": "sales-1", "enable_2_months": True, "enable_1_month": False, "enable_1_week": True}
    )
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    renewal = _renewal(store)
    created = scheduler.generate_for_renewal(renewal)
    assert _types(created) == {"2_months": date(2024, 11, 15), "1_week": date(2025, 1, 8)}
    assert store.notifications == created


def test_reschedule_drops_reminders_for_the_old_due_date(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    renewal = _renewal(store)
    scheduler.generate_for_renewal(renewal)

    updated = store.update_renewal(renewal.id, {"next_due_date": date(2024, 8, 1)})
    scheduler.reschedule_on_update(renewal.id, updated)

    assert _types(store.notifications) == {"1_month": date(2024, 7, 1), "1_week": date(2024, 7, 25)}


def test_reschedule_follows_new_owner(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    renewal = _renewal(store)
    scheduler.generate_for_renewal(renewal)
    store.create_or_update_notification_preference(
        {"user_id": "sales-2", "enable_2_months": False, "enable_1_month": False, "enable_1_week": True}
    )

    updated = store.update_renewal(renewal.id, {"assigned_salesperson_id": "sales-2"})
    scheduler.reschedule_on_update(renewal.id, updated)

    assert [(n.salesperson_id, n.notification_type) for n in store.notifications] == [("sales-2", "1_week")]


def test_reschedule_twice_gives_the_same_set(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    renewal = _renewal(store)
    scheduler.reschedule_on_update(renewal.id, renewal)
    first = sorted((n.notification_type, n.scheduled_date) for n in store.notifications)
    scheduler.reschedule_on_update(renewal.id, renewal)
    second = sorted((n.notification_type, n.scheduled_date) for n in store.notifications)
    assert first == second
    assert len(store.notifications) == 3


def test_reschedule_loads_renewal_when_not_given(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    renewal = _renewal(store)
    scheduler.reschedule_on_update(renewal.id)
    assert len(store.notifications) == 3


def test_reschedule_unknown_renewal_raises(store):
    with pytest.raises(NotFoundError):
        RenewalScheduler(store).reschedule_on_update("missing")


def test_invalid_custom_interval_fails_before_any_write(store):
    scheduler = RenewalScheduler(store, clock=_clock(2024, 6, 1))
    renewal = _renewal(store)
    scheduler.generate_for_renewal(renewal)
    broken = store.update_renewal(renewal.id, {"interval_type": "custom", "custom_interval_months": None})

    with pytest.raises(ValidationError):
        scheduler.reschedule_on_update(renewal.id, broken)
    assert len(store.notifications) == 3
