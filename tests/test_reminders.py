"""
Tests for reminder planning before an appointment.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from app.application.utils.reminders import plan_reminders
from app.domain.entities.appointment import Appointment
from app.infrastructure.notifications.mock_notifications import MockNotifications

from conftest import TZ


def _appointment(date: str = "2026-10-16", time_24h: str = "09:00") -> Appointment:
    return Appointment(
        id="appt_9",
        customer_id="cust_1",
        customer_name="Sam",
        provider_id="barber_marco",
        provider_name="Marco's Cuts",
        provider_address=None,
        provider_phone=None,
        service_name="Haircut",
        service_price=30.0,
        date=date,
        time="9:00 AM",
        time_24h=time_24h,
    )


def test_plans_day_before_and_hour_before():
    now = datetime(2026, 10, 14, 8, 0, tzinfo=TZ)
    planned = plan_reminders(_appointment(), now, [1440, 60], TZ)

    assert [p.reminder_id for p in planned] == ["reminder_24h_appt_9", "reminder_1h_appt_9"]
    assert planned[0].send_at == datetime(2026, 10, 15, 9, 0, tzinfo=TZ)
    assert planned[0].title == "Appointment Reminder"
    assert planned[1].send_at == datetime(2026, 10, 16, 8, 0, tzinfo=TZ)
    assert planned[1].title == "Upcoming Appointment"
    assert "Haircut" in planned[1].body and "Marco's Cuts" in planned[1].body


def test_past_offsets_are_skipped():
    """Booked the same morning: only the 1h reminder is still ahead."""
    now = datetime(2026, 10, 16, 7, 0, tzinfo=TZ)
    planned = plan_reminders(_appointment(), now, [1440, 60], TZ)
    assert [p.reminder_id for p in planned] == ["reminder_1h_appt_9"]


def test_odd_offsets_are_labelled_in_minutes():
    now = datetime(2026, 10, 14, 8, 0, tzinfo=TZ)
    planned = plan_reminders(_appointment(), now, [90], TZ)
    assert planned[0].reminder_id == "reminder_90m_appt_9"


def test_mock_notifications_cancel_only_that_appointment():
    notifications = MockNotifications(timezone=TZ, clock=lambda: datetime(2026, 10, 14, 8, 0, tzinfo=TZ))
    notifications.schedule_reminder(_appointment(), "cust_1")
    other = replace(_appointment(), id="appt_10")
    notifications.schedule_reminder(other, "cust_1")

    assert notifications.cancel_reminders("appt_9", "cust_1") == 2
    assert notifications.cancel_reminders("appt_9", "cust_1") == 0
    statuses = {rid: status for rid, (_u, _r, status) in notifications.reminders.items()}
    assert statuses["reminder_24h_appt_10"] == "scheduled"
    assert statuses["reminder_24h_appt_9"] == "cancelled"
