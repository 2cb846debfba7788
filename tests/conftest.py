from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from app.application.ports.calendar import CalendarPort
from app.application.ports.notifications import NotificationPort
from app.application.use_cases.availability import AvailabilityResolver
from app.application.use_cases.book_appointment import BookAppointmentUseCase
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.cancellation import CancellationUseCase
from app.application.use_cases.handle_assistant_message import HandleAssistantMessageUseCase
from app.application.use_cases.repeat_booking import RepeatBookingUseCase
from app.domain.entities.appointment import Appointment
from app.domain.entities.provider import Provider, Service, UserProfile, WorkingHours
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.notifications.mock_notifications import MockNotifications
from app.infrastructure.store.memory_store import (
    MemoryAppointmentRepository,
    MemoryDirectoryStore,
    MemorySessionStore,
)

TZ = ZoneInfo("America/Los_Angeles")
# Wednesday morning
NOW = datetime(2026, 10, 14, 8, 0, tzinfo=TZ)
ZIP = "94103"


def fixed_clock() -> datetime:
    return NOW


class CountingNotifications(NotificationPort):
    def __init__(self, inner: MockNotifications, fail: bool = False) -> None:
        self.inner = inner
        self.fail = fail
        self.calls: dict[str, int] = {"request_permissions": 0, "schedule_reminder": 0, "cancel_reminders": 0}

    def request_permissions(self, user_id: str) -> bool:
        self.calls["request_permissions"] += 1
        return self.inner.request_permissions(user_id)

    def schedule_reminder(self, appointment: Appointment, user_id: str) -> list[str]:
        self.calls["schedule_reminder"] += 1
        if self.fail:
            raise RuntimeError("push service down")
        return self.inner.schedule_reminder(appointment, user_id)

    def cancel_reminders(self, appointment_id: str, user_id: str) -> int:
        self.calls["cancel_reminders"] += 1
        if self.fail:
            raise RuntimeError("push service down")
        return self.inner.cancel_reminders(appointment_id, user_id)


class CountingCalendar(CalendarPort):
    def __init__(self, inner: MockCalendar, fail: bool = False) -> None:
        self.inner = inner
        self.fail = fail
        self.calls: dict[str, int] = {"add_event": 0, "remove_event": 0}

    def add_event(self, appointment: Appointment) -> str:
        self.calls["add_event"] += 1
        if self.fail:
            raise RuntimeError("calendar permission denied")
        return self.inner.add_event(appointment)

    def remove_event(self, appointment: Appointment) -> int:
        self.calls["remove_event"] += 1
        if self.fail:
            raise RuntimeError("calendar permission denied")
        return self.inner.remove_event(appointment)


class CountingRepository(MemoryAppointmentRepository):
    def __init__(self) -> None:
        super().__init__(clock=fixed_clock)
        self.create_calls = 0
        self.cancel_calls = 0

    def create(self, draft):
        self.create_calls += 1
        return super().create(draft)

    def cancel(self, appointment_id, actor_user_id):
        self.cancel_calls += 1
        return super().cancel(appointment_id, actor_user_id)


@dataclass
class Harness:
    assistant: HandleAssistantMessageUseCase
    directory: MemoryDirectoryStore
    repository: CountingRepository
    notifications: CountingNotifications
    calendar: CountingCalendar
    sessions: MemorySessionStore


def build_directory() -> MemoryDirectoryStore:
    directory = MemoryDirectoryStore()
    directory.add_profile(UserProfile(id="cust_1", display_name="Sam", locality_key=ZIP))
    directory.add_profile(UserProfile(id="cust_far", display_name="Far Away", locality_key="00000"))
    directory.add_provider(
        ZIP,
        Provider(
            id="barber_marco",
            name="Marco's Cuts",
            address="120 Valencia St",
            working_days={"monday": True, "wednesday": True, "thursday": True, "friday": True},
            working_hours=WorkingHours(start="9:00 AM", end="5:00 PM", interval_minutes=30),
        ),
        [
            Service(id="svc_haircut", name="Haircut", price=30.0),
            Service(id="svc_beard", name="Beard Trim", price=15.0),
        ],
    )
    directory.add_provider(ZIP, Provider(id="barber_new", name="Fresh Chair"), [])
    return directory


def build_harness(notifications_fail: bool = False, calendar_fail: bool = False, permitted: bool = True) -> Harness:
    directory = build_directory()
    repository = CountingRepository()
    notifications = CountingNotifications(
        MockNotifications(timezone=TZ, clock=fixed_clock, permitted=permitted), fail=notifications_fail
    )
    calendar = CountingCalendar(MockCalendar(timezone=TZ), fail=calendar_fail)
    sessions = MemorySessionStore()
    resolver = AvailabilityResolver(directory)
    book_appointment = BookAppointmentUseCase(repository, notifications, calendar)
    assistant = HandleAssistantMessageUseCase(
        sessions=sessions,
        booking=BookingUseCase(directory, resolver, book_appointment, TZ, clock=fixed_clock),
        cancellation=CancellationUseCase(repository, notifications, calendar, recent_limit=3),
        repeat_booking=RepeatBookingUseCase(repository, resolver, book_appointment, TZ, clock=fixed_clock),
    )
    return Harness(assistant, directory, repository, notifications, calendar, sessions)


@pytest.fixture
def harness() -> Harness:
    return build_harness()


def say(harness: Harness, user_id: str, *texts: str) -> list[str]:
    """Send each text in turn; returns reply texts of the last one."""
    replies = []
    for text in texts:
        replies = harness.assistant.handle(user_id, text)
    return [reply.text for reply in replies]
