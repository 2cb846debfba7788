from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.infrastructure.llm.mock_llm import MockLLM
from app.infrastructure.llm.openai_llm import OpenAILLM
from app.infrastructure.store.demo_data import build_demo_directory
from app.infrastructure.store.memory_store import MemoryAppointmentRepository, MemorySessionStore
from app.infrastructure.calendar.cal_com_client import CalComCalendar
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.firestore.appointment_repository import FirestoreAppointmentRepository
from app.infrastructure.firestore.client import get_firestore_client
from app.infrastructure.firestore.directory_store import FirestoreDirectoryStore
from app.infrastructure.notifications.firestore_reminders import FirestoreReminderScheduler
from app.infrastructure.notifications.mock_notifications import MockNotifications
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.ports.calendar import CalendarPort
from app.application.ports.directory import DirectoryPort
from app.application.ports.llm import LLMPort
from app.application.ports.notifications import NotificationPort
from app.application.use_cases.availability import AvailabilityResolver
from app.application.use_cases.book_appointment import BookAppointmentUseCase
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.cancellation import CancellationUseCase
from app.application.use_cases.handle_assistant_message import HandleAssistantMessageUseCase
from app.application.use_cases.repeat_booking import RepeatBookingUseCase
from app.application.use_cases.suggest_time import SuggestTimeUseCase


logger = logging.getLogger(__name__)


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def _use_firestore() -> bool:
    return not _is_local() and bool(settings.FIREBASE_CREDENTIALS_PATH or settings.FIREBASE_PROJECT_ID)


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_firestore_db():
    return get_firestore_client()


@lru_cache
def get_llm() -> LLMPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAILLM()
    return MockLLM()


@lru_cache
def get_directory() -> DirectoryPort:
    if _use_firestore():
        logger.info("Using Firestore directory")
        return FirestoreDirectoryStore(get_firestore_db())
    logger.info("Using demo directory (ENV=%s)", settings.ENV)
    return build_demo_directory()


@lru_cache
def get_appointment_repository() -> AppointmentRepositoryPort:
    if _use_firestore():
        return FirestoreAppointmentRepository(get_firestore_db())
    return MemoryAppointmentRepository()


@lru_cache
def get_notifications() -> NotificationPort:
    if _use_firestore():
        return FirestoreReminderScheduler(
            get_firestore_db(),
            timezone=get_timezone(),
            offsets_minutes=settings.REMINDER_OFFSETS_MINUTES,
        )
    return MockNotifications(timezone=get_timezone(), offsets_minutes=settings.REMINDER_OFFSETS_MINUTES)


@lru_cache
def get_calendar() -> CalendarPort:
    if not settings.CAL_COM_API_KEY or _is_local():
        return MockCalendar(timezone=get_timezone(), duration_minutes=settings.APPOINTMENT_DURATION_MINUTES)
    return CalComCalendar()


@lru_cache
def get_session_store() -> MemorySessionStore:
    return MemorySessionStore()


def get_availability_resolver() -> AvailabilityResolver:
    return AvailabilityResolver(
        directory=get_directory(),
        source=settings.AVAILABILITY_SOURCE,
        window_days=settings.AVAILABILITY_WINDOW_DAYS,
        default_interval=settings.DEFAULT_SLOT_INTERVAL_MINUTES,
    )


def get_suggest_time_use_case() -> SuggestTimeUseCase | None:
    if not settings.SUGGESTIONS_ENABLED:
        return None
    return SuggestTimeUseCase(llm=get_llm(), enabled=True)


def get_book_appointment_use_case() -> BookAppointmentUseCase:
    return BookAppointmentUseCase(
        repository=get_appointment_repository(),
        notifications=get_notifications(),
        calendar=get_calendar(),
    )


@lru_cache
def get_handle_assistant_message_use_case() -> HandleAssistantMessageUseCase:
    tz = get_timezone()
    resolver = get_availability_resolver()
    book_appointment = get_book_appointment_use_case()
    suggest_time = get_suggest_time_use_case()
    return HandleAssistantMessageUseCase(
        sessions=get_session_store(),
        booking=BookingUseCase(
            directory=get_directory(),
            resolver=resolver,
            book_appointment=book_appointment,
            timezone=tz,
            suggest_time=suggest_time,
        ),
        cancellation=CancellationUseCase(
            repository=get_appointment_repository(),
            notifications=get_notifications(),
            calendar=get_calendar(),
            recent_limit=settings.RECENT_APPOINTMENTS_LIMIT,
        ),
        repeat_booking=RepeatBookingUseCase(
            repository=get_appointment_repository(),
            resolver=resolver,
            book_appointment=book_appointment,
            timezone=tz,
            suggest_time=suggest_time,
        ),
    )
