from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AppointmentStatus(str, Enum):
    booked = "booked"
    cancelled = "cancelled"


@dataclass(frozen=True)
class AppointmentDraft:
    """Payload handed to the repository; the repository assigns the id."""

    customer_id: str
    customer_name: str
    provider_id: str
    provider_name: str
    provider_address: str | None
    provider_phone: str | None
    service_name: str
    service_price: float | None
    date: str  # YYYY-MM-DD
    time: str  # display form, "9:00 AM"
    time_24h: str  # "09:00"


@dataclass(frozen=True)
class Appointment:
    id: str
    customer_id: str
    customer_name: str
    provider_id: str
    provider_name: str
    provider_address: str | None
    provider_phone: str | None
    service_name: str
    service_price: float | None
    date: str
    time: str
    time_24h: str
    created_at: datetime | None = None
    status: AppointmentStatus = AppointmentStatus.booked
    cancelled_by: str | None = None

    @classmethod
    def from_draft(cls, appointment_id: str, draft: AppointmentDraft, created_at: datetime | None) -> Appointment:
        return cls(
            id=appointment_id,
            customer_id=draft.customer_id,
            customer_name=draft.customer_name,
            provider_id=draft.provider_id,
            provider_name=draft.provider_name,
            provider_address=draft.provider_address,
            provider_phone=draft.provider_phone,
            service_name=draft.service_name,
            service_price=draft.service_price,
            date=draft.date,
            time=draft.time,
            time_24h=draft.time_24h,
            created_at=created_at,
        )

    @property
    def calendar_title(self) -> str:
        return f"{self.service_name} with {self.provider_name}"
