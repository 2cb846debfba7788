from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import httpx

from app.application.ports.calendar import CalendarPort, event_matches_appointment
from app.application.utils.time_normalizer import compose_appointment_datetime
from app.core.config import settings
from app.domain.entities.appointment import Appointment


class CalComCalendar(CalendarPort):
    def __init__(
        self,
        api_key: str | None = None,
        calendar_id: str | None = None,
        base_url: str | None = None,
        timezone: ZoneInfo | None = None,
        duration_minutes: int | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key or settings.CAL_COM_API_KEY
        self._calendar_id = calendar_id or settings.CAL_COM_CALENDAR_ID
        self._base_url = base_url or settings.CAL_COM_BASE_URL
        self._timezone = timezone or ZoneInfo(settings.BUSINESS_TIMEZONE)
        self._duration_minutes = duration_minutes or settings.APPOINTMENT_DURATION_MINUTES
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._api_key:
            raise ValueError("CAL_COM_API_KEY is required for Cal.com calendar")

    def add_event(self, appointment: Appointment) -> str:
        start = compose_appointment_datetime(appointment.date, appointment.time_24h or appointment.time, self._timezone)
        end = start + timedelta(minutes=self._duration_minutes)
        try:
            url = f"{self._base_url}/bookings"
            payload = {
                "eventTypeId": self._calendar_id,
                "startTime": start.isoformat(),
                "endTime": end.isoformat(),
                "title": appointment.calendar_title,
                "description": f"Appointment at {appointment.provider_address or appointment.provider_name}",
                "metadata": {"appointmentId": appointment.id},
            }

            response = self._client.post(url, json=payload, headers=self._headers(json_body=True))
            response.raise_for_status()

            data = response.json()
            event_id = data.get("id") or data.get("bookingId")
            if not event_id:
                raise ValueError("No event ID returned from Cal.com API")

            self._logger.info("Calendar event created", extra={"appointment_id": appointment.id, "reason": str(event_id)})
            return str(event_id)
        except Exception as e:
            self._logger.error("Error creating calendar event", extra={"appointment_id": appointment.id, "error": str(e)})
            raise

    def remove_event(self, appointment: Appointment) -> int:
        try:
            response = self._client.get(f"{self._base_url}/bookings", headers=self._headers())
            response.raise_for_status()
            bookings = response.json().get("bookings", [])
        except Exception as e:
            self._logger.error("Error listing calendar events", extra={"appointment_id": appointment.id, "error": str(e)})
            raise

        removed = 0
        for booking in bookings:
            try:
                start = datetime.fromisoformat(str(booking.get("startTime", "")).replace("Z", "+00:00"))
            except ValueError:
                continue
            if start.tzinfo is not None:
                start = start.astimezone(self._timezone)
            if not event_matches_appointment(booking.get("title"), start, appointment):
                continue
            try:
                response = self._client.delete(f"{self._base_url}/bookings/{booking['id']}", headers=self._headers())
                response.raise_for_status()
                removed += 1
            except Exception as e:
                self._logger.warning("Calendar delete failed", extra={"appointment_id": appointment.id, "error": str(e)})

        self._logger.info("Calendar events removed", extra={"appointment_id": appointment.id, "reason": f"removed={removed}"})
        return removed

    def _headers(self, json_body: bool = False) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers
