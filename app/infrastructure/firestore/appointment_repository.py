from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError

from app.application.exceptions import PersistenceError
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.domain.entities.appointment import Appointment, AppointmentDraft, AppointmentStatus


class FirestoreAppointmentRepository(AppointmentRepositoryPort):
    def __init__(self, db) -> None:
        self._collection = db.collection("appointments")
        self._logger = logging.getLogger(__name__)

    def create(self, draft: AppointmentDraft) -> Appointment:
        doc_ref = self._collection.document()
        data = {
            "customerId": draft.customer_id,
            "customerName": draft.customer_name,
            "barberId": draft.provider_id,
            "barberName": draft.provider_name,
            "barberAddress": draft.provider_address,
            "barberPhone": draft.provider_phone,
            "serviceName": draft.service_name,
            "servicePrice": draft.service_price,
            "date": draft.date,
            "time": draft.time,
            "time24": draft.time_24h,
            "status": AppointmentStatus.booked.value,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
        try:
            doc_ref.set(data)
        except GoogleAPICallError as e:
            raise PersistenceError(f"Failed to create appointment: {e}") from e
        self._logger.info("Firestore appointment created", extra={"appointment_id": doc_ref.id})
        return Appointment.from_draft(doc_ref.id, draft, created_at=datetime.now(timezone.utc))

    def cancel(self, appointment_id: str, actor_user_id: str) -> None:
        try:
            self._collection.document(appointment_id).update(
                {
                    "status": AppointmentStatus.cancelled.value,
                    "cancelledAt": firestore.SERVER_TIMESTAMP,
                    "cancelledBy": actor_user_id,
                }
            )
        except GoogleAPICallError as e:
            raise PersistenceError(f"Failed to cancel appointment {appointment_id}: {e}") from e

    def fetch_recent(self, user_id: str, count: int) -> list[Appointment]:
        query = (
            self._collection.where(filter=firestore.FieldFilter("customerId", "==", user_id))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
            .limit(count)
        )
        return [_appointment_from_doc(snapshot.id, snapshot.to_dict() or {}) for snapshot in query.stream()]

    def fetch_most_recent(self, user_id: str) -> Appointment | None:
        recent = self.fetch_recent(user_id, 1)
        return recent[0] if recent else None


def _appointment_from_doc(appointment_id: str, data: dict[str, Any]) -> Appointment:
    status_raw = data.get("status") or AppointmentStatus.booked.value
    try:
        status = AppointmentStatus(status_raw)
    except ValueError:
        # older records used "confirmed"
        status = AppointmentStatus.booked
    created_at = data.get("createdAt")
    return Appointment(
        id=appointment_id,
        customer_id=data.get("customerId") or "",
        customer_name=data.get("customerName") or "",
        provider_id=data.get("barberId") or "",
        provider_name=data.get("barberName") or "",
        provider_address=data.get("barberAddress"),
        provider_phone=data.get("barberPhone"),
        service_name=data.get("serviceName") or "",
        service_price=data.get("servicePrice"),
        date=data.get("date") or "",
        time=data.get("time") or "",
        time_24h=data.get("time24") or "",
        created_at=created_at if isinstance(created_at, datetime) else None,
        status=status,
        cancelled_by=data.get("cancelledBy"),
    )
