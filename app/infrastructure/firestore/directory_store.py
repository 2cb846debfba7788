from __future__ import annotations

from typing import Any

from firebase_admin import firestore

from app.application.ports.directory import DirectoryPort
from app.domain.entities.provider import Provider, Service, UserProfile, WorkingHours
from app.domain.entities.slot import AvailabilitySlot


class FirestoreDirectoryStore(DirectoryPort):
    """
    users/{id}                      customer or barber profile (role, zipcode)
    users/{id}/services/{id}        barber services
    users/{id}/availability/{id}    stored bookable slots {date, time}
    """

    def __init__(self, db) -> None:
        self._db = db

    def fetch_user_profile(self, user_id: str) -> UserProfile | None:
        snapshot = self._db.collection("users").document(user_id).get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return UserProfile(
            id=snapshot.id,
            display_name=data.get("name") or data.get("displayName") or "",
            locality_key=str(data.get("zipcode") or ""),
        )

    def fetch_providers_by_locality(self, locality_key: str) -> list[Provider]:
        query = (
            self._db.collection("users")
            .where(filter=firestore.FieldFilter("role", "==", "barber"))
            .where(filter=firestore.FieldFilter("zipcode", "==", locality_key))
        )
        return [_provider_from_doc(snapshot.id, snapshot.to_dict() or {}) for snapshot in query.stream()]

    def fetch_provider(self, provider_id: str) -> Provider | None:
        snapshot = self._db.collection("users").document(provider_id).get()
        if not snapshot.exists:
            return None
        return _provider_from_doc(snapshot.id, snapshot.to_dict() or {})

    def fetch_services_for_provider(self, provider_id: str) -> list[Service]:
        services_ref = self._db.collection("users").document(provider_id).collection("services")
        services: list[Service] = []
        for snapshot in services_ref.stream():
            data = snapshot.to_dict() or {}
            services.append(
                Service(
                    id=snapshot.id,
                    name=data.get("name") or "Service",
                    price=_to_float(data.get("price")),
                    duration_minutes=data.get("duration"),
                )
            )
        return services

    def fetch_provider_availability(self, provider_id: str) -> list[AvailabilitySlot]:
        availability_ref = self._db.collection("users").document(provider_id).collection("availability")
        slots: list[AvailabilitySlot] = []
        for snapshot in availability_ref.stream():
            data = snapshot.to_dict() or {}
            if data.get("date") and data.get("time"):
                slots.append(AvailabilitySlot(date=str(data["date"]), time=str(data["time"])))
        return slots


def _provider_from_doc(provider_id: str, data: dict[str, Any]) -> Provider:
    hours = data.get("workingHours") or {}
    working_hours = None
    if hours.get("start") and hours.get("end"):
        working_hours = WorkingHours(
            start=str(hours["start"]),
            end=str(hours["end"]),
            interval_minutes=int(hours.get("interval") or 30),
        )
    return Provider(
        id=provider_id,
        name=data.get("name") or "Barber",
        address=data.get("address"),
        phone=data.get("phone"),
        working_days={str(day).lower(): bool(flag) for day, flag in (data.get("workingDays") or {}).items()},
        working_hours=working_hours,
    )


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
