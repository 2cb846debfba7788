from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.provider import Provider, Service, UserProfile
from app.domain.entities.slot import AvailabilitySlot


class DirectoryPort(ABC):
    """Read side of the document store: users, providers, services, stored slots."""

    @abstractmethod
    def fetch_user_profile(self, user_id: str) -> UserProfile | None:
        raise NotImplementedError

    @abstractmethod
    def fetch_providers_by_locality(self, locality_key: str) -> list[Provider]:
        raise NotImplementedError

    @abstractmethod
    def fetch_provider(self, provider_id: str) -> Provider | None:
        """Provider including its working-days/working-hours template."""
        raise NotImplementedError

    @abstractmethod
    def fetch_services_for_provider(self, provider_id: str) -> list[Service]:
        raise NotImplementedError

    @abstractmethod
    def fetch_provider_availability(self, provider_id: str) -> list[AvailabilitySlot]:
        """Precomputed bookable slots stored for the provider."""
        raise NotImplementedError
