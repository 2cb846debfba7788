from __future__ import annotations

from app.domain.entities.provider import Provider, Service, UserProfile, WorkingHours
from app.infrastructure.store.memory_store import MemoryDirectoryStore

DEMO_LOCALITY = "94103"

_WEEKDAYS_ON = {
    "monday": True,
    "tuesday": True,
    "wednesday": True,
    "thursday": True,
    "friday": True,
    "saturday": True,
    "sunday": False,
}

DEMO_PROVIDERS: list[tuple[Provider, list[Service]]] = [
    (
        Provider(
            id="barber_marco",
            name="Marco's Cuts",
            address="120 Valencia St",
            phone="+1 415 555 0101",
            working_days=_WEEKDAYS_ON,
            working_hours=WorkingHours(start="9:00 AM", end="5:00 PM", interval_minutes=30),
        ),
        [
            Service(id="svc_haircut", name="Haircut", price=30.0, duration_minutes=30),
            Service(id="svc_beard", name="Beard Trim", price=15.0, duration_minutes=15),
            Service(id="svc_combo", name="Haircut + Beard", price=40.0, duration_minutes=45),
        ],
    ),
    (
        Provider(
            id="barber_dee",
            name="Dee Fades",
            address="88 Mission St",
            working_days={**_WEEKDAYS_ON, "monday": False, "sunday": True},
            working_hours=WorkingHours(start="10:00", end="18:00", interval_minutes=60),
        ),
        [Service(id="svc_fade", name="Skin Fade", price=35.0, duration_minutes=45)],
    ),
    (
        # listed but not set up yet
        Provider(id="barber_new", name="Fresh Chair", address="5 Market St"),
        [],
    ),
]


def build_demo_directory() -> MemoryDirectoryStore:
    """In-memory directory for local runs: a few barbers around one zip code."""
    directory = MemoryDirectoryStore(default_locality=DEMO_LOCALITY)
    for provider, services in DEMO_PROVIDERS:
        directory.add_provider(DEMO_LOCALITY, provider, services)
    directory.add_profile(UserProfile(id="demo", display_name="Demo Customer", locality_key=DEMO_LOCALITY))
    return directory
