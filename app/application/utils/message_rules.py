from __future__ import annotations

import re

from app.domain.entities.appointment import Appointment
from app.domain.entities.provider import Provider, Service
from app.domain.entities.session_state import Mode

MENU_TEXT = (
    "What would you like to do?\n"
    "1) New Appointment\n"
    "2) Repeat Appointment\n"
    "3) Cancel Appointment\n"
    "4) Pay Your Bill\n"
    "Type a number or option name."
)

MENU_REMINDER = "Please pick 1, 2, 3, or 4 to continue."

MENU_COMMAND = "menu"

MENU_KEYWORDS = (
    (Mode.new, "1", ("new",)),
    (Mode.repeat, "2", ("repeat", "previous")),
    (Mode.cancel, "3", ("cancel",)),
    (Mode.pay, "4", ("pay",)),
)


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").lower()).strip()


def pick_menu_option(text: str) -> Mode | None:
    normalized = normalize_text(text)
    for mode, number, keywords in MENU_KEYWORDS:
        if normalized == number or any(re.search(rf"\b{keyword}\b", normalized) for keyword in keywords):
            return mode
    return None


def is_menu_command(text: str) -> bool:
    return normalize_text(text) == MENU_COMMAND


def parse_number_choice(text: str, count: int) -> int | None:
    """1-based choice in [1, count] -> 0-based index, else None."""
    match = re.match(r"^\s*(\d+)\s*$", text or "")
    if not match:
        return None
    number = int(match.group(1))
    if 1 <= number <= count:
        return number - 1
    return None


def is_yes(text: str) -> bool:
    return normalize_text(text) == "yes"


def is_no(text: str) -> bool:
    return normalize_text(text) == "no"


def format_price(price: float | None) -> str:
    return f"${float(price or 0):.2f}"


def list_providers(providers: list[Provider] | tuple[Provider, ...]) -> str:
    return "\n".join(
        f"{index}. {provider.name}{' - ' + provider.address if provider.address else ''}"
        for index, provider in enumerate(providers, start=1)
    )


def list_services(services: list[Service] | tuple[Service, ...]) -> str:
    return "\n".join(
        f"{index}. {service.name}{' — ' + format_price(service.price) if service.price is not None else ''}"
        for index, service in enumerate(services, start=1)
    )


def list_appointments(appointments: list[Appointment] | tuple[Appointment, ...]) -> str:
    return "\n".join(
        f"{index}. {appointment.date} {appointment.time} — {appointment.service_name or 'Service'}"
        for index, appointment in enumerate(appointments, start=1)
    )
