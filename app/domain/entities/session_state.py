"""
Assistant session states.

One frozen dataclass per (mode, step). Each variant carries only the data
that is valid at that point in the flow, so e.g. a chosen service without a
chosen provider cannot be represented.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from app.domain.entities.appointment import Appointment
from app.domain.entities.provider import Provider, Service
from app.domain.entities.slot import AvailabilitySlot


class Mode(str, Enum):
    new = "new"
    repeat = "repeat"
    cancel = "cancel"
    pay = "pay"


@dataclass(frozen=True)
class MenuState:
    mode: ClassVar[Mode | None] = None
    step: ClassVar[str] = "menu"


@dataclass(frozen=True)
class ChooseProviderState:
    mode: ClassVar[Mode | None] = Mode.new
    step: ClassVar[str] = "chooseProvider"

    providers: tuple[Provider, ...]


@dataclass(frozen=True)
class ChooseServiceState:
    mode: ClassVar[Mode | None] = Mode.new
    step: ClassVar[str] = "chooseService"

    provider: Provider
    services: tuple[Service, ...]


@dataclass(frozen=True)
class NoServicesState:
    """Provider had no services; only `menu` leaves this state."""

    mode: ClassVar[Mode | None] = Mode.new
    step: ClassVar[str] = "noServices"

    provider: Provider


@dataclass(frozen=True)
class ChooseDateTimeState:
    mode: ClassVar[Mode | None] = Mode.new
    step: ClassVar[str] = "chooseDateTime"

    provider: Provider
    service: Service


@dataclass(frozen=True)
class ConfirmBookingState:
    mode: ClassVar[Mode | None] = Mode.new
    step: ClassVar[str] = "confirm"

    provider: Provider
    service: Service
    slot: AvailabilitySlot


@dataclass(frozen=True)
class CancelListState:
    mode: ClassVar[Mode | None] = Mode.cancel
    step: ClassVar[str] = "list"

    appointments: tuple[Appointment, ...]


@dataclass(frozen=True)
class CancelConfirmState:
    mode: ClassVar[Mode | None] = Mode.cancel
    step: ClassVar[str] = "confirm"

    appointment: Appointment


@dataclass(frozen=True)
class RepeatDateTimeState:
    mode: ClassVar[Mode | None] = Mode.repeat
    step: ClassVar[str] = "chooseDateTime"

    last_appointment: Appointment


@dataclass(frozen=True)
class PayState:
    mode: ClassVar[Mode | None] = Mode.pay
    step: ClassVar[str] = "pay"


SessionState = Union[
    MenuState,
    ChooseProviderState,
    ChooseServiceState,
    NoServicesState,
    ChooseDateTimeState,
    ConfirmBookingState,
    CancelListState,
    CancelConfirmState,
    RepeatDateTimeState,
    PayState,
]


@dataclass(frozen=True)
class ChatMessage:
    sender: str  # "bot" | "user"
    text: str


@dataclass(frozen=True)
class ConversationSession:
    user_id: str
    generation: int = 0
    state: SessionState = field(default_factory=MenuState)
    messages: tuple[ChatMessage, ...] = ()

    @property
    def mode(self) -> Mode | None:
        return self.state.mode

    @property
    def step(self) -> str:
        return self.state.step
