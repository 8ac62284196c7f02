"""Inbound turn and the engine's decision for it."""

from dataclasses import dataclass, field
from enum import Enum

from .dialogue import SessionState


class RequestType(str, Enum):
    """Voice platform request kinds."""

    LAUNCH = "LaunchRequest"
    INTENT = "IntentRequest"
    SESSION_ENDED = "SessionEndedRequest"


@dataclass
class TurnRequest:
    """One inbound conversational event, already decoded."""

    request_type: RequestType
    user_id: str
    intent: str | None = None
    slots: dict[str, str] = field(default_factory=dict)
    session: SessionState = field(default_factory=SessionState)

    def slot(self, name: str) -> str:
        """Captured value of a slot, empty when absent."""
        return self.slots.get(name) or ""


@dataclass
class DialogTurn:
    """What to say next and which session state to hand back."""

    speech: str
    reprompt: str | None = None
    session: SessionState = field(default_factory=SessionState)
    end_session: bool = False
