"""Voice platform (CEK) request/response envelope."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import RoutingError
from ..models import DialogTurn, RequestType, SessionState, TurnRequest

RESPONSE_VERSION = "1.0"
SPEECH_LANG = "ja"


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SlotValue(_Envelope):
    """A captured slot."""

    name: str | None = None
    value: Any = None


class Intent(_Envelope):
    """Recognized intent with its slots."""

    name: str
    slots: dict[str, SlotValue] | None = None


class RequestBody(_Envelope):
    """The `request` part of the envelope."""

    type: str
    intent: Intent | None = None


class SessionUser(_Envelope):
    """Platform-issued user identity."""

    user_id: str = Field(alias="userId")


class Session(_Envelope):
    """The `session` part of the envelope."""

    session_id: str | None = Field(default=None, alias="sessionId")
    new: bool = False
    # Untyped on purpose: decoded by SessionState.from_attributes
    session_attributes: Any = Field(default=None, alias="sessionAttributes")
    user: SessionUser


class SkillRequestEnvelope(_Envelope):
    """Inbound conversational event."""

    version: str | None = None
    session: Session
    context: dict[str, Any] | None = None
    request: RequestBody


def to_turn_request(
    envelope: SkillRequestEnvelope, user_id_override: str | None = None
) -> TurnRequest:
    """Decode the envelope into a TurnRequest.

    Raises:
        RoutingError: unknown request type.
    """
    try:
        request_type = RequestType(envelope.request.type)
    except ValueError:
        raise RoutingError(f"Unknown request type: {envelope.request.type}") from None

    intent = envelope.request.intent
    slots: dict[str, str] = {}
    if intent and intent.slots:
        slots = {
            name: str(slot.value)
            for name, slot in intent.slots.items()
            if slot.value is not None
        }

    return TurnRequest(
        request_type=request_type,
        user_id=user_id_override or envelope.session.user.user_id,
        intent=intent.name if intent else None,
        slots=slots,
        session=SessionState.from_attributes(envelope.session.session_attributes),
    )


def _speech(text: str) -> dict[str, Any]:
    return {
        "type": "SimpleSpeech",
        "values": {"type": "PlainText", "lang": SPEECH_LANG, "value": text},
    }


def render_response(turn: DialogTurn) -> dict[str, Any]:
    """Encode the engine decision into the platform response envelope."""
    response: dict[str, Any] = {
        "outputSpeech": _speech(turn.speech),
        "card": {},
        "directives": [],
        "shouldEndSession": turn.end_session,
    }
    if turn.reprompt and not turn.end_session:
        response["reprompt"] = {"outputSpeech": _speech(turn.reprompt)}

    return {
        "version": RESPONSE_VERSION,
        "sessionAttributes": {} if turn.end_session else turn.session.to_attributes(),
        "response": response,
    }
