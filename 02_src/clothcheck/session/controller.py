"""SessionController: routes inbound turns to dialog engine handlers."""

from typing import Any, Awaitable, Callable, Protocol

from ..dialogue.engine import (
    CANCEL_INTENT,
    GUIDE_INTENT,
    INPUT_INTENT,
    POSTAL_CODE_INTENT,
    POSTAL_CODE_REST_INTENT,
    IDialogEngine,
)
from ..errors import RoutingError, WrongPhaseError
from ..logging_config import get_logger
from ..models import DialogTurn, RequestType, TurnRequest
from .envelope import SkillRequestEnvelope, render_response, to_turn_request

logger = get_logger(__name__)

IntentHandler = Callable[[TurnRequest], Awaitable[DialogTurn]]


class ISessionController(Protocol):
    """Dispatching of inbound turns by request type and intent name."""

    def register(self, intent_name: str, handler: IntentHandler) -> None:
        """Register a handler for an intent name."""
        ...

    async def handle(self, request: TurnRequest) -> DialogTurn:
        """Run the handler for a decoded turn."""
        ...

    async def dispatch(
        self, envelope: SkillRequestEnvelope, user_id_override: str | None = None
    ) -> dict[str, Any]:
        """Decode, handle and encode one turn."""
        ...


class SessionController:
    """Holds the intent registry and the envelope round trip."""

    def __init__(self, engine: IDialogEngine):
        self._engine = engine
        self._handlers: dict[str, IntentHandler] = {}

        self.register(POSTAL_CODE_INTENT, engine.on_postal_code)
        self.register(POSTAL_CODE_REST_INTENT, engine.on_postal_code_rest)
        self.register(INPUT_INTENT, engine.on_input)
        self.register(CANCEL_INTENT, engine.on_cancel)
        self.register(GUIDE_INTENT, engine.on_guide)

    @property
    def intents(self) -> list[str]:
        """Registered intent names."""
        return list(self._handlers)

    def register(self, intent_name: str, handler: IntentHandler) -> None:
        """Register a handler for an intent name."""
        self._handlers[intent_name] = handler

    async def handle(self, request: TurnRequest) -> DialogTurn:
        """Run the handler for a decoded turn.

        Raises:
            RoutingError: no handler for the intent.
            DependencyError: a collaborator call failed.
        """
        if request.request_type is RequestType.LAUNCH:
            return await self._engine.launch(request)
        if request.request_type is RequestType.SESSION_ENDED:
            return DialogTurn(speech="", end_session=True)

        handler = self._handlers.get(request.intent or "")
        if handler is None:
            raise RoutingError(f"No handler registered for intent: {request.intent}")

        logger.debug(
            "Dispatching %s in phase %s", request.intent, request.session.phase.value
        )
        try:
            return await handler(request)
        except WrongPhaseError as e:
            logger.info("Wrong phase for %s: %s", request.user_id, e)
            return DialogTurn(speech=e.prompt, reprompt=e.prompt, session=request.session)

    async def dispatch(
        self, envelope: SkillRequestEnvelope, user_id_override: str | None = None
    ) -> dict[str, Any]:
        """Decode, handle and encode one turn."""
        request = to_turn_request(envelope, user_id_override)
        turn = await self.handle(request)
        logger.info(
            "Turn handled",
            extra={
                "context": {
                    "user_id": request.user_id,
                    "request_type": request.request_type.value,
                    "intent": request.intent,
                    "phase": request.session.phase.value,
                    "next_phase": turn.session.phase.value,
                    "end_session": turn.end_session,
                }
            },
        )
        return render_response(turn)
