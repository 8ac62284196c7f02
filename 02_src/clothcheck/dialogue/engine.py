"""DialogEngine: the postal code / rating collection state machine."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol

from linebot.v3.messaging import Message

from .. import config
from ..errors import ClothCheckError, DependencyError, SlotValidationError, WrongPhaseError
from ..logging_config import get_logger
from ..models import DialogTurn, Phase, RatingResult, SessionState, TurnRequest
from ..notify import INotificationChannel, choices_message, image_message, rating_choices
from ..storage import IRatingStore
from ..weather import IWeatherLookup
from . import prompts
from .validation import (
    FIRST_HALF_SLOTS,
    RATING_SLOT,
    REST_SLOTS,
    join_postal_code,
    read_segment,
)

logger = get_logger(__name__)

POSTAL_CODE_INTENT = "PostalCodeIntent"
POSTAL_CODE_REST_INTENT = "PostalCodeRestIntent"
INPUT_INTENT = "InputIntent"
CANCEL_INTENT = "Clova.CancelIntent"
GUIDE_INTENT = "Clova.GuideIntent"


class IDialogEngine(Protocol):
    """Decides the next prompt for each turn of the conversation."""

    async def launch(self, request: TurnRequest) -> DialogTurn:
        """Start a conversation without prior phase."""
        ...

    async def on_postal_code(self, request: TurnRequest) -> DialogTurn:
        """Handle the first three postal code digits."""
        ...

    async def on_postal_code_rest(self, request: TurnRequest) -> DialogTurn:
        """Handle the remaining four postal code digits."""
        ...

    async def on_input(self, request: TurnRequest) -> DialogTurn:
        """Handle a comfort rating answer."""
        ...

    async def on_cancel(self, request: TurnRequest) -> DialogTurn:
        """Say goodbye and end the session."""
        ...

    async def on_guide(self, request: TurnRequest) -> DialogTurn:
        """Phase-specific help."""
        ...

    async def fallback(self, request: TurnRequest) -> DialogTurn:
        """Generic error prompt, state unchanged."""
        ...

    async def revise_rating(self, user_id: str, postback_data: str) -> bool:
        """Apply a rating revision chosen on the chat channel."""
        ...


@asynccontextmanager
async def dependency(name: str) -> AsyncIterator[None]:
    """Re-raise any collaborator failure as DependencyError."""
    try:
        yield
    except ClothCheckError:
        raise
    except Exception as e:
        raise DependencyError(name, str(e)) from e


def parse_postback(data: str) -> tuple[int, RatingResult] | None:
    """Parse `<temperature>&<RESULT>` posted back by a rating choice."""
    temperature, sep, result = data.partition("&")
    if not sep:
        return None
    try:
        return int(temperature), RatingResult(result)
    except ValueError:
        return None


class DialogEngine:
    """Multi-turn dialog for collecting a postal code and a comfort rating.

    Collaborator calls are awaited one after another; a failing call aborts
    the turn with DependencyError.
    """

    def __init__(
        self,
        store: IRatingStore,
        weather: IWeatherLookup,
        notifier: INotificationChannel,
        country_code: str | None = None,
        image_base_url: str | None = None,
    ):
        self._store = store
        self._weather = weather
        self._notifier = notifier
        self._country_code = country_code or config.country_code()
        self._image_base_url = (
            image_base_url if image_base_url is not None else config.image_base_url()
        )

    async def launch(self, request: TurnRequest) -> DialogTurn:
        """Ask for what is missing, or answer right away when already rated."""
        user_id = request.user_id

        async with dependency("rating_store"):
            record = await self._store.get_postal_code(user_id)

        if record is None:
            logger.info("First launch for %s", user_id)
            return self._ask_postal_code(prompts.WELCOME + prompts.ASK_POSTAL_CODE)
        if not record.is_complete:
            logger.info("No postal code on file for %s", user_id)
            return self._ask_postal_code(prompts.ASK_POSTAL_CODE)

        temperature = await self._lookup_temperature(record.postal_code)

        async with dependency("rating_store"):
            rating = await self._store.get_rating(user_id, temperature)

        if rating is None or not rating.is_rated:
            return self._ask_rating(
                record.postal_code,
                temperature,
                prompts.ASK_RATING.format(temperature=temperature),
            )

        logger.info(
            "Already rated",
            extra={"context": {"user_id": user_id, "temperature": temperature}},
        )
        return await self._goal_response(
            user_id, temperature, rating.result, prompts.ALREADY_RATED, rating.image
        )

    async def on_postal_code(self, request: TurnRequest) -> DialogTurn:
        phase = request.session.phase
        if phase is Phase.ASK_POSTALCODE_REST:
            raise WrongPhaseError(
                POSTAL_CODE_INTENT, phase.value, prompts.WRONG_PHASE_WANT_REST
            )
        if phase is not Phase.ASK_POSTALCODE_FIRST:
            return await self.fallback(request)

        try:
            first_half = read_segment(request, FIRST_HALF_SLOTS)
        except SlotValidationError as e:
            logger.info("Rejected first half from %s: %s", request.user_id, e)
            return DialogTurn(
                speech=prompts.ASK_POSTAL_CODE_ERROR,
                reprompt=prompts.ASK_POSTAL_CODE_ERROR,
                session=SessionState(phase=Phase.ASK_POSTALCODE_FIRST),
            )

        return DialogTurn(
            speech=prompts.ASK_POSTAL_CODE_REST.format(digits="、".join(first_half)),
            reprompt=prompts.ASK_POSTAL_CODE_REST_REPROMPT,
            session=SessionState(
                phase=Phase.ASK_POSTALCODE_REST, postal_code_first_half=first_half
            ),
        )

    async def on_postal_code_rest(self, request: TurnRequest) -> DialogTurn:
        session = request.session
        if session.phase is Phase.ASK_POSTALCODE_FIRST:
            raise WrongPhaseError(
                POSTAL_CODE_REST_INTENT, session.phase.value, prompts.WRONG_PHASE_WANT_FIRST
            )
        if session.phase is not Phase.ASK_POSTALCODE_REST:
            return await self.fallback(request)

        try:
            rest = read_segment(request, REST_SLOTS)
        except SlotValidationError as e:
            logger.info("Rejected last four digits from %s: %s", request.user_id, e)
            return DialogTurn(
                speech=prompts.ASK_POSTAL_CODE_REST_ERROR,
                reprompt=prompts.ASK_POSTAL_CODE_REST_ERROR,
                session=session,
            )

        postal_code = join_postal_code(session.postal_code_first_half, rest)
        temperature = await self._lookup_temperature(postal_code)

        async with dependency("rating_store"):
            await self._store.put_postal_code(request.user_id, postal_code)
        logger.info("Registered postal code for %s", request.user_id)

        speech = prompts.POSTAL_CODE_REGISTERED.format(
            postal_code=postal_code
        ) + prompts.ASK_RATING.format(temperature=temperature)
        return self._ask_rating(postal_code, temperature, speech)

    async def on_input(self, request: TurnRequest) -> DialogTurn:
        session = request.session
        if session.phase is not Phase.ASK_TEMPERATURE:
            return await self.fallback(request)

        result = RatingResult.from_slot(request.slot(RATING_SLOT))
        if result is None:
            return DialogTurn(
                speech=prompts.ERROR, reprompt=prompts.ERROR_REPROMPT, session=session
            )

        temperature = session.pending_temperature
        if temperature is None:
            temperature = await self._lookup_temperature(session.postal_code)

        async with dependency("rating_store"):
            await self._store.put_rating(request.user_id, temperature, result)
        logger.info(
            "Rating recorded",
            extra={
                "context": {
                    "user_id": request.user_id,
                    "temperature": temperature,
                    "result": result.value,
                }
            },
        )
        return await self._goal_response(
            request.user_id, temperature, result, prompts.RATING_RECORDED
        )

    async def on_cancel(self, request: TurnRequest) -> DialogTurn:
        return DialogTurn(speech=prompts.GOODBYE, end_session=True)

    async def on_guide(self, request: TurnRequest) -> DialogTurn:
        session = request.session
        if session.phase is Phase.ASK_POSTALCODE_FIRST:
            return DialogTurn(
                speech=prompts.HELP_POSTAL_CODE,
                reprompt=prompts.ASK_POSTAL_CODE_REPROMPT,
                session=session,
            )
        if session.phase is Phase.ASK_POSTALCODE_REST:
            return DialogTurn(
                speech=prompts.HELP_POSTAL_CODE_REST,
                reprompt=prompts.ASK_POSTAL_CODE_REST_REPROMPT,
                session=session,
            )
        if session.phase is Phase.ASK_TEMPERATURE:
            return DialogTurn(
                speech=prompts.HELP_RATING,
                reprompt=prompts.HELP_RATING_REPROMPT,
                session=session,
            )
        return DialogTurn(speech=prompts.HELP_LAUNCH, end_session=True)

    async def fallback(self, request: TurnRequest) -> DialogTurn:
        return DialogTurn(
            speech=prompts.ERROR,
            reprompt=prompts.ERROR_REPROMPT,
            session=request.session,
        )

    async def revise_rating(self, user_id: str, postback_data: str) -> bool:
        """Apply a rating revision chosen on the chat channel.

        Returns False when the postback data is not a rating choice.
        """
        parsed = parse_postback(postback_data)
        if parsed is None:
            logger.warning("Ignoring postback from %s: %r", user_id, postback_data)
            return False

        temperature, result = parsed
        async with dependency("rating_store"):
            await self._store.put_rating(user_id, temperature, result)
        logger.info("Rating for %s at %s revised to %s", user_id, temperature, result.value)
        return True

    async def _lookup_temperature(self, postal_code: str) -> int:
        async with dependency("weather_lookup"):
            return await self._weather.lookup_temperature(postal_code, self._country_code)

    def _ask_postal_code(self, speech: str) -> DialogTurn:
        return DialogTurn(
            speech=speech,
            reprompt=prompts.ASK_POSTAL_CODE_REPROMPT,
            session=SessionState(phase=Phase.ASK_POSTALCODE_FIRST),
        )

    def _ask_rating(self, postal_code: str, temperature: int, speech: str) -> DialogTurn:
        return DialogTurn(
            speech=speech,
            reprompt=prompts.ASK_RATING_REPROMPT,
            session=SessionState(
                phase=Phase.ASK_TEMPERATURE,
                postal_code=postal_code,
                pending_temperature=temperature,
            ),
        )

    async def _goal_response(
        self,
        user_id: str,
        temperature: int,
        result: RatingResult,
        speech_format: str,
        image: str | None = None,
    ) -> DialogTurn:
        """Speak the rating, push it to the chat channel once, end the session."""
        text = prompts.RATING_CHOICES.format(temperature=temperature)
        choices = rating_choices(temperature)

        messages: list[Message] = []
        if image:
            # TODO: derive asset names from the rating's image reference once the
            # per-rating naming scheme is decided; the fixed sample asset is sent meanwhile.
            messages.append(
                image_message(
                    f"{self._image_base_url}/{config.SAMPLE_IMAGE}",
                    f"{self._image_base_url}/{config.SAMPLE_PREVIEW_IMAGE}",
                )
            )
            messages.append(choices_message(text, choices))
            image_note = prompts.IMAGE_EXISTS
        else:
            messages.append(choices_message(text, choices, quick_reply=True))
            image_note = prompts.IMAGE_MISSING

        speech = speech_format.format(
            temperature=temperature, label=result.label, image_note=image_note
        )

        async with dependency("notification_channel"):
            await self._notifier.push(user_id, messages)

        return DialogTurn(speech=speech, end_session=True)
