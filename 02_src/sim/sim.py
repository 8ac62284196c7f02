"""SIM implementation - hardcoded voice conversations for testing."""

import asyncio
import uuid
from typing import Any, Protocol

import httpx

from clothcheck.logging_config import get_logger

logger = get_logger(__name__)

MAX_TURNS = 8


class ISim(Protocol):
    """Drive the skill endpoint with hardcoded conversations."""

    async def start(self) -> None:
        """Start hardcoded scenario."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


def build_envelope(
    user_id: str,
    session_id: str,
    attributes: dict[str, Any],
    request_type: str,
    intent: str | None = None,
    slots: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build a voice platform request envelope."""
    request: dict[str, Any] = {"type": request_type}
    if intent:
        request["intent"] = {
            "name": intent,
            "slots": {
                name: {"name": name, "value": value}
                for name, value in (slots or {}).items()
            },
        }
    return {
        "version": "1.0",
        "session": {
            "sessionId": session_id,
            "new": request_type == "LaunchRequest",
            "sessionAttributes": attributes,
            "user": {"userId": user_id},
        },
        "context": {},
        "request": request,
    }


class Sim:
    """SIM with hardcoded conversations for testing."""

    def __init__(
        self,
        api_url: str = "http://localhost:8000",
        delay: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_url = api_url
        self._delay = delay
        self._transport = transport
        self._running = False
        self._task: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        """Start hardcoded scenario."""
        if self._running:
            return

        self._running = True
        self._client = httpx.AsyncClient(transport=self._transport)

        # Start background task
        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        if self._client:
            await self._client.aclose()
            self._client = None

    async def _run_scenario(self) -> None:
        """Run hardcoded scenario."""
        virtual_users = [
            {"user_id": "sim_user_001", "digits": "1234567", "rating": "GOOD"},
            {"user_id": "sim_user_002", "digits": "1500001", "rating": "HOT"},
        ]

        try:
            for user in virtual_users:
                if not self._running:
                    break
                await self.run_conversation(user["user_id"], user["digits"], user["rating"])
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)

    async def run_conversation(
        self, user_id: str, digits: str, rating: str
    ) -> list[str]:
        """Talk to the skill until it ends the session. Returns the spoken replies."""
        session_id = str(uuid.uuid4())
        speeches: list[str] = []

        body = await self._send(
            build_envelope(user_id, session_id, {}, "LaunchRequest")
        )
        for _ in range(MAX_TURNS):
            if body is None:
                break
            speeches.append(body["response"]["outputSpeech"]["values"]["value"])
            if body["response"]["shouldEndSession"]:
                break

            attributes = body.get("sessionAttributes") or {}
            intent, slots = self._next_utterance(attributes.get("phase"), digits, rating)

            await asyncio.sleep(self._delay)
            body = await self._send(
                build_envelope(
                    user_id, session_id, attributes, "IntentRequest", intent, slots
                )
            )

        return speeches

    @staticmethod
    def _next_utterance(
        phase: str | None, digits: str, rating: str
    ) -> tuple[str, dict[str, str]]:
        if phase == "postal-first":
            names = ("SerialOne", "SerialTwo", "SerialThree")
            return "PostalCodeIntent", dict(zip(names, digits[:3]))
        if phase == "postal-rest":
            names = ("SerialFour", "SerialFive", "SerialSix", "SerialSeven")
            return "PostalCodeRestIntent", dict(zip(names, digits[3:]))
        if phase == "input":
            return "InputIntent", {"TempType": rating}
        return "Clova.CancelIntent", {}

    async def _send(self, envelope: dict[str, Any]) -> dict[str, Any] | None:
        """Send a turn via HTTP API."""
        if not self._client:
            self._client = httpx.AsyncClient(transport=self._transport)

        user_id = envelope["session"]["user"]["userId"]
        try:
            response = await self._client.post(
                f"{self._api_url}/api/skill",
                json=envelope,
                timeout=10.0,
            )

            if response.status_code == 200:
                data = response.json()
                logger.info(
                    "SIM: %s <- %s",
                    user_id,
                    data["response"]["outputSpeech"]["values"]["value"],
                )
                return data

            logger.error("SIM: Error sending turn: %s", response.status_code)
        except Exception as e:
            logger.error("SIM: Failed to send turn: %s", e)
        return None
