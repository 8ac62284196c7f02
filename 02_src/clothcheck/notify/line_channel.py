"""Push notifications over the LINE Messaging API."""

import os
from typing import Protocol, Sequence

from linebot.v3.messaging import (
    ApiException,
    AsyncApiClient,
    AsyncMessagingApi,
    Configuration,
    Message,
    PushMessageRequest,
)

from ..config import LINE_API_HOST, LINE_TIMEOUT
from ..logging_config import get_logger

logger = get_logger(__name__)


class INotificationChannel(Protocol):
    """Side chat channel reaching the same user as the voice skill."""

    async def push(self, user_id: str, messages: Sequence[Message]) -> None:
        """Push messages to a user in a single request."""
        ...


class LineNotifier:
    """LINE push message client.

    An `AsyncMessagingApi` may be injected; otherwise one is built from
    LINE_CHANNEL_ACCESS_TOKEN and closed by close().
    """

    def __init__(
        self,
        access_token: str | None = None,
        api: AsyncMessagingApi | None = None,
        host: str = LINE_API_HOST,
    ):
        self._api_client: AsyncApiClient | None = None
        if api is None:
            access_token = access_token or os.getenv("LINE_CHANNEL_ACCESS_TOKEN")
            if not access_token:
                raise ValueError("LINE_CHANNEL_ACCESS_TOKEN environment variable not set")
            self._api_client = AsyncApiClient(
                Configuration(host=host, access_token=access_token)
            )
            api = AsyncMessagingApi(self._api_client)
        self._api = api

    async def push(self, user_id: str, messages: Sequence[Message]) -> None:
        """Push messages to a user in a single request."""
        request = PushMessageRequest(to=user_id, messages=list(messages))
        try:
            await self._api.push_message(request, _request_timeout=LINE_TIMEOUT)
        except ApiException as e:
            logger.error("Push to %s failed: %s %s", user_id, e.status, e.reason)
            raise

        logger.info("Pushed %d message(s) to %s", len(messages), user_id)

    async def close(self) -> None:
        """Close the underlying API client."""
        if self._api_client:
            await self._api_client.close()
            self._api_client = None
