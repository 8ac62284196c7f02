"""Chat channel webhook routes (rating revisions posted back from LINE)."""

import os

from fastapi import APIRouter, Header, HTTPException, Request
from linebot.v3 import WebhookParser
from linebot.v3.exceptions import InvalidSignatureError
from linebot.v3.webhooks import PostbackEvent
from pydantic import BaseModel

from ...app import Application
from ...errors import DependencyError
from ...logging_config import get_logger

logger = get_logger(__name__)


class WebhookResponse(BaseModel):
    """Response model for webhook."""

    status: str
    processed: int


def create_line_router(app: Application) -> APIRouter:
    """Create chat webhook router."""
    router = APIRouter(prefix="/api/line", tags=["line"])

    @router.post("/webhook", response_model=WebhookResponse)
    async def webhook(
        request: Request,
        x_line_signature: str = Header(default=""),
    ) -> dict:
        """Apply rating revisions chosen on the chat channel."""
        channel_secret = os.getenv("LINE_CHANNEL_SECRET")
        if not channel_secret:
            logger.error("Webhook called but LINE_CHANNEL_SECRET is not set")
            raise HTTPException(status_code=503, detail="Webhook not configured")

        raw_body = (await request.body()).decode("utf-8")
        try:
            events = WebhookParser(channel_secret).parse(raw_body, x_line_signature)
        except InvalidSignatureError:
            logger.warning("Rejected webhook with invalid signature")
            raise HTTPException(status_code=401, detail="Invalid signature")
        except (ValueError, KeyError, TypeError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid webhook body: {e}")

        processed = 0
        for event in events:
            if not isinstance(event, PostbackEvent):
                continue
            user_id = getattr(event.source, "user_id", None)
            if not user_id:
                continue
            try:
                if await app.engine.revise_rating(user_id, event.postback.data):
                    processed += 1
            except DependencyError as e:
                logger.error("Rating revision failed: %s", e, exc_info=True)
                raise HTTPException(status_code=500, detail="Revision failed")

        return {"status": "ok", "processed": processed}

    return router
