"""Voice skill turn route."""

from typing import Any

from fastapi import APIRouter, HTTPException

from ...app import Application
from ...config import debug_user_id
from ...errors import DependencyError, RoutingError
from ...logging_config import get_logger
from ...session import SkillRequestEnvelope

logger = get_logger(__name__)


def create_skill_router(app: Application) -> APIRouter:
    """Create skill router."""
    router = APIRouter(prefix="/api", tags=["skill"])

    @router.post("/skill")
    async def handle_turn(envelope: SkillRequestEnvelope) -> dict[str, Any]:
        """Handle one conversational turn."""
        try:
            return await app.controller.dispatch(
                envelope, user_id_override=debug_user_id()
            )
        except RoutingError as e:
            logger.warning("Routing failed: %s", e)
            raise HTTPException(status_code=400, detail=str(e))
        except DependencyError as e:
            logger.error("Turn failed: %s", e, exc_info=True)
            raise HTTPException(status_code=500, detail="Turn failed")

    return router
