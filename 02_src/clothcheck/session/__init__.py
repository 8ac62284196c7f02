"""Session module."""

from .controller import ISessionController, SessionController
from .envelope import SkillRequestEnvelope, render_response, to_turn_request

__all__ = [
    "ISessionController",
    "SessionController",
    "SkillRequestEnvelope",
    "render_response",
    "to_turn_request",
]
