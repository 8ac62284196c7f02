"""Core data models for the clothcheck skill."""

from .dialogue import Phase, SessionState
from .records import PostalCodeRecord, RatingResult, TemperatureRating
from .turns import DialogTurn, RequestType, TurnRequest

__all__ = [
    # Dialogue
    "Phase",
    "SessionState",
    # Records
    "PostalCodeRecord",
    "RatingResult",
    "TemperatureRating",
    # Turns
    "DialogTurn",
    "RequestType",
    "TurnRequest",
]
