"""ClothCheck skill core module."""

from .app import Application, IApplication
from .dialogue import DialogEngine, IDialogEngine
from .errors import (
    ClothCheckError,
    DependencyError,
    RoutingError,
    SlotValidationError,
    WrongPhaseError,
)
from .models import (
    DialogTurn,
    Phase,
    PostalCodeRecord,
    RatingResult,
    RequestType,
    SessionState,
    TemperatureRating,
    TurnRequest,
)
from .notify import INotificationChannel, LineNotifier
from .session import ISessionController, SessionController
from .storage import IRatingStore, RatingStore
from .weather import IWeatherLookup, WeatherClient

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "DialogTurn",
    "Phase",
    "PostalCodeRecord",
    "RatingResult",
    "RequestType",
    "SessionState",
    "TemperatureRating",
    "TurnRequest",
    # Errors
    "ClothCheckError",
    "DependencyError",
    "RoutingError",
    "SlotValidationError",
    "WrongPhaseError",
    # Components
    "IRatingStore",
    "RatingStore",
    "IWeatherLookup",
    "WeatherClient",
    "INotificationChannel",
    "LineNotifier",
    "IDialogEngine",
    "DialogEngine",
    "ISessionController",
    "SessionController",
]
