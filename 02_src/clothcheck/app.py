"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .config import resolve_db_path
from .dialogue import DialogEngine, IDialogEngine
from .logging_config import get_logger
from .notify import INotificationChannel, LineNotifier
from .session import ISessionController, SessionController
from .storage import IRatingStore, RatingStore
from .weather import IWeatherLookup, WeatherClient

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...


class Application:
    """Main application bootstrap.

    Weather and notification collaborators may be injected; otherwise they
    are built from environment variables at start().
    """

    def __init__(
        self,
        db_path: str | None = None,
        weather: IWeatherLookup | None = None,
        notifier: INotificationChannel | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)

        self._injected_weather = weather
        self._injected_notifier = notifier

        # Components (will be initialized in start())
        self._store: IRatingStore | None = None
        self._weather: IWeatherLookup | None = None
        self._notifier: INotificationChannel | None = None
        self._engine: IDialogEngine | None = None
        self._controller: ISessionController | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Store (no dependencies)
        self._store = RatingStore(self._db_path)
        await self._store.init()
        logger.info("Rating store initialized")

        # 2. Weather lookup and notification channel (no internal dependencies)
        self._weather = self._injected_weather or WeatherClient()
        self._notifier = self._injected_notifier or LineNotifier()
        logger.info("External clients initialized")

        # 3. DialogEngine (depends on Store, Weather, Notifier)
        self._engine = DialogEngine(
            store=self._store,
            weather=self._weather,
            notifier=self._notifier,
        )

        # 4. SessionController (depends on DialogEngine)
        self._controller = SessionController(self._engine)
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        # Only clients built here are closed here
        if self._notifier and self._injected_notifier is None:
            await self._notifier.close()
        if self._weather and self._injected_weather is None:
            await self._weather.close()
        if self._store:
            await self._store.close()
            logger.info("Rating store closed")

    async def reset(self) -> None:
        """Reset data between test runs."""
        if self._store:
            await self._store.clear()
            logger.info("Rating store cleared")

    @property
    def store(self) -> IRatingStore:
        """Get rating store instance."""
        if not self._store:
            raise RuntimeError("Application not started")
        return self._store

    @property
    def engine(self) -> IDialogEngine:
        """Get dialog engine instance."""
        if not self._engine:
            raise RuntimeError("Application not started")
        return self._engine

    @property
    def controller(self) -> ISessionController:
        """Get session controller instance."""
        if not self._controller:
            raise RuntimeError("Application not started")
        return self._controller
