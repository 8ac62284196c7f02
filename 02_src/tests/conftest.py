"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest_asyncio.fixture
async def store():
    """Create in-memory rating store for testing."""
    from clothcheck.storage import RatingStore

    st = RatingStore(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def spy_store(store):
    """Real store wrapped so calls can be counted."""
    return Mock(wraps=store)


@pytest.fixture
def mock_weather():
    """Create mock weather lookup reporting 18 degrees."""
    weather = Mock()
    weather.lookup_temperature = AsyncMock(return_value=18)
    return weather


@pytest.fixture
def mock_notifier():
    """Create mock notification channel."""
    notifier = Mock()
    notifier.push = AsyncMock(return_value=None)
    return notifier


@pytest.fixture
def engine(spy_store, mock_weather, mock_notifier):
    """Create DialogEngine for testing."""
    from clothcheck.dialogue import DialogEngine

    return DialogEngine(
        store=spy_store,
        weather=mock_weather,
        notifier=mock_notifier,
        country_code="JP",
        image_base_url="https://assets.example.com/images",
    )


@pytest.fixture
def controller(engine):
    """Create SessionController for testing."""
    from clothcheck.session import SessionController

    return SessionController(engine)


@pytest.fixture
def make_turn():
    """Factory for decoded inbound turns."""
    from clothcheck.models import RequestType, SessionState, TurnRequest

    def _make(
        intent: str | None = None,
        slots: dict | None = None,
        session: SessionState | None = None,
        user_id: str = "U1",
        request_type: RequestType | None = None,
    ) -> TurnRequest:
        if request_type is None:
            request_type = RequestType.INTENT if intent else RequestType.LAUNCH
        return TurnRequest(
            request_type=request_type,
            user_id=user_id,
            intent=intent,
            slots=slots or {},
            session=session or SessionState(),
        )

    return _make
