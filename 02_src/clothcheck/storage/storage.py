"""SQLite rating store implementation."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..logging_config import get_logger
from ..models import PostalCodeRecord, RatingResult, TemperatureRating

logger = get_logger(__name__)


class IRatingStore(Protocol):
    """Durable postal codes and temperature ratings, keyed by user."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    async def get_postal_code(self, user_id: str) -> PostalCodeRecord | None:
        """Get the postal code record for a user."""
        ...

    async def put_postal_code(self, user_id: str, postal_code: str) -> None:
        """Create or overwrite the postal code record for a user."""
        ...

    async def get_rating(
        self, user_id: str, temperature: int
    ) -> TemperatureRating | None:
        """Get the rating row for (user, temperature)."""
        ...

    async def put_rating(
        self, user_id: str, temperature: int, result: RatingResult
    ) -> None:
        """Set result and rated_at for (user, temperature), keeping other fields."""
        ...

    async def clear(self) -> None:
        """Clear all data."""
        ...


class RatingStore:
    """SQLite rating store.

    Every write is a single-row statement committed on its own. Backend
    errors propagate unchanged.
    """

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    # Postal codes
    async def get_postal_code(self, user_id: str) -> PostalCodeRecord | None:
        """Get the postal code record for a user."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT user_id, postal_code, last_written_at
            FROM postal_codes
            WHERE user_id = ?
            """,
            (user_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return PostalCodeRecord(
            user_id=row[0],
            postal_code=row[1],
            last_written_at=_parse_timestamp(row[2]),
        )

    async def put_postal_code(self, user_id: str, postal_code: str) -> None:
        """Create or overwrite the postal code record for a user."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        logger.debug("Writing postal code for %s", user_id)
        await self._conn.execute(
            """
            INSERT OR REPLACE INTO postal_codes
            (user_id, postal_code, last_written_at)
            VALUES (?, ?, ?)
            """,
            (user_id, postal_code, _now()),
        )
        await self._conn.commit()

    # Temperature ratings
    async def get_rating(
        self, user_id: str, temperature: int
    ) -> TemperatureRating | None:
        """Get the rating row for (user, temperature)."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT user_id, temperature, result, rated_at, image
            FROM temperature_ratings
            WHERE user_id = ? AND temperature = ?
            """,
            (user_id, temperature),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return TemperatureRating(
            user_id=row[0],
            temperature=row[1],
            result=RatingResult(row[2]) if row[2] else None,
            rated_at=_parse_timestamp(row[3]),
            image=row[4],
        )

    async def put_rating(
        self, user_id: str, temperature: int, result: RatingResult
    ) -> None:
        """Set result and rated_at for (user, temperature), keeping other fields."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        logger.debug("Writing rating %s for %s at %s", result.value, user_id, temperature)
        await self._conn.execute(
            """
            INSERT INTO temperature_ratings (user_id, temperature, result, rated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (user_id, temperature) DO UPDATE SET
                result = excluded.result,
                rated_at = excluded.rated_at
            """,
            (user_id, temperature, result.value, _now()),
        )
        await self._conn.commit()

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        for table in ["temperature_ratings", "postal_codes"]:
            await self._conn.execute(f"DELETE FROM {table}")

        await self._conn.commit()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)
