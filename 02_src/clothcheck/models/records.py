"""Durable records owned by the rating store."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .dialogue import POSTAL_CODE_PATTERN


class RatingResult(str, Enum):
    """Subjective comfort rating for one temperature."""

    HOT = "HOT"
    COLD = "COLD"
    GOOD = "GOOD"

    @property
    def label(self) -> str:
        """Spoken/displayed label."""
        return _LABELS[self]

    @classmethod
    def from_slot(cls, value: str | None) -> "RatingResult | None":
        """Map a captured slot value onto one of the three ratings.

        The voice slot carries the spoken label (あつい, さむい, ちょうどいい);
        the literal tokens are accepted too, in any letter case. Everything
        else counts as no answer.
        """
        if not value:
            return None
        value = value.strip()
        for result, label in _LABELS.items():
            if value == label:
                return result
        try:
            return cls(value.upper())
        except ValueError:
            return None


_LABELS = {
    RatingResult.HOT: "あつい",
    RatingResult.COLD: "さむい",
    RatingResult.GOOD: "ちょうどいい",
}


@dataclass
class PostalCodeRecord:
    """A user's registered postal code."""

    user_id: str
    postal_code: str | None
    last_written_at: datetime | None = None

    @property
    def is_complete(self) -> bool:
        """True once a full NNN-NNNN postal code is on file."""
        return bool(self.postal_code) and POSTAL_CODE_PATTERN.fullmatch(
            self.postal_code
        ) is not None


@dataclass
class TemperatureRating:
    """A user's rating for one temperature value.

    A row without result means the temperature has been seen but not rated.
    """

    user_id: str
    temperature: int
    result: RatingResult | None = None
    rated_at: datetime | None = None
    image: str | None = None  # companion image reference

    @property
    def is_rated(self) -> bool:
        return self.result is not None and self.rated_at is not None
