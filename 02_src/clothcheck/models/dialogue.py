"""Dialogue session state carried in the platform's attribute bag."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

STATE_VERSION = 1

FIRST_HALF_PATTERN = re.compile(r"[0-9]{3}")
POSTAL_CODE_PATTERN = re.compile(r"[0-9]{3}-[0-9]{4}")


class Phase(str, Enum):
    """Current step of the postal-code/rating collection dialog."""

    NONE = "none"
    ASK_POSTALCODE_FIRST = "postal-first"
    ASK_POSTALCODE_REST = "postal-rest"
    ASK_TEMPERATURE = "input"


@dataclass(frozen=True)
class SessionState:
    """Typed view of the session-attribute bag for one conversation."""

    phase: Phase = Phase.NONE
    postal_code_first_half: str | None = None
    postal_code: str | None = None
    pending_temperature: int | None = None

    def to_attributes(self) -> dict[str, Any]:
        """Encode into the attribute bag handed back to the platform."""
        if self.phase is Phase.NONE:
            return {}

        attributes: dict[str, Any] = {
            "stateVersion": STATE_VERSION,
            "phase": self.phase.value,
        }
        if self.postal_code_first_half is not None:
            attributes["postalCodeFirstHalf"] = self.postal_code_first_half
        if self.postal_code is not None:
            attributes["postalCode"] = self.postal_code
        if self.pending_temperature is not None:
            attributes["pendingTemperature"] = self.pending_temperature
        return attributes

    @classmethod
    def from_attributes(cls, attributes: Any) -> "SessionState":
        """Decode an untrusted attribute bag.

        Anything that does not describe a consistent state decodes to the
        empty (no session) state.
        """
        if not isinstance(attributes, Mapping) or not attributes:
            return cls()
        if attributes.get("stateVersion") != STATE_VERSION:
            return cls()

        try:
            phase = Phase(attributes.get("phase"))
        except ValueError:
            return cls()

        first_half = attributes.get("postalCodeFirstHalf")
        postal_code = attributes.get("postalCode")
        temperature = attributes.get("pendingTemperature")

        if first_half is not None and not _matches(FIRST_HALF_PATTERN, first_half):
            return cls()
        if postal_code is not None and not _matches(POSTAL_CODE_PATTERN, postal_code):
            return cls()
        # bool is an int subclass
        if temperature is not None and (
            isinstance(temperature, bool) or not isinstance(temperature, int)
        ):
            return cls()

        if phase is Phase.ASK_POSTALCODE_REST and first_half is None:
            return cls()
        if phase is Phase.ASK_TEMPERATURE and postal_code is None:
            return cls()

        return cls(
            phase=phase,
            postal_code_first_half=first_half,
            postal_code=postal_code,
            pending_temperature=temperature,
        )


def _matches(pattern: re.Pattern, value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None
