"""Postal code segment validation."""

import re

from ..errors import SlotValidationError
from ..models import TurnRequest

FIRST_HALF_SLOTS = ("SerialOne", "SerialTwo", "SerialThree")
REST_SLOTS = ("SerialFour", "SerialFive", "SerialSix", "SerialSeven")
RATING_SLOT = "TempType"


def read_segment(request: TurnRequest, slot_names: tuple[str, ...]) -> str:
    """Join the digit slots of one postal code segment.

    The voice interface captures one digit per slot; every slot must hold
    exactly one ASCII digit.

    Raises:
        SlotValidationError: a slot is missing, holds more than one character,
            or holds a non-digit.
    """
    digits = [request.slot(name) for name in slot_names]
    value = "".join(digits)
    if not all(re.fullmatch(r"[0-9]", digit) for digit in digits):
        raise SlotValidationError(slot_names, value)
    return value


def join_postal_code(first_half: str, rest: str) -> str:
    """NNN-NNNN display/storage form."""
    return f"{first_half}-{rest}"
