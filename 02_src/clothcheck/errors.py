"""Error kinds raised while handling a conversational turn."""


class ClothCheckError(Exception):
    """Base class for all skill errors."""


class SlotValidationError(ClothCheckError):
    """Slot input does not form a valid postal code segment.

    Always recovered inside the dialog engine with a re-prompt.
    """

    def __init__(self, slot_names: tuple[str, ...], value: str):
        self.slot_names = slot_names
        self.value = value
        super().__init__(f"Invalid value {value!r} for slots {', '.join(slot_names)}")


class WrongPhaseError(ClothCheckError):
    """Intent fired while the conversation is in an incompatible phase.

    Always recovered by the session controller with a corrective prompt.
    """

    def __init__(self, intent: str, phase: str, prompt: str):
        self.intent = intent
        self.phase = phase
        self.prompt = prompt
        super().__init__(f"Intent {intent} not accepted in phase {phase}")


class DependencyError(ClothCheckError):
    """A store, weather or notification call failed. Aborts the turn."""

    def __init__(self, dependency: str, message: str):
        self.dependency = dependency
        super().__init__(f"{dependency} failed: {message}")


class RoutingError(ClothCheckError):
    """No handler registered for the inbound request type or intent name."""
