"""Error types raised by the coaching pipeline."""


class DietCoachError(Exception):
    """Base class for application errors."""


class PreconditionMissing(DietCoachError):
    """A fact required to build a prompt is absent."""

    def __init__(self, fact: str) -> None:
        super().__init__(f"Missing required data: {fact}")
        self.fact = fact


class GenerationFormatError(DietCoachError):
    """The generative model reply did not match the requested shape."""


class TransportError(DietCoachError):
    """An external service call failed."""


class InvalidInput(DietCoachError):
    """A request payload failed validation."""


class InvalidLogEntry(InvalidInput):
    """A log entry payload failed validation."""


class InvalidChatMessage(InvalidInput):
    """A chat message payload failed validation."""


class InvalidDeviceToken(InvalidInput):
    """A push token payload failed validation."""
