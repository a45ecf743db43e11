"""Error hierarchy for Pantry Chef.

Workflow failures are converted to a single user-visible message at the
orchestrator boundary with describe_error().
"""

from typing import Optional

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."
UNKNOWN_IMAGE_ERROR_MESSAGE = "An unknown error occurred while processing the image."


class PantryChefError(Exception):
    """Base class for all errors raised by this package."""


class ImageReadError(PantryChefError):
    """The uploaded image file could not be read."""


class UnsupportedImageError(PantryChefError):
    """The uploaded image was read but cannot be sent to the model (format or size)."""


class ServiceError(PantryChefError):
    """The generation backend rejected or failed a call.

    Attributes:
        operation: Name of the failing service operation, if known.
    """

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.operation = operation


def describe_error(exc: BaseException, fallback: str = UNKNOWN_ERROR_MESSAGE) -> str:
    """Return the message to show the user for a failed workflow.

    Exceptions that carry no message are reported with the fallback text.
    """
    message = str(exc).strip()
    return message or fallback
