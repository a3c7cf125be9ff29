"""Exception classes for the circular buffer."""


class CircularBufferError(Exception):
    """Base error for circular buffer operations."""


class SizeError(CircularBufferError, ValueError):
    """Raised when a buffer's dimensions do not fit its backing region."""


class CursorStateError(CircularBufferError, AssertionError):
    """Raised when a cursor is found outside the buffer window.

    This never comes from bad input; it means the buffer's internal state has
    been corrupted.
    """


class ConfigLoadError(CircularBufferError):
    """Raised when a buffer config file cannot be loaded."""


class ConfigValidationError(CircularBufferError):
    """Raised when buffer config fails validation."""

    def __init__(self, errors: list[str]):
        """Initialize ConfigValidationError with list of error messages.

        Args:
            errors: List of error messages from validation.
        """
        message = "\n".join(errors)
        super().__init__(message)
        self.errors = errors
