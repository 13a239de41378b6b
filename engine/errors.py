"""Engine exceptions."""


class InvalidArgumentError(ValueError):
    """Raised when a caller passes a missing or non-string query."""
