"""Custom exceptions for eventree."""


class EventError(Exception):
    """Base exception for all eventree errors."""


class InvalidEventNameError(EventError, ValueError):
    """Raised when an event name is not a string or has no segments."""


class NotCallableError(EventError, TypeError):
    """Raised when a handler, hook or accumulator is not callable."""
