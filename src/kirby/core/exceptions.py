"""Core exceptions for the Kirby CMS core."""


class KirbyError(Exception):
    """Base exception for all Kirby errors."""


class InvalidArgumentError(KirbyError, ValueError):
    """Raised when a function receives an invalid argument."""


class NotFoundError(KirbyError, LookupError):
    """Raised when a model or resource cannot be found."""


class DuplicateError(KirbyError):
    """Raised when a model with the same identity already exists."""


class PermissionDeniedError(KirbyError):
    """Raised when a blueprint forbids an action."""


class LogicError(KirbyError):
    """Raised when an operation is not possible in the current state."""
