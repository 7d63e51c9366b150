"""Session state errors."""


class StateError(Exception):
    """Base exception for session state persistence."""


class MissingStateError(StateError):
    """Raised when no session state file exists for a directory."""
