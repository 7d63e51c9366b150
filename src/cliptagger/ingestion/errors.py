"""Directory scanning errors."""


class ScanError(Exception):
    """Raised when a session directory cannot be listed."""
