"""Session persistence errors."""


class SessionError(Exception):
    """Base exception for session store operations."""


class MissingSessionError(SessionError):
    """Raised when no session has been stored."""
