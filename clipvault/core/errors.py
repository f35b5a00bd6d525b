"""
Error classification shared by the core services and the HTTP layer.

Core code raises these; a single exception handler in main.py turns them
into a status code and an {"error": message} body. The message is always
safe to show to clients. Backend details travel on __cause__ and in logs.
"""


class ClipVaultError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(ClipVaultError):
    """Required input was missing or empty."""

    status_code = 400


class AuthenticationError(ClipVaultError):
    """Missing or incorrect access password."""

    status_code = 401


class BackendError(ClipVaultError):
    """Object storage or database call failed."""

    status_code = 500
