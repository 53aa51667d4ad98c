"""
Temporal SDK exceptions
"""


class TemporalError(Exception):
    """Base exception for all Temporal SDK errors"""

    pass


class TemporalAPIError(TemporalError):
    """Raised when API request fails"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TemporalNotFoundError(TemporalAPIError):
    """Raised when a workflow or namespace is not found (404)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class TemporalAuthenticationError(TemporalAPIError):
    """Raised when authentication fails (401/403)"""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message, status_code=status_code)


class ResponseShapeError(TemporalError):
    """Raised when a response is missing a field the dashboard requires"""

    pass
