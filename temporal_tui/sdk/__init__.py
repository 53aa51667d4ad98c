"""
Temporal SDK for Python

Read-only access to a Temporal frontend over its HTTP API.

Example:
    >>> from temporal_tui.sdk import TemporalSDK
    >>>
    >>> sdk = TemporalSDK(
    ...     server_url='http://localhost:7243',
    ...     namespace='default',
    ... )
    >>>
    >>> # List workflow executions
    >>> executions, token = sdk.workflows.list(48)
    >>>
    >>> # Describe one
    >>> detail = sdk.workflows.describe('order-1234')
"""

from .client import TemporalSDK
from .exceptions import (
    ResponseShapeError,
    TemporalAPIError,
    TemporalAuthenticationError,
    TemporalError,
    TemporalNotFoundError,
)

__all__ = [
    "TemporalSDK",
    "TemporalError",
    "TemporalAPIError",
    "TemporalNotFoundError",
    "TemporalAuthenticationError",
    "ResponseShapeError",
]
