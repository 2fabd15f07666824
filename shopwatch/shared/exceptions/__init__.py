"""
Shared exceptions for shopwatch.

Defines custom exception classes for chat platform and alert errors.
"""

from .chat_exceptions import *
from .alert_exceptions import *

__all__ = [
    # Base
    'ShopwatchError',

    # Chat API Exceptions
    'ChatAPIError',
    'ChatNotFoundError',
    'MissingAccessError',
    'MissingPermissionsError',
    'ChatRateLimitError',
    'ChatServerError',
    'NetworkError',
    'create_chat_exception_from_response',
    'create_network_exception_from_httpx_error',
    'MISSING_ACCESS',
    'MISSING_PERMISSIONS',

    # Alert Exceptions
    'UserNotFoundError',
    'OfferSourceError',
    'UpstreamMaintenanceError',
    'InvalidCredentialsError',
]
