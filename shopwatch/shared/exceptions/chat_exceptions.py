"""
Chat platform exception classes.

Provides a hierarchical exception structure for Discord REST API errors.
"""

from typing import Optional, Dict, Any
import httpx

# Discord JSON error codes
UNKNOWN_CHANNEL = 10003
UNKNOWN_MEMBER = 10007
UNKNOWN_USER = 10013
MISSING_ACCESS = 50001
MISSING_PERMISSIONS = 50013


class ShopwatchError(Exception):
    """Base exception for all shopwatch errors"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}

    @property
    def code(self) -> Optional[int]:
        return self.error_code

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class ChatAPIError(ShopwatchError):
    """General chat platform API error"""
    pass


class ChatNotFoundError(ChatAPIError):
    """Channel, user or member not found (404)"""

    def __init__(self, message: str = "Resource not found", error_code: Optional[int] = None):
        super().__init__(message, status_code=404, error_code=error_code)


class MissingAccessError(ChatAPIError):
    """The bot cannot see the channel (50001)"""

    def __init__(self, message: str = "Missing Access"):
        super().__init__(message, status_code=403, error_code=MISSING_ACCESS)


class MissingPermissionsError(ChatAPIError):
    """The bot can see the channel but lacks a permission (50013)"""

    def __init__(self, message: str = "Missing Permissions"):
        super().__init__(message, status_code=403, error_code=MISSING_PERMISSIONS)


class ChatRateLimitError(ChatAPIError):
    """Chat API rate limit exceeded (429)"""

    def __init__(self, message: str = "Chat API rate limit exceeded", retry_after: Optional[float] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ChatServerError(ChatAPIError):
    """Chat API server error (5xx status codes)"""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message, status_code=status_code)


class NetworkError(ChatAPIError):
    """Network connectivity error"""

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def create_chat_exception_from_response(response: httpx.Response) -> ChatAPIError:
    """
    Create appropriate exception from an httpx Response.

    Args:
        response: httpx Response object

    Returns:
        Chat exception based on the JSON error code, falling back to the status code
    """
    status_code = response.status_code
    body = _error_body(response)
    error_code = body.get("code")
    message = body.get("message") or response.text[:500]

    if error_code == MISSING_ACCESS:
        return MissingAccessError(message)
    elif error_code == MISSING_PERMISSIONS:
        return MissingPermissionsError(message)
    elif status_code == 404:
        return ChatNotFoundError(message, error_code=error_code)
    elif status_code == 429:
        retry_after = body.get("retry_after") or response.headers.get("Retry-After")
        try:
            retry_after_value = float(retry_after) if retry_after is not None else None
        except (TypeError, ValueError):
            retry_after_value = None
        return ChatRateLimitError(f"Rate limit exceeded: {message}", retry_after=retry_after_value)
    elif 500 <= status_code < 600:
        return ChatServerError(f"Server error: {message}", status_code=status_code)
    else:
        return ChatAPIError(f"HTTP {status_code}: {message}", status_code=status_code, error_code=error_code)


def create_network_exception_from_httpx_error(error: Exception) -> NetworkError:
    """
    Create NetworkError from httpx exceptions.

    Args:
        error: Original httpx exception

    Returns:
        NetworkError with appropriate message
    """
    error_type = type(error).__name__

    if isinstance(error, httpx.TimeoutException):
        return NetworkError(f"Request timed out: {str(error)}", error)
    elif isinstance(error, httpx.ConnectError):
        return NetworkError(f"Connection failed: {str(error)}", error)
    else:
        return NetworkError(f"Network error ({error_type}): {str(error)}", error)
