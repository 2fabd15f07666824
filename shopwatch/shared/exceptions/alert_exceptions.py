"""
Alert domain exception classes.
"""

from typing import Optional

from .chat_exceptions import ShopwatchError


class UserNotFoundError(ShopwatchError):
    """No user record for this id"""

    def __init__(self, user_id: str, message: Optional[str] = None):
        super().__init__(message or f"User '{user_id}' not found", status_code=404)
        self.user_id = user_id


class OfferSourceError(ShopwatchError):
    """The shop could not be queried for a user"""

    def __init__(self, message: str, user_id: Optional[str] = None):
        super().__init__(message)
        self.user_id = user_id


class UpstreamMaintenanceError(OfferSourceError):
    """The shop is down for maintenance; affects every user alike"""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__("Shop is under maintenance", user_id=user_id)


class InvalidCredentialsError(OfferSourceError):
    """The stored login for a user no longer works"""

    def __init__(self, user_id: str):
        super().__init__(f"Credentials for user '{user_id}' are invalid or expired", user_id=user_id)
