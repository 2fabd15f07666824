"""
Collaborator interface definitions.

Contracts for the services the alert subsystem talks to but does not own:
the user store, the shop, the chat platform, the item catalog and the
translator. Protocols keep the alert code decoupled from any concrete
client and let tests pass simple doubles.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from ...domains.alerts.models import (
    Channel,
    ChatUser,
    ItemMetadata,
    MessagePayload,
    OfferSnapshot,
    User,
)


@runtime_checkable
class UserStore(Protocol):
    """Opaque key-value store of user records."""

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID, None if missing."""
        ...

    async def get_user_list(self) -> List[str]:
        """All user IDs, in storage order."""
        ...

    async def save_user(self, user: User) -> None:
        """Insert or replace a user record."""
        ...

    async def delete_user(self, user_id: str) -> None:
        """Delete a user record and everything it owns."""
        ...


@runtime_checkable
class OfferSource(Protocol):
    """The external shop."""

    async def get_offers(self, user_id: str) -> OfferSnapshot:
        """Current offers for a user."""
        ...


@runtime_checkable
class ChatClient(Protocol):
    """The chat platform."""

    async def fetch_channel(self, channel_id: str) -> Channel:
        """Fetch a channel, raising if it is gone or hidden."""
        ...

    async def channel_guild_id(self, channel_id: str) -> Channel:
        """Resolve a channel's guild, from cache when possible."""
        ...

    async def fetch_user(self, user_id: str) -> ChatUser:
        ...

    async def fetch_member(self, guild_id: str, user_id: str) -> Dict[str, Any]:
        """Raises if the user is not a member of the guild."""
        ...

    async def send_message(self, channel_id: str, payload: MessagePayload) -> Dict[str, Any]:
        ...


@runtime_checkable
class ItemCatalog(Protocol):
    """Display metadata for shop items."""

    async def get_item(self, item_id: str) -> ItemMetadata:
        ...


@runtime_checkable
class Translator(Protocol):
    """Localized string formatter."""

    def format(self, locale: str, key: str, params: Optional[Dict[str, Any]] = None) -> str:
        ...
