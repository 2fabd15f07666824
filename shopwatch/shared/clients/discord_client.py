"""
Discord REST client.

Thin httpx wrapper implementing the `ChatClient` contract: only the handful
of endpoints the alert subsystem needs.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...core.config import settings
from ...domains.alerts.models import Channel, ChatUser, MessagePayload
from ..exceptions import (
    create_chat_exception_from_response,
    create_network_exception_from_httpx_error,
)

logger = logging.getLogger(__name__)

# Channel types that have no guild
DM_CHANNEL_TYPES = {1, 3}


class DiscordRestClient:
    """Async Discord API client authenticated as a bot"""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.discord_api_base_url).rstrip('/')
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bot {token if token is not None else settings.discord_bot_token}"},
            timeout=timeout or settings.discord_timeout_seconds,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            transport=transport,
        )
        self._channel_cache: Dict[str, Channel] = {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, endpoint: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self.client.request(method, endpoint, json=json)
        except httpx.HTTPError as e:
            raise create_network_exception_from_httpx_error(e) from e

        if response.status_code >= 400:
            error = create_chat_exception_from_response(response)
            logger.debug(f"{method} {endpoint} failed: {error}")
            raise error

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    @staticmethod
    def _to_channel(data: Dict[str, Any]) -> Channel:
        guild_id = data.get("guild_id")
        if data.get("type") in DM_CHANNEL_TYPES:
            guild_id = None
        return Channel(id=str(data["id"]), name=data.get("name") or "", guild_id=guild_id)

    async def fetch_channel(self, channel_id: str) -> Channel:
        channel = self._to_channel(await self._request("GET", f"/channels/{channel_id}"))
        self._channel_cache[channel.id] = channel
        return channel

    async def channel_guild_id(self, channel_id: str) -> Channel:
        cached = self._channel_cache.get(channel_id)
        if cached is not None:
            return cached
        return await self.fetch_channel(channel_id)

    async def fetch_user(self, user_id: str) -> ChatUser:
        data = await self._request("GET", f"/users/{user_id}")
        return ChatUser(
            id=str(data["id"]),
            username=data.get("username", ""),
            discriminator=data.get("discriminator"),
        )

    async def fetch_member(self, guild_id: str, user_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/guilds/{guild_id}/members/{user_id}")

    async def send_message(self, channel_id: str, payload: MessagePayload) -> Dict[str, Any]:
        return await self._request("POST", f"/channels/{channel_id}/messages", json=payload.to_payload())
