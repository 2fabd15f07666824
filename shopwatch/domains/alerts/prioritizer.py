from __future__ import annotations

import logging
from typing import List, Optional

from ...shared.interfaces import ChatClient
from ...shared.result import attempt
from .models import Alert, OriginContext
from .registry import AlertRegistry

logger = logging.getLogger(__name__)

SAME_CHANNEL = 2
SAME_GUILD = 1
ELSEWHERE = 0


class AlertPrioritizer:
    """Orders a user's alerts so those from the current channel come first."""

    def __init__(self, registry: AlertRegistry, chat: ChatClient):
        self.registry = registry
        self.chat = chat

    async def _guild_of(self, channel_id: str) -> Optional[str]:
        channel = await attempt(self.chat.channel_guild_id(channel_id))
        if not channel.ok:
            logger.debug("Could not resolve guild of channel %s: %s", channel_id, channel.error)
            return None
        return channel.value.guild_id

    async def score(self, alert: Alert, origin: OriginContext) -> int:
        if alert.channel_id == origin.channel_id:
            return SAME_CHANNEL
        if origin.guild_id and await self._guild_of(alert.channel_id) == origin.guild_id:
            return SAME_GUILD
        return ELSEWHERE

    async def prioritize(self, user_id: str, origin: OriginContext) -> List[Alert]:
        alerts = await self.registry.alerts_for_user(user_id)
        scores = [await self.score(alert, origin) for alert in alerts]
        # sorted() is stable, equal scores keep their stored order
        ranked = sorted(zip(scores, range(len(alerts))), key=lambda pair: pair[0], reverse=True)
        return [alerts[index] for _, index in ranked]
