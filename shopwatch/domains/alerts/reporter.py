from __future__ import annotations

import logging

from ...shared.interfaces import ChatClient, UserStore
from ...shared.result import attempt
from .models import GuildAggregate

logger = logging.getLogger(__name__)


class AlertReporter:
    """Alert counts per guild and channel, for admin views.

    Resolves one channel per alert, sequentially. Fine for a few thousand
    alerts; larger installs should group alerts by channel first.
    """

    def __init__(self, store: UserStore, chat: ChatClient):
        self.store = store
        self.chat = chat

    async def build_aggregate(self) -> GuildAggregate:
        guilds: GuildAggregate = {}
        for user_id in await self.store.get_user_list():
            user = await self.store.get_user(user_id)
            if user is None:
                continue
            for alert in user.alerts:
                channel = await attempt(self.chat.channel_guild_id(alert.channel_id))
                if not channel.ok:
                    logger.warning("Skipping alert in unknown channel %s: %s", alert.channel_id, channel.error)
                    continue
                per_channel = guilds.setdefault(channel.value.guild_id, {})
                per_channel[channel.value.id] = per_channel.get(channel.value.id, 0) + 1
        return guilds
