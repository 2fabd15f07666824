from __future__ import annotations

import logging
from typing import List, Optional

from ...shared.exceptions import MISSING_ACCESS, MISSING_PERMISSIONS
from ...shared.interfaces import ChatClient, ItemCatalog, Translator, UserStore
from ...shared.result import attempt, run_fallback_chain
from .models import (
    Alert,
    Channel,
    Embed,
    MessagePayload,
    OriginContext,
    RemoveAlertButton,
)

logger = logging.getLogger(__name__)

OFFER_NOTE = "the {item} is in their item shop!"
CREDENTIALS_NOTE = "their credentials have expired, and that they should /login again."
CREDENTIALS_PERMS_NOTE = CREDENTIALS_NOTE + " Also tell them that they should fix their perms."


class AlertSender:
    """Formats and delivers alert messages.

    Nothing in here raises on a failed delivery: failures are logged together
    with a line an operator can act on by hand.
    """

    def __init__(self, store: UserStore, chat: ChatClient, items: ItemCatalog, translator: Translator):
        self.store = store
        self.chat = chat
        self.items = items
        self.translator = translator

    async def _log_manual_notice(self, user_id: str, note: str) -> None:
        user = await attempt(self.chat.fetch_user(user_id))
        if user.ok:
            logger.error(f"Please tell {user.value.tag} that {note}", extra={"user_id": user_id})
        else:
            logger.debug("Could not resolve user %s for manual notice: %s", user_id, user.error)

    async def _report_failed_send(self, user_id: str, channel: Channel, error: Exception, note: str) -> None:
        async def log_failure() -> None:
            logger.error(f"Could not send message in #{channel.name or channel.id}! Do I have the right role?")

        async def log_manual_notice() -> None:
            await self._log_manual_notice(user_id, note)

        async def log_error() -> None:
            logger.error("Delivery error: %s", error, exc_info=(type(error), error, error.__traceback__))

        await run_fallback_chain([log_failure, log_manual_notice, log_error], description="failed send report")

    async def send_offer_alert(self, user_id: str, alerts: List[Alert], expires: Optional[int]) -> int:
        """Send one "item available" message per alert. Returns how many went out."""
        logger.info(f"Sending {len(alerts)} alert(s) to user {user_id}")
        sent = 0

        for alert in alerts:
            user = await self.store.get_user(user_id)
            if user is None:
                return sent

            channel = await attempt(self.chat.fetch_channel(alert.channel_id))
            if not channel.ok:
                logger.debug("Channel %s unreachable, skipping alert for %s", alert.channel_id, alert.item_id)
                continue

            item = await self.items.get_item(alert.item_id)
            payload = MessagePayload(
                content=f"<@{user_id}>",
                embeds=[Embed(
                    description=self.translator.format(
                        user.locale, "ALERT_HAPPENED", {"u": user_id, "s": item.display_name, "t": expires}
                    ),
                    thumbnail_url=item.icon_url,
                )],
                components=[RemoveAlertButton(
                    user_id=user_id,
                    item_id=alert.item_id,
                    label=self.translator.format(user.locale, "REMOVE_ALERT_BUTTON"),
                )],
            )

            try:
                await self.chat.send_message(channel.value.id, payload)
                sent += 1
            except Exception as e:
                await self._report_failed_send(user_id, channel.value, e, OFFER_NOTE.format(item=item.display_name))

        return sent

    async def send_credentials_expired(self, user_id: str, alert: Alert) -> bool:
        """Tell the user in the alert's channel that their login expired."""
        channel = await attempt(self.chat.fetch_channel(alert.channel_id))
        if not channel.ok:
            await self._log_manual_notice(user_id, CREDENTIALS_NOTE)
            return False

        if channel.value.guild_id:
            member = await attempt(self.chat.fetch_member(channel.value.guild_id, user_id))
            if not member.ok:
                return False  # the user left that guild

        user = await self.store.get_user(user_id)
        if user is None:
            return False

        payload = MessagePayload(
            content=f"<@{user_id}>",
            embeds=[Embed(description=self.translator.format(user.locale, "AUTH_ERROR_ALERTS_HAPPENED", {"u": user_id}))],
        )
        try:
            await self.chat.send_message(channel.value.id, payload)
            return True
        except Exception as e:
            await self._report_failed_send(user_id, channel.value, e, CREDENTIALS_PERMS_NOTE)
            return False

    async def send_test_alert(self, origin: OriginContext) -> bool:
        """Send the canned test message to the channel a command came from."""
        try:
            channel = await self.chat.fetch_channel(origin.channel_id)
            await self.chat.send_message(
                channel.id,
                MessagePayload(embeds=[Embed(description=self.translator.format(origin.locale, "ALERT_TEST"))]),
            )
            return True
        except Exception as e:
            logger.error(f"{origin.user_tag or origin.user_id} tried to /testalerts, but failed!")
            code = getattr(e, "code", None)
            if code == MISSING_PERMISSIONS:
                logger.error("Failed with 'Missing Permissions' error")
            elif code == MISSING_ACCESS:
                logger.error("Failed with 'Missing Access' error")
            else:
                logger.error(f"Test alert failed: {e}", exc_info=True)
            return False
