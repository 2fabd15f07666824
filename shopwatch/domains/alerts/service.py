from __future__ import annotations

from typing import List, Literal, Optional, Union

from ...core.config import Settings, settings as default_settings
from ...core.throttle import Throttle, throttle_from_settings
from ...shared.interfaces import ChatClient, ItemCatalog, OfferSource, Translator, UserStore
from .engine import NotificationCycleEngine
from .models import Alert, GuildAggregate, OriginContext
from .prioritizer import AlertPrioritizer
from .registry import AlertRegistry
from .reporter import AlertReporter
from .senders import AlertSender


class AlertsService:
    """Single entry point the command layer and the scheduler talk to."""

    def __init__(
        self,
        store: UserStore,
        offers: OfferSource,
        chat: ChatClient,
        items: ItemCatalog,
        translator: Translator,
        throttle: Optional[Throttle] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self.store = store
        self.registry = AlertRegistry(store)
        self.prioritizer = AlertPrioritizer(self.registry, chat)
        self.reporter = AlertReporter(store, chat)
        self.sender = AlertSender(store, chat, items, translator)
        self.engine = NotificationCycleEngine(
            store, offers, self.sender, throttle or throttle_from_settings(self.settings)
        )

    async def init(self) -> None:
        ensure_indexes = getattr(self.store, "ensure_indexes", None)
        if ensure_indexes is not None:
            await ensure_indexes()

    async def add_alert(self, user_id: str, alert: Alert) -> None:
        await self.registry.add_alert(user_id, alert)

    async def alerts_for_user(self, user_id: str) -> List[Alert]:
        return await self.registry.alerts_for_user(user_id)

    async def alert_exists(self, user_id: str, item_id: str) -> Union[Alert, Literal[False]]:
        return await self.registry.alert_exists(user_id, item_id)

    async def remove_alert(self, user_id: str, item_id: str) -> bool:
        return await self.registry.remove_alert(user_id, item_id)

    async def filtered_alerts_for_user(self, user_id: str, origin: OriginContext) -> List[Alert]:
        return await self.prioritizer.prioritize(user_id, origin)

    async def alerts_per_channel_per_guild(self) -> GuildAggregate:
        return await self.reporter.build_aggregate()

    async def check_alerts(self) -> None:
        await self.engine.run_cycle()

    async def send_test_alert(self, origin: OriginContext) -> bool:
        return await self.sender.send_test_alert(origin)
