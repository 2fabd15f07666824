from __future__ import annotations

import logging
from typing import List, Literal, Union

from ...shared.exceptions import UserNotFoundError
from ...shared.interfaces import UserStore
from .models import Alert, User

logger = logging.getLogger(__name__)


class AlertRegistry:
    """CRUD over each user's watched items.

    A user should hold at most one alert per item. `add_alert` does not check
    this; callers look the item up with `alert_exists` first.
    """

    def __init__(self, store: UserStore):
        self.store = store

    async def _require_user(self, user_id: str) -> User:
        user = await self.store.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def add_alert(self, user_id: str, alert: Alert) -> None:
        user = await self.store.get_user(user_id)
        if user is None:
            logger.debug("Not adding alert for unknown user %s", user_id)
            return
        user.alerts.append(alert)
        await self.store.save_user(user)

    async def alerts_for_user(self, user_id: str) -> List[Alert]:
        user = await self._require_user(user_id)
        return user.alerts

    async def alert_exists(self, user_id: str, item_id: str) -> Union[Alert, Literal[False]]:
        for alert in await self.alerts_for_user(user_id):
            if alert.item_id == item_id:
                return alert
        return False

    async def remove_alert(self, user_id: str, item_id: str) -> bool:
        user = await self._require_user(user_id)
        alert_count = len(user.alerts)
        user.alerts = [alert for alert in user.alerts if alert.item_id != item_id]
        await self.store.save_user(user)
        return alert_count > len(user.alerts)
