"""
The alert cycle.

One call to `run_cycle` walks every user once, in store order, one user at a
time: fetch the user's shop, notify the alerts that came up, and wait on the
throttle before the next user. A shop in maintenance stops the whole cycle;
expired credentials remove the user. Nothing escapes to the caller.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List

from ...core.logging_config import correlation_context
from ...core.throttle import Throttle
from ...shared.exceptions import InvalidCredentialsError, UpstreamMaintenanceError
from ...shared.interfaces import OfferSource, UserStore
from .models import Alert, OfferSnapshot
from .senders import AlertSender

logger = logging.getLogger(__name__)


@dataclass
class CycleStats:
    users_seen: int = 0
    users_checked: int = 0
    alerts_sent: int = 0
    credentials_expired: List[str] = field(default_factory=list)
    failed_users: List[str] = field(default_factory=list)
    aborted: bool = False


class NotificationCycleEngine:
    """Sequential, throttled batch check of every user's shop."""

    def __init__(self, store: UserStore, offers: OfferSource, sender: AlertSender, throttle: Throttle):
        self.store = store
        self.offers = offers
        self.sender = sender
        self.throttle = throttle
        self.last_stats: CycleStats = CycleStats()

    async def run_cycle(self) -> None:
        stats = CycleStats()
        self.last_stats = stats
        cycle_id = correlation_context.new_correlation_id()
        started = time.monotonic()
        logger.info("Checking new shop items for alerts...", extra={"operation": "alert_cycle"})

        try:
            for user_id in await self.store.get_user_list():
                stats.users_seen += 1
                correlation_context.set_user_id(user_id)
                try:
                    processed = await self._process_user(user_id, stats)
                except UpstreamMaintenanceError:
                    stats.aborted = True
                    logger.warning("Shop is under maintenance, stopping this alert cycle")
                    return
                except Exception as e:
                    processed = True
                    stats.failed_users.append(user_id)
                    logger.error(
                        f"There was an error while trying to fetch and send alerts for user {user_id}: {e}",
                        exc_info=True,
                        extra={"user_id": user_id},
                    )
                finally:
                    correlation_context.set_user_id(None)

                if processed:
                    await self.throttle.wait()
        except Exception as e:
            logger.error(f"There was an error while trying to send alerts! {e}", exc_info=True)
        finally:
            logger.info(
                "Alert cycle %s finished: %d users, %d checked, %d alerts sent, %d expired, %d errors%s",
                cycle_id,
                stats.users_seen,
                stats.users_checked,
                stats.alerts_sent,
                len(stats.credentials_expired),
                len(stats.failed_users),
                " (aborted for maintenance)" if stats.aborted else "",
                extra={"operation": "alert_cycle", "duration_ms": (time.monotonic() - started) * 1000},
            )
            correlation_context.set_correlation_id(None)

    async def _process_user(self, user_id: str, stats: CycleStats) -> bool:
        """Check one user. Returns False when there was nothing to check."""
        user = await self.store.get_user(user_id)
        if user is None or not user.alerts:
            return False
        alerts = user.alerts

        snapshot = await self.offers.get_offers(user_id)
        stats.users_checked += 1

        if snapshot.is_maintenance:
            raise UpstreamMaintenanceError(user_id)

        if not snapshot.success:
            await self._handle_expired_credentials(InvalidCredentialsError(user_id), alerts, stats)
            return True

        positive_alerts = self.positive_alerts(alerts, snapshot)
        if positive_alerts:
            stats.alerts_sent += await self.sender.send_offer_alert(user_id, positive_alerts, snapshot.expires)
        return True

    async def _handle_expired_credentials(
        self, error: InvalidCredentialsError, alerts: List[Alert], stats: CycleStats
    ) -> None:
        user_id = error.user_id
        logger.info(f"{error}, notifying and removing user")
        channels_sent = set()
        for alert in alerts:
            if alert.channel_id in channels_sent:
                continue
            await self.sender.send_credentials_expired(user_id, alert)
            channels_sent.add(alert.channel_id)

        await self.store.delete_user(user_id)
        stats.credentials_expired.append(user_id)

    @staticmethod
    def positive_alerts(alerts: List[Alert], snapshot: OfferSnapshot) -> List[Alert]:
        return [alert for alert in alerts if snapshot.contains(alert.item_id)]
