from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Dict, Optional

from celery import shared_task

from ...core.celery_config import CHECK_ALERTS_TASK, celery_app  # noqa: F401
from ...core.config import settings
from .service import AlertsService


logger = logging.getLogger(__name__)

ServiceFactory = Callable[[], Awaitable[AlertsService]]

_service_factory: Optional[ServiceFactory] = None


def register_service_factory(factory: Optional[ServiceFactory]) -> None:
    """Set how a worker builds its AlertsService.

    The shop and the item catalog live outside this package, so the process
    embedding shopwatch has to wire them in before the first cycle runs.
    """
    global _service_factory
    _service_factory = factory


async def _get_service() -> Optional[AlertsService]:
    if _service_factory is None:
        return None
    service = await _service_factory()
    await service.init()
    return service


@shared_task(bind=True, name=CHECK_ALERTS_TASK)
def check_alerts(self) -> Dict[str, Any]:
    """Run one alert cycle over every user.
    Safe to enable only when settings.alerts_enabled is True.
    """
    if not settings.alerts_enabled:
        logger.info("Alerts disabled, skipping check_alerts")
        return {"skipped": True}

    async def _run() -> Optional[Dict[str, Any]]:
        service = await _get_service()
        if service is None:
            logger.warning("No alerts service factory registered, skipping check_alerts")
            return None
        await service.check_alerts()
        return asdict(service.engine.last_stats)

    stats = asyncio.run(_run())
    if stats is None:
        return {"skipped": True}
    return {"skipped": False, **stats}
