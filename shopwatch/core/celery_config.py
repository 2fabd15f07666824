"""
Celery configuration for the scheduled alert check.
"""

from typing import List
from datetime import timedelta
import logging
from celery import Celery
from celery.signals import task_prerun, task_postrun, task_failure, worker_process_init
from .config import settings

logger = logging.getLogger(__name__)

ALERTS_QUEUE = "alerts"
CHECK_ALERTS_TASK = "shopwatch.domains.alerts.tasks.check_alerts"


class CeleryConfig:
    """Celery configuration class."""

    # Task execution settings
    task_time_limit = 60 * 60  # a full cycle over many users is slow
    task_soft_time_limit = 55 * 60
    task_acks_late = True
    task_reject_on_worker_lost = True
    task_track_started = True

    # Serialization settings
    task_serializer = "json"
    accept_content = ["json"]
    result_serializer = "json"

    timezone = "UTC"
    enable_utc = True
    result_expires = 60 * 60 * 24

    # One cycle at a time per worker
    worker_prefetch_multiplier = 1
    worker_max_tasks_per_child = 100
    worker_hijack_root_logger = False
    worker_log_color = False

    broker_connection_retry_on_startup = True

    task_routes = {
        "shopwatch.domains.alerts.tasks.*": {"queue": ALERTS_QUEUE},
    }
    task_default_queue = "default"

    beat_schedule = {}
    if settings.alerts_enabled:
        beat_schedule.update({
            "alerts-check-shops": {
                "task": CHECK_ALERTS_TASK,
                "schedule": timedelta(minutes=settings.alerts_check_interval_minutes),
                "options": {
                    "queue": ALERTS_QUEUE,
                    # A late cycle is dropped rather than stacked behind the next one
                    "expires": settings.alerts_check_interval_minutes * 60,
                },
            },
        })


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Returns:
        Configured Celery application instance
    """
    includes: List[str] = []
    if settings.alerts_enabled:
        includes.append("shopwatch.domains.alerts.tasks")

    celery_app = Celery(
        "shopwatch",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
        include=includes,
    )
    celery_app.config_from_object(CeleryConfig)
    setup_signal_handlers(celery_app)

    logger.info("Celery application created and configured")
    return celery_app


def setup_signal_handlers(celery_app: Celery) -> None:
    """Set up Celery signal handlers for logging."""

    @worker_process_init.connect
    def worker_process_init_handler(**kwargs):
        from .logging_config import setup_logging
        setup_logging()

    @task_prerun.connect
    def task_prerun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, **kwds):
        logger.info(f"Task {task.name} [{task_id}] started")

    @task_postrun.connect
    def task_postrun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, retval=None, state=None, **kwds):
        logger.info(f"Task {task.name} [{task_id}] completed with state: {state}")

    @task_failure.connect
    def task_failure_handler(sender=None, task_id=None, exception=None, traceback=None, einfo=None, **kwds):
        logger.error(f"Task {sender.name} [{task_id}] failed: {exception}")


celery_app = create_celery_app()
