"""
Celery application configuration.
Configures Redis broker, the polling queue, and the beat schedule that
fires one public API poll per tick.

Note: On Windows, Celery's prefork pool doesn't work properly.
Use --pool=solo or --pool=threads on Windows.

=============================================================================
RUNNING
=============================================================================
    Worker:
        celery -A api_logger.celery_app worker -Q polling,default -l info -n poll@%h

    Beat (scheduler):
        celery -A api_logger.celery_app beat -l info

IMPORTANT: When running workers manually, set AUTO_START_CELERY=false in your
.env file. Otherwise FastAPI will auto-start a duplicate worker and beat, and
every tick will be scheduled twice.

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================
    POLL_ENABLED: "true" or "false" — master on/off for the beat entry (default: true)
    POLL_CRON_MINUTE: crontab minute field for the poll (default: "*", every minute)
    POLL_EXCLUSIVE: "true" to skip a tick while another poll is running (default: false)
    PUBLIC_API_URL: endpoint polled on each tick
"""
import logging
import platform

from celery import Celery
from celery.schedules import crontab
from kombu import Queue

from api_logger.core.config import settings

logger = logging.getLogger(__name__)

IS_WINDOWS = platform.system() == "Windows"

POLL_ENABLED = settings.poll_enabled
POLL_CRON_MINUTE = settings.poll_cron_minute
POLL_EXCLUSIVE = settings.poll_exclusive

POLL_TASK_NAME = "tasks.polling.fetch_and_store"


def _build_beat_schedule() -> dict:
    """Build Celery Beat schedule based on poll settings."""
    if not POLL_ENABLED:
        return {}

    return {
        "poll-public-api": {
            "task": POLL_TASK_NAME,
            "schedule": crontab(minute=POLL_CRON_MINUTE),
            "options": {"queue": "polling"},
        },
    }


def _log_poll_config():
    """Log poll scheduler configuration at startup."""
    border = "=" * 60

    print(f"\n{border}")
    if not POLL_ENABLED:
        print("  POLL SCHEDULER: DISABLED")
        print(border)
        print("  POLL_ENABLED=false; no poll tasks will be scheduled by Celery Beat.")
        print("  /logs endpoints keep serving previously recorded attempts.")
        print(border)
        return

    print("  POLL SCHEDULER: ENABLED")
    print(border)
    print(f"  Endpoint: {settings.public_api_url}")
    print(f"  Schedule: crontab minute={POLL_CRON_MINUTE}")
    print(f"  Exclusive ticks: {'ON (Redis lock)' if POLL_EXCLUSIVE else 'OFF'}")
    print(f"  Attempt log table: {settings.attempt_log_table}")
    print(f"  Payload bucket: {settings.payload_bucket}")
    print(border)


_log_poll_config()

celery_app = Celery(
    "api_logger",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "api_logger.celery_app.tasks.polling",
    ]
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Early ack: a lost worker drops its tick instead of redelivering it
    task_acks_late=False,
    worker_prefetch_multiplier=1,

    task_queues=(
        Queue("polling"),
        Queue("default"),
    ),
    task_routes={
        "tasks.polling.*": {"queue": "polling"},
    },
    task_default_queue="default",

    beat_schedule=_build_beat_schedule(),

    result_expires=3600,

    # Failed polls are recorded, never retried
    task_max_retries=0,

    worker_pool="solo" if IS_WINDOWS else "prefork",

    worker_log_format="[%(asctime)s: %(levelname)s/%(processName)s] %(message)s",
    worker_task_log_format="[%(asctime)s: %(levelname)s/%(processName)s] [%(task_name)s] %(message)s",
)
