# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Settings specific to Celery workers and the beat scheduler.
# =============================================================================

from celery.schedules import crontab

from app.config import settings


class CeleryConfig:
    """
    Celery configuration settings.

    These are applied to the Celery app via app.config_from_object().
    """

    # -------------------------------------------------------------------------
    # Broker Settings (Redis)
    # -------------------------------------------------------------------------

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # -------------------------------------------------------------------------
    # Task Settings
    # -------------------------------------------------------------------------

    # Acknowledge tasks after they complete (not before)
    task_acks_late = True

    # Only prefetch one task at a time
    worker_prefetch_multiplier = 1

    # Results are polled through /api/v1/tasks for a day at most
    result_expires = 86400

    # Schedule generation for a full year can be slow
    task_time_limit = 600
    task_soft_time_limit = 540

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Task Routing
    # -------------------------------------------------------------------------

    task_queues = {
        "default": {
            "exchange": "default",
            "routing_key": "default",
        },
        "email": {
            "exchange": "email",
            "routing_key": "email",
        },
    }

    # Email sends get their own queue so a mail outage can't block generation
    task_routes = {
        "workers.tasks.send_notification_email": {"queue": "email"},
    }

    task_default_queue = "default"

    # -------------------------------------------------------------------------
    # Retry Settings
    # -------------------------------------------------------------------------

    task_annotations = {
        "*": {
            "max_retries": 3,
            "default_retry_delay": 60,
        }
    }

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    worker_send_task_events = True
    task_send_sent_event = True

    # -------------------------------------------------------------------------
    # Timezone and Beat
    # -------------------------------------------------------------------------

    # Crontab entries below are in business-local time
    timezone = settings.BUSINESS_TIMEZONE
    enable_utc = True

    beat_schedule = {
        "sweep-certification-statuses": {
            "task": "workers.tasks.sweep_certification_statuses",
            "schedule": crontab(hour=5, minute=0),
        },
        "send-overtime-alerts": {
            "task": "workers.tasks.send_overtime_alerts",
            "schedule": crontab(minute=0),
        },
    }
