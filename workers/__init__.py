# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# work that should not hold up an API request.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (emails, schedule generation, sweeps)
# - config.py: Worker-specific settings and the beat schedule
#
# Usage:
#   # Start worker (both queues)
#   celery -A workers.celery_app worker -Q default,email --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import generate_schedules
#   result = generate_schedules.delay(4)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
