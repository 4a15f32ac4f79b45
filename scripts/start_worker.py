#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Celery Worker Entry Point
# =============================================================================
# Starts a Celery worker that consumes both the default and email queues,
# with the beat scheduler embedded so the daily certification sweep runs.
#
# Usage:
#   python scripts/start_worker.py
#
#   # Or use Celery CLI directly (separate beat process in production)
#   celery -A workers.celery_app worker -Q default,email --loglevel=info
#   celery -A workers.celery_app beat --loglevel=info
#
# Prerequisites:
#   - Redis must be running
#   - Environment variables must be set (.env file)
# =============================================================================

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workers.celery_app import celery_app


def main():
    """Start a worker with an embedded beat scheduler."""
    print("=" * 60)
    print("RangeOps Celery Worker")
    print("=" * 60)
    print()
    print("Queues: default, email")
    print("Press Ctrl+C to stop")
    print()

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "--queues=default,email",
        "--concurrency=2",
        "--beat",  # only run one worker with --beat
    ])


if __name__ == "__main__":
    main()
