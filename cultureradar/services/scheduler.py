"""
Background scheduler for the periodic ingestion of external events.

The job runs on APScheduler's own thread pool, never on request threads, and
at most one ingestion pass runs at a time.
"""

import logging
from datetime import datetime
from typing import Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..config.environment import APP_TIMEZONE
from ..config.ingestion import IngestionConfig
from .ingestion import run_ingestion

logger = logging.getLogger(__name__)

INGESTION_JOB_ID = 'ingest_external_events'

# Global scheduler instance
scheduler: Optional[BackgroundScheduler] = None


def _on_job_error(event):
    logger.error(
        "Scheduled job FAILED: job_id=%s error=%s",
        event.job_id, event.exception,
    )
    if event.traceback:
        logger.error("Traceback for job %s:\n%s", event.job_id, event.traceback)


def _on_job_missed(event):
    logger.warning(
        "Scheduled job MISSED: job_id=%s scheduled_run_time=%s",
        event.job_id,
        event.scheduled_run_time,
    )


def scheduled_ingestion():
    """Job body: one pass over every enabled source."""
    report = run_ingestion()
    logger.info(f"Scheduled ingestion added {report.total_new} new events")


def init_scheduler(config: Optional[IngestionConfig] = None) -> Optional[BackgroundScheduler]:
    """
    Start the background scheduler with the ingestion job.

    Called once from the application lifespan. Returns None when ingestion
    is disabled.
    """
    global scheduler

    config = config or IngestionConfig()
    if not config.enabled:
        logger.info("Scheduled ingestion is disabled")
        return None

    if scheduler is not None:
        logger.warning("Scheduler already initialized")
        return scheduler

    config.validate()
    scheduler = BackgroundScheduler(
        timezone=APP_TIMEZONE,
        job_defaults={
            'coalesce': True,  # Combine missed executions
            'max_instances': 1,  # Only one ingestion pass at a time
            'misfire_grace_time': 300,
        }
    )

    job_options = {}
    if config.run_on_startup:
        job_options['next_run_time'] = datetime.now(scheduler.timezone)

    scheduler.add_job(
        func=scheduled_ingestion,
        trigger=IntervalTrigger(hours=config.interval_hours),
        id=INGESTION_JOB_ID,
        name='Ingest External Events',
        replace_existing=True,
        **job_options
    )
    logger.info(f"Scheduled job: {INGESTION_JOB_ID} (every {config.interval_hours} hours)")

    scheduler.add_listener(_on_job_error, EVENT_JOB_ERROR)
    scheduler.add_listener(_on_job_missed, EVENT_JOB_MISSED)

    scheduler.start()
    logger.info("Background scheduler started successfully")
    return scheduler


def shutdown_scheduler():
    """Stop the scheduler, waiting for a running pass to finish."""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown(wait=True)
        logger.info("Background scheduler shutdown complete")
        scheduler = None


def get_scheduler() -> Optional[BackgroundScheduler]:
    return scheduler
