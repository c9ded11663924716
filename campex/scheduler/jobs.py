"""CAMPEX — Scheduler Jobs.

APScheduler daily job that runs a full (non-test) export at the configured hour.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from campex.config import settings
from campex.pipeline.export import run_configured_export
from campex.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def daily_export_job():
    """Export every campaign with the configured filters."""
    logger.info("Scheduled daily export starting...")
    try:
        document = await run_configured_export(
            config=settings.export_config(test_mode=False)
        )
        summary = document["summary"]
        logger.info(
            f"Scheduled export complete. {summary['totalKept']} campaigns kept, "
            f"{summary['totalWithErrors']} with relationship errors"
        )
    except Exception as e:
        logger.error(f"Scheduled export failed: {e}")


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        daily_export_job,
        "cron",
        hour=settings.export_hour,
        minute=0,
        id="daily_export",
        replace_existing=True,
        misfire_grace_time=3600,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Daily export at {settings.export_hour}:00 UTC")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
