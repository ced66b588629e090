"""
Background scheduler.
Handles:
- Periodic eviction of expired cache entries
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from incentives.cache import TTLCache
from incentives.constants import CACHE_EVICTION_INTERVAL_MINUTES

logger = logging.getLogger("incentives.scheduler")


def run_cache_eviction(cache: TTLCache) -> int:
    """Job: drop expired cache entries"""
    try:
        removed = cache.evict_expired()
        if removed:
            logger.info(f"Cache eviction removed {removed} entries")
        return removed
    except Exception as e:
        logger.error(f"Scheduler Error (Cache eviction): {e}")
        return 0


def start_scheduler(scheduler: AsyncIOScheduler, cache: TTLCache) -> None:
    """Register jobs and start the scheduler"""
    if scheduler.running:
        return

    scheduler.add_job(
        run_cache_eviction,
        IntervalTrigger(minutes=CACHE_EVICTION_INTERVAL_MINUTES),
        args=[cache],
        id="cache_eviction",
        replace_existing=True
    )
    scheduler.start()
    logger.info(">>> APScheduler STARTED <<<")
    logger.info(f"Scheduled jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler(scheduler: AsyncIOScheduler) -> None:
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("APScheduler stopped")
