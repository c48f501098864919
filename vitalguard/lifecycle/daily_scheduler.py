"""
Daily summary scheduler

Uses APScheduler to fire the daily health summary once per local day.
The dispatcher enforces its own minimum spacing, so a late or repeated
firing never produces a second summary inside the cooldown.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from vitalguard.core.config import Config
from vitalguard.core.pipeline import MonitoringPipeline
from vitalguard.events.notification import Notification

logger = logging.getLogger(__name__)


class DailySummaryScheduler:
    """Background daily summary trigger.

    Example:
        >>> from vitalguard.core.config import load_config
        >>> config = load_config()
        >>> pipeline = MonitoringPipeline(config)
        >>> scheduler = DailySummaryScheduler(config, pipeline)
        >>> scheduler.start()
        >>> # ... application runs ...
        >>> scheduler.stop()
    """

    def __init__(self, config: Config, pipeline: MonitoringPipeline):
        self.config = config
        self.pipeline = pipeline

        self._scheduler: BackgroundScheduler | None = None
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> None:
        """Start the background trigger unless disabled in config."""
        schedule = self.config.schedule
        if not schedule.daily_summary_enabled:
            logger.info("Daily summary scheduler disabled (daily_summary_enabled=False)")
            return

        if self._is_running:
            logger.warning("Daily summary scheduler already running")
            return

        self._scheduler = BackgroundScheduler(daemon=True)
        trigger = CronTrigger(
            hour=schedule.daily_summary_hour,
            minute=schedule.daily_summary_minute,
        )
        self._scheduler.add_job(
            func=self._run_summary,
            trigger=trigger,
            id="daily_summary",
            name="Daily health summary",
            replace_existing=True,
        )
        self._scheduler.start()
        self._is_running = True

        logger.info(
            "Daily summary scheduler started: every day at "
            f"{schedule.daily_summary_hour:02d}:{schedule.daily_summary_minute:02d}"
        )

    def stop(self) -> None:
        if not self._is_running or self._scheduler is None:
            logger.info("Daily summary scheduler not running")
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self._is_running = False

        logger.info("Daily summary scheduler stopped")

    def run_now(self) -> Notification | None:
        """Fire the summary immediately (manual trigger)."""
        return self._run_summary()

    def _run_summary(self) -> Notification | None:
        notification = self.pipeline.run_daily_summary()
        if notification is None:
            logger.info("Daily summary skipped, within cooldown window")
        return notification
