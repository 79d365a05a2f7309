"""PeriodicWorker: re-runs the monitor on an APScheduler interval."""

import logging
import threading
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler

from job_monitor.runner import MonitorRunner

logger = logging.getLogger(__name__)

JOB_ID = "log-monitor-iteration"


class PeriodicWorker:
    """Runs one monitor iteration immediately, then every interval_hours.

    The scheduler job allows a single running instance and coalesces missed
    ticks, so iterations never overlap on the same log file. stop() only
    takes effect between iterations.
    """

    def __init__(self, runner: MonitorRunner, interval_hours: float, scheduler=None):
        if interval_hours <= 0:
            raise ValueError(f"interval_hours must be positive, got {interval_hours}")
        self._runner = runner
        self._interval_hours = interval_hours
        self._scheduler = scheduler or BackgroundScheduler()
        self._iterations = 0
        self._failures = 0
        self._lock = threading.Lock()

    @property
    def iterations(self) -> int:
        with self._lock:
            return self._iterations

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def run_iteration(self) -> int:
        """Run a single monitor pass. Never raises; returns the runner's exit code."""
        logger.info("Iteration started at %s", datetime.now().isoformat(timespec="seconds"))
        try:
            code = self._runner.run()
        except Exception:
            logger.error("Error during iteration", exc_info=True)
            code = 1

        with self._lock:
            self._iterations += 1
            if code != 0:
                self._failures += 1
        logger.info("Iteration completed at %s (exit code %d)",
                    datetime.now().isoformat(timespec="seconds"), code)
        return code

    def start(self):
        logger.info("LogMonitorWorker starting; running every %s hours", self._interval_hours)
        self._scheduler.add_job(
            self.run_iteration,
            "interval",
            hours=self._interval_hours,
            id=JOB_ID,
            next_run_time=datetime.now(),
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()

    def stop(self, wait: bool = True):
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        logger.info("LogMonitorWorker stopping. %d iterations, %d failed",
                    self.iterations, self.failures)
