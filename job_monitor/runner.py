"""MonitorRunner: one batch from log file to printed report."""

import os
import sys
import logging
from typing import TextIO

from job_monitor.config import Config
from job_monitor.matcher import MatchResult, match_jobs
from job_monitor.parser import read_events
from job_monitor.report import get_formatter

logger = logging.getLogger(__name__)


class MonitorRunner:
    def __init__(self, config: Config, output: TextIO | None = None, color: bool = False):
        if config is None:
            raise ValueError("config must not be None")
        self._config = config
        self._output = output if output is not None else sys.stdout
        self._formatter = get_formatter(config.output_format, color=color)

    @property
    def config(self) -> Config:
        return self._config

    def run_once(self) -> MatchResult:
        """Read, decode and match the configured log file. Errors propagate."""
        log_path = self._config.log_path
        os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
        logger.info("Reading log from %s", log_path)

        events = read_events(log_path)
        logger.info("Parsed %d entries", len(events))

        result = match_jobs(
            events,
            thresholds=self._config.thresholds(),
            duplicate_policy=self._config.policy,
        )
        logger.info("Analyzed %d jobs, %d anomalies", len(result.jobs), len(result.anomalies))

        for anomaly in result.anomalies:
            logger.warning(anomaly.message())
        for job in result.jobs:
            logger.log(
                job.severity.log_level,
                "Job '%s' (PID %d) took %.2f min",
                job.description, job.pid, job.duration.total_seconds() / 60,
            )
        return result

    def run(self) -> int:
        """Run one batch and write the report. Returns a process exit code."""
        try:
            result = self.run_once()
        except Exception:
            logger.critical("Fatal error", exc_info=True)
            return 1

        print(self._formatter(result), file=self._output)
        return 0
