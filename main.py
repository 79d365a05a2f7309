#!/usr/bin/env python3
"""job-log-monitor — reconstruct job runs from a START/END event log and flag long ones."""

import sys
import time
import signal
import logging
import argparse

from job_monitor.config import OUTPUT_FORMATS, load_config, load_yaml_config
from job_monitor.matcher import DuplicateStartPolicy
from job_monitor.runner import MonitorRunner
from job_monitor.worker import PeriodicWorker

logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, frame):
    global _running
    logger.info("Shutdown signal received, stopping...")
    _running = False


def _add_common_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--logs-folder", default=None,
        help="Folder containing the log file (default: Logs)",
    )
    parser.add_argument(
        "--log-file", dest="log_file_name", default=None,
        help="Log file name inside the logs folder (default: logs.log)",
    )
    parser.add_argument(
        "--warning-minutes", type=float, default=None,
        help="Jobs longer than this are reported as WARNING (default: 5)",
    )
    parser.add_argument(
        "--error-minutes", type=float, default=None,
        help="Jobs longer than this are reported as ERROR (default: 10)",
    )
    parser.add_argument(
        "--duplicate-policy", dest="duplicate_start_policy", default=None,
        choices=[p.value for p in DuplicateStartPolicy],
        help="How a second START for a pending PID is handled (default: last_wins)",
    )
    parser.add_argument(
        "--output", dest="output_format", default=None,
        choices=list(OUTPUT_FORMATS),
        help="Report format (default: text)",
    )
    parser.add_argument(
        "--color", action="store_true",
        help="Colorize job severity (ANSI)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="Logging level for diagnostics on stderr (default: INFO)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="job-log-monitor",
        description="Pair START/END job events from a log file and report durations.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="Analyze the log file once and print a report")
    _add_common_args(report)

    watch = sub.add_parser("watch", help="Re-analyze the log file on a fixed interval")
    _add_common_args(watch)
    watch.add_argument(
        "--interval-hours", type=float, default=None,
        help="Hours between iterations (default: 10)",
    )
    return parser


def _overrides(args) -> dict:
    keys = (
        "logs_folder", "log_file_name", "warning_minutes", "error_minutes",
        "duplicate_start_policy", "output_format", "log_level", "interval_hours",
    )
    return {key: getattr(args, key, None) for key in keys}


def run_watch(worker: PeriodicWorker) -> int:
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    worker.start()
    logger.info("Log monitor running. Press Ctrl+C to stop.")
    try:
        while _running:
            time.sleep(1)
    except KeyboardInterrupt:
        pass

    logger.info("Shutting down...")
    worker.stop(wait=True)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [MONITOR] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(load_yaml_config(args.config), _overrides(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))
    logger.info("Config: log_path=%s, warning=%.1f min, error=%.1f min, policy=%s",
                config.log_path, config.warning_minutes, config.error_minutes,
                config.duplicate_start_policy)

    runner = MonitorRunner(config, color=args.color)
    if args.command == "report":
        return runner.run()
    return run_watch(PeriodicWorker(runner, config.interval_hours))


if __name__ == "__main__":
    try:
        sys.exit(main())
    except BrokenPipeError:
        sys.exit(0)
