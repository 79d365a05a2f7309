"""CSV event log decoder: one EventRecord per well-formed line.

Expected format:
    11:35:23,scheduled task 032, START,37980

Timestamps are time-of-day values with no date. An optional day prefix
("1.00:05:00") is accepted; without it a job that crosses midnight ends
before it starts and the matcher reports it as such.
"""

import logging
import os
import re
from datetime import timedelta

from job_monitor.models import EventRecord

logger = logging.getLogger(__name__)

TIMESTAMP_PATTERN = re.compile(
    r"^(?:(\d+)\.)?(\d{1,2}):(\d{2}):(\d{2})(?:\.(\d{1,7}))?$"
)

MARKERS = {"START": True, "END": False}

_parse_errors = 0


def get_parse_error_count() -> int:
    return _parse_errors


def reset_parse_error_count():
    global _parse_errors
    _parse_errors = 0


def parse_timestamp(text: str) -> timedelta | None:
    """Parse [d.]hh:mm:ss[.fffffff] into a timedelta. Returns None if invalid."""
    match = TIMESTAMP_PATTERN.match(text.strip())
    if not match:
        return None

    days, hours, minutes, seconds, fraction = match.groups()
    hours, minutes, seconds = int(hours), int(minutes), int(seconds)
    if hours > 23 or minutes > 59 or seconds > 59:
        return None

    # 7 fractional digits is 100ns resolution; timedelta stops at microseconds
    micros = int((fraction or "0").ljust(7, "0")[:6])
    try:
        return timedelta(
            days=int(days or 0),
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            microseconds=micros,
        )
    except OverflowError:
        return None


def _skip(reason: str, line: str) -> None:
    global _parse_errors
    _parse_errors += 1
    logger.warning("%s in line: %s", reason, line)


def parse_line(line: str) -> EventRecord | None:
    """Parse a single log line into an EventRecord. Returns None for unparseable lines."""
    global _parse_errors
    stripped = line.rstrip("\r\n")
    if not stripped.strip():
        _parse_errors += 1
        logger.warning("Skipping empty line.")
        return None

    parts = stripped.split(",", 3)
    if len(parts) != 4:
        _skip("Invalid log format (expected 4 fields)", stripped)
        return None

    timestamp = parse_timestamp(parts[0])
    if timestamp is None:
        _skip(f"Invalid timestamp '{parts[0]}'", stripped)
        return None

    description = parts[1].strip()
    if not description:
        logger.warning("Empty job description in line: %s", stripped)

    marker = parts[2].strip().upper()
    if marker not in MARKERS:
        _skip(f"Unknown marker '{parts[2].strip()}'", stripped)
        return None

    try:
        pid = int(parts[3].strip())
    except ValueError:
        _skip(f"Invalid PID '{parts[3].strip()}'", stripped)
        return None

    return EventRecord(
        timestamp=timestamp,
        description=description,
        is_start=MARKERS[marker],
        pid=pid,
    )


def read_events(filepath: str) -> list[EventRecord]:
    """Read and decode every line of a log file, skipping malformed ones.

    Raises ValueError for an empty path and FileNotFoundError if the file
    does not exist.
    """
    if not filepath or not filepath.strip():
        raise ValueError("File path must be provided")

    if not os.path.isfile(filepath):
        logger.error("Log file not found: %s", filepath)
        raise FileNotFoundError(f"Log file not found: {filepath}")

    logger.info("Starting to parse log file: %s", filepath)
    events = []
    skipped_before = _parse_errors
    with open(filepath, "r", encoding="utf-8-sig", errors="replace") as f:
        for line in f:
            event = parse_line(line)
            if event is not None:
                events.append(event)

    logger.info(
        "Completed parsing log file: %s (%d events, %d skipped)",
        filepath, len(events), _parse_errors - skipped_before,
    )
    return events
