"""Event and job records: frozen dataclasses shared by the decoder, matcher and reporter."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum


class Severity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def log_level(self) -> int:
        return getattr(logging, self.value)


@dataclass(frozen=True)
class EventRecord:
    timestamp: timedelta   # offset from midnight
    description: str
    is_start: bool
    pid: int


@dataclass(frozen=True)
class JobRecord:
    pid: int
    description: str
    start_time: timedelta
    end_time: timedelta
    severity: Severity = Severity.INFO

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time


def format_timestamp(value: timedelta) -> str:
    """Render a time-of-day offset as hh:mm:ss, with d. prefix and fraction when present."""
    total_us = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    sign = "-" if total_us < 0 else ""
    seconds, micros = divmod(abs(total_us), 1_000_000)
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    text = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if micros:
        text += f".{micros:06d}".rstrip("0")
    if days:
        text = f"{days}.{text}"
    return sign + text
