"""Shared pytest fixtures for the job-log-monitor test suite."""

from __future__ import annotations

import os
from datetime import timedelta

import pytest

from job_monitor.config import Config
from job_monitor.models import EventRecord

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")
SAMPLE_LOG = os.path.join(FIXTURES_DIR, "sample.log")


def start(minutes: float, pid: int, description: str = "job") -> EventRecord:
    return EventRecord(timestamp=timedelta(minutes=minutes), description=description,
                       is_start=True, pid=pid)


def end(minutes: float, pid: int, description: str = "job") -> EventRecord:
    return EventRecord(timestamp=timedelta(minutes=minutes), description=description,
                       is_start=False, pid=pid)


@pytest.fixture()
def sample_log_path() -> str:
    return SAMPLE_LOG


@pytest.fixture()
def sample_config() -> Config:
    """Config pointing at the bundled sample log."""
    return Config(logs_folder=FIXTURES_DIR, log_file_name="sample.log")


@pytest.fixture()
def write_log(tmp_path):
    """Write lines to a temporary log file and return its path."""
    def _write(lines: list[str], name: str = "logs.log") -> str:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def _clear_monitor_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("LOG_MONITOR_"):
            monkeypatch.delenv(name, raising=False)
