"""Tests for job_monitor/report.py"""

import json
from datetime import timedelta

from conftest import end, start
from job_monitor.matcher import MatchResult, match_jobs
from job_monitor.models import format_timestamp
from job_monitor.report import (
    RESET,
    format_duration,
    format_report_json,
    format_report_text,
    get_formatter,
)


def _result() -> MatchResult:
    return match_jobs([
        start(0, 42, "MyJob"), end(2.5, 42),
        start(1, 7, "slow job"), end(13, 7),
        end(20, 99, "stray"),
    ])


class TestFormatHelpers:
    def test_duration_minutes_seconds(self):
        assert format_duration(timedelta(minutes=2, seconds=30)) == "02:30"

    def test_duration_over_an_hour(self):
        assert format_duration(timedelta(hours=1, minutes=5, seconds=9)) == "1:05:09"

    def test_timestamp(self):
        assert format_timestamp(timedelta(hours=11, minutes=35, seconds=23)) == "11:35:23"

    def test_timestamp_with_fraction_and_days(self):
        assert format_timestamp(timedelta(milliseconds=250)) == "00:00:00.25"
        assert format_timestamp(timedelta(days=1, minutes=5)) == "1.00:05:00"


class TestFormatReportText:
    def test_header_only_when_empty(self):
        text = format_report_text(MatchResult())
        lines = text.split("\n")
        assert lines[0] == "Job Report"
        assert "No anomalies." in text
        assert "Jobs: 0" in text

    def test_job_line(self):
        text = format_report_text(_result())
        lines = text.split("\n")
        assert lines[1] == (
            "PID: 42 with Description: MyJob - ran for: 02:30 "
            "(from 00:00:00 to 00:02:30) [INFO]"
        )
        assert "[ERROR]" in lines[2]

    def test_anomaly_section(self):
        text = format_report_text(_result())
        assert "Anomalies (1):" in text
        assert "Unmatched END for PID 99 ('stray')" in text

    def test_summary_counts(self):
        text = format_report_text(_result())
        assert "Jobs: 2 (INFO 1, WARNING 0, ERROR 1)" in text

    def test_color(self):
        text = format_report_text(_result(), color=True)
        assert RESET in text
        assert "\033[31mERROR" in text


class TestFormatReportJson:
    def test_valid_json(self):
        parsed = json.loads(format_report_json(_result()))
        assert [j["pid"] for j in parsed["jobs"]] == [42, 7]
        assert parsed["jobs"][0]["duration_seconds"] == 150.0
        assert parsed["jobs"][1]["severity"] == "ERROR"
        assert parsed["anomalies"][0]["kind"] == "unmatched_end"
        assert parsed["summary"]["total_jobs"] == 2
        assert parsed["summary"]["severity_counts"]["ERROR"] == 1


class TestGetFormatter:
    def test_json(self):
        assert get_formatter("json") is format_report_json

    def test_text(self):
        assert get_formatter("text") is format_report_text

    def test_color_text(self):
        assert RESET in get_formatter("text", color=True)(_result())
