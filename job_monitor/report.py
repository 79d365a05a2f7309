"""Report formatters — text (optionally ANSI-colored) and JSON."""

import json
from datetime import timedelta
from typing import Callable

from job_monitor.matcher import MatchResult
from job_monitor.models import JobRecord, Severity, format_timestamp

# ANSI color codes
COLORS = {
    Severity.INFO: "\033[32m",     # green
    Severity.WARNING: "\033[33m",  # yellow
    Severity.ERROR: "\033[31m",    # red
}
RESET = "\033[0m"

REPORT_HEADER = "Job Report"


def format_duration(value: timedelta) -> str:
    """mm:ss, or h:mm:ss once the duration reaches an hour."""
    total = int(value.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_job_line(job: JobRecord, color: bool = False) -> str:
    severity = job.severity.value
    if color:
        severity = f"{COLORS[job.severity]}{severity}{RESET}"
    return (
        f"PID: {job.pid} with Description: {job.description} - "
        f"ran for: {format_duration(job.duration)} "
        f"(from {format_timestamp(job.start_time)} to {format_timestamp(job.end_time)}) "
        f"[{severity}]"
    )


def format_report_text(result: MatchResult, color: bool = False) -> str:
    """Human-readable job report."""
    lines = [REPORT_HEADER]
    for job in result.jobs:
        lines.append(format_job_line(job, color=color))
    lines.append("")

    if result.anomalies:
        lines.append(f"Anomalies ({len(result.anomalies)}):")
        for anomaly in result.anomalies:
            lines.append(f"  - {anomaly.message()}")
    else:
        lines.append("No anomalies.")
    lines.append("")

    counts = result.severity_counts()
    summary = ", ".join(f"{level} {count}" for level, count in counts.items())
    lines.append(f"Jobs: {len(result.jobs)} ({summary})")
    return "\n".join(lines)


def format_report_json(result: MatchResult) -> str:
    """JSON report output."""
    return json.dumps({
        "jobs": [
            {
                "pid": job.pid,
                "description": job.description,
                "start_time": format_timestamp(job.start_time),
                "end_time": format_timestamp(job.end_time),
                "duration_seconds": job.duration.total_seconds(),
                "severity": job.severity.value,
            }
            for job in result.jobs
        ],
        "anomalies": [anomaly.to_dict() for anomaly in result.anomalies],
        "summary": {
            "total_jobs": len(result.jobs),
            "total_anomalies": len(result.anomalies),
            "severity_counts": result.severity_counts(),
        },
    }, indent=2)


def get_formatter(output_format: str = "text", color: bool = False) -> Callable[[MatchResult], str]:
    """Factory that returns the right formatter based on args."""
    if output_format == "json":
        return format_report_json
    if color:
        return lambda result: format_report_text(result, color=True)
    return format_report_text
