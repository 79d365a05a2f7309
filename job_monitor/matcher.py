"""Job matcher: pairs START/END events per PID into completed jobs.

Events are sorted by timestamp (stable, so same-timestamp events keep their
input order) and replayed against a per-call pending table keyed by PID.
Pairing irregularities are collected as anomaly values; none of them stop
the batch.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Iterable

from job_monitor.anomalies import (
    Anomaly,
    DuplicateStart,
    EndBeforeStart,
    UnmatchedEnd,
    UnmatchedStart,
)
from job_monitor.models import EventRecord, JobRecord, Severity

logger = logging.getLogger(__name__)


class DuplicateStartPolicy(str, Enum):
    LAST_WINS = "last_wins"     # newer START replaces the pending one
    KEEP_FIRST = "keep_first"   # newer START is dropped


@dataclass(frozen=True)
class Thresholds:
    warning: timedelta = timedelta(minutes=5)
    error: timedelta = timedelta(minutes=10)

    def __post_init__(self):
        if self.warning < timedelta(0) or self.error < timedelta(0):
            raise ValueError("Thresholds must not be negative")
        if self.warning > self.error:
            raise ValueError(
                f"Warning threshold ({self.warning}) exceeds error threshold ({self.error})"
            )

    @classmethod
    def from_minutes(cls, warning: float, error: float) -> "Thresholds":
        return cls(warning=timedelta(minutes=warning), error=timedelta(minutes=error))


DEFAULT_THRESHOLDS = Thresholds()


@dataclass(frozen=True)
class MatchResult:
    jobs: tuple[JobRecord, ...] = field(default_factory=tuple)
    anomalies: tuple[Anomaly, ...] = field(default_factory=tuple)

    def __iter__(self):
        # allows `jobs, anomalies = match_jobs(events)`
        return iter((self.jobs, self.anomalies))

    def severity_counts(self) -> dict[str, int]:
        counts = {s.value: 0 for s in Severity}
        for job in self.jobs:
            counts[job.severity.value] += 1
        return counts


def classify_duration(duration: timedelta, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> Severity:
    """Map a job duration to a severity. Upper bounds are inclusive."""
    if duration > thresholds.error:
        return Severity.ERROR
    if duration > thresholds.warning:
        return Severity.WARNING
    return Severity.INFO


def match_jobs(
    events: Iterable[EventRecord],
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
    duplicate_policy: DuplicateStartPolicy = DuplicateStartPolicy.LAST_WINS,
) -> MatchResult:
    """Pair START/END events into jobs and collect pairing anomalies.

    Jobs are returned in completion order, anomalies in detection order,
    with orphaned STARTs reported last. Raises ValueError if events is None.
    """
    if events is None:
        raise ValueError("events must not be None")

    ordered = sorted(events, key=lambda e: e.timestamp)
    pending: dict[int, EventRecord] = {}
    jobs: list[JobRecord] = []
    anomalies: list[Anomaly] = []
    # pid -> index of its UnmatchedEnd, while that END is the pid's latest event
    dangling_ends: dict[int, int] = {}
    # pid -> index of the UnmatchedEnd directly preceding its pending START
    reversed_pairs: dict[int, int] = {}

    for event in ordered:
        if event.is_start:
            end_index = dangling_ends.pop(event.pid, None)
            previous = pending.get(event.pid)
            if previous is None:
                pending[event.pid] = event
                if end_index is not None:
                    reversed_pairs[event.pid] = end_index
                continue

            anomalies.append(DuplicateStart(pid=event.pid, old=previous, new=event))
            reversed_pairs.pop(event.pid, None)
            if duplicate_policy is DuplicateStartPolicy.KEEP_FIRST:
                continue
            # re-insert so orphan reporting follows the latest START
            del pending[event.pid]
            pending[event.pid] = event
            continue

        dangling_ends.pop(event.pid, None)
        reversed_pairs.pop(event.pid, None)
        start = pending.pop(event.pid, None)
        if start is None:
            dangling_ends[event.pid] = len(anomalies)
            anomalies.append(UnmatchedEnd(pid=event.pid, event=event))
            continue

        if event.timestamp < start.timestamp:
            anomalies.append(EndBeforeStart(pid=event.pid, start=start, end=event))
            continue

        duration = event.timestamp - start.timestamp
        jobs.append(JobRecord(
            pid=event.pid,
            description=start.description,
            start_time=start.timestamp,
            end_time=event.timestamp,
            severity=classify_duration(duration, thresholds),
        ))

    # After sorting, an END logged before its own START (e.g. across midnight)
    # shows up as an unmatched END followed by an orphaned START.
    orphans = 0
    for orphan in pending.values():
        end_index = reversed_pairs.get(orphan.pid)
        if end_index is not None:
            end = anomalies[end_index].event
            if end.timestamp < orphan.timestamp:
                anomalies[end_index] = EndBeforeStart(pid=orphan.pid, start=orphan, end=end)
                continue
        orphans += 1
        anomalies.append(UnmatchedStart(pid=orphan.pid, start=orphan))

    logger.debug(
        "Matched %d events: %d jobs, %d anomalies (%d orphaned starts)",
        len(ordered), len(jobs), len(anomalies), orphans,
    )
    return MatchResult(jobs=tuple(jobs), anomalies=tuple(anomalies))
