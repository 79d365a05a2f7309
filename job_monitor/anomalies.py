"""Pairing anomalies reported by the job matcher.

These are plain values returned alongside the completed jobs, never raised.
Each carries enough context (PID, description, timestamps) to be logged or
rendered without going back to the event batch.
"""

from dataclasses import dataclass
from typing import ClassVar

from job_monitor.models import EventRecord, format_timestamp


def _ts(event: EventRecord) -> str:
    return format_timestamp(event.timestamp)


def _event_dict(event: EventRecord) -> dict:
    return {
        "timestamp": _ts(event),
        "description": event.description,
        "is_start": event.is_start,
        "pid": event.pid,
    }


@dataclass(frozen=True)
class Anomaly:
    kind: ClassVar[str] = "anomaly"
    pid: int

    def message(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict:
        return {"kind": self.kind, "pid": self.pid, "message": self.message()}


@dataclass(frozen=True)
class DuplicateStart(Anomaly):
    kind: ClassVar[str] = "duplicate_start"
    old: EventRecord
    new: EventRecord

    def message(self) -> str:
        return (
            f"Duplicate START for PID {self.pid} ('{self.new.description}') at "
            f"{_ts(self.new)}; previous at {_ts(self.old)}."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["old"] = _event_dict(self.old)
        data["new"] = _event_dict(self.new)
        return data


@dataclass(frozen=True)
class UnmatchedEnd(Anomaly):
    kind: ClassVar[str] = "unmatched_end"
    event: EventRecord

    def message(self) -> str:
        return (
            f"Unmatched END for PID {self.pid} ('{self.event.description}') "
            f"at {_ts(self.event)}."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["event"] = _event_dict(self.event)
        return data


@dataclass(frozen=True)
class EndBeforeStart(Anomaly):
    kind: ClassVar[str] = "end_before_start"
    start: EventRecord
    end: EventRecord

    def message(self) -> str:
        return (
            f"END before START for PID {self.pid} ('{self.start.description}'): "
            f"start={_ts(self.start)}, end={_ts(self.end)}."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["start"] = _event_dict(self.start)
        data["end"] = _event_dict(self.end)
        return data


@dataclass(frozen=True)
class UnmatchedStart(Anomaly):
    kind: ClassVar[str] = "unmatched_start"
    start: EventRecord

    def message(self) -> str:
        return (
            f"No matching END for PID {self.pid} ('{self.start.description}') "
            f"at {_ts(self.start)}."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["start"] = _event_dict(self.start)
        return data
