"""
Data models for the logs downloader.

Timestamps are integer Unix seconds throughout; conversion to datetime
happens only for file names and human-readable text.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utc_datetime(ts: int) -> datetime:
    """Convert Unix seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def format_timestamp(ts: int) -> str:
    """Render a timestamp as e.g. '2017-01-02 15:04:05 +0000 UTC'."""
    return utc_datetime(ts).strftime("%Y-%m-%d %H:%M:%S +0000 UTC")


@dataclass(frozen=True)
class SubInterval:
    """Half-open slice [start, end) of the global range."""
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    def describe(self) -> str:
        return f"{format_timestamp(self.start)} to {format_timestamp(self.end)}"


@dataclass
class DownloadMetadata:
    """Diagnostic sidecar written next to each log file."""
    time_range: str
    download_url: str
    response_headers: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the JSON sidecar schema."""
        return {
            "timeRange": self.time_range,
            "downloadURL": self.download_url,
            "responseHeaders": self.response_headers,
        }


@dataclass
class FetchedLogs:
    """Raw response of one logs API request."""
    url: str
    status_code: int
    content: bytes
    headers: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class DownloadResult:
    """Outcome of one completed sub-interval."""
    interval: SubInterval
    log_path: str
    metadata_path: Optional[str] = None
    size: int = 0


@dataclass
class RunSummary:
    """Aggregate statistics of a driver run."""
    intervals: int = 0
    bytes_written: int = 0
    checkpoint: Optional[int] = None
    results: list[DownloadResult] = field(default_factory=list)

    def record(self, result: DownloadResult) -> None:
        self.intervals += 1
        self.bytes_written += result.size
        self.checkpoint = result.interval.end
        self.results.append(result)

    def to_dict(self) -> dict:
        return {
            "intervals": self.intervals,
            "bytes_written": self.bytes_written,
            "checkpoint": self.checkpoint,
        }
