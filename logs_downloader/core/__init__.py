"""
Core layer - stable foundation for the downloader.

Components:
- models: SubInterval, DownloadMetadata, DownloadResult dataclasses
- partition: Range partitioning into sub-intervals
- http_client: Single-attempt logs API client
- storage: Atomic log file and sidecar writing
- checkpoint: Resume point persistence
"""

from .models import SubInterval, DownloadMetadata, DownloadResult, FetchedLogs, RunSummary
from .errors import (
    DownloaderError,
    ConfigError,
    CheckpointError,
    TransportError,
    APIError,
    StorageError,
)
from .partition import iter_subintervals, count_subintervals, align_down
from .durations import parse_duration, format_duration
from .checkpoint import CheckpointStore

__all__ = [
    "SubInterval",
    "DownloadMetadata",
    "DownloadResult",
    "FetchedLogs",
    "RunSummary",
    "DownloaderError",
    "ConfigError",
    "CheckpointError",
    "TransportError",
    "APIError",
    "StorageError",
    "iter_subintervals",
    "count_subintervals",
    "align_down",
    "parse_duration",
    "format_duration",
    "CheckpointStore",
]
