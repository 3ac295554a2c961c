"""
Error taxonomy for the downloader.

Every failure is fatal to the current run. Library code raises these and
only the CLI entry point turns them into an exit status.
"""

from typing import Optional


class DownloaderError(Exception):
    """Base class for all downloader failures."""


class ConfigError(DownloaderError):
    """Invalid or missing configuration option."""


class CheckpointError(DownloaderError):
    """Checkpoint file missing, unreadable or corrupt."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class TransportError(DownloaderError):
    """Request could not be built or sent."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class APIError(DownloaderError):
    """Remote API answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"Received non-2xx status code: {status_code}")
        self.status_code = status_code
        self.url = url


class StorageError(DownloaderError):
    """Writing or renaming a local file failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
