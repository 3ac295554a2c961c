"""
Driver for the download pipeline.

Coordinates:
- Partitioning of the global range into sub-intervals
- One fetch per sub-interval, strictly in chronological order
- Atomic log file publication and optional metadata sidecar
- Checkpoint advance after each completed sub-interval
"""

from typing import Optional

import httpx
import structlog

from .config.settings import DownloaderConfig
from .core.checkpoint import CheckpointStore
from .core.errors import StorageError
from .core.http_client import LogsClient
from .core.models import DownloadMetadata, DownloadResult, RunSummary, SubInterval
from .core.partition import count_subintervals, iter_subintervals
from .core.storage import log_path, write_atomic, write_metadata

logger = structlog.get_logger(__name__)


class Downloader:
    """
    Sequential downloader over the configured time range.

    The first failure propagates out of run(); the checkpoint then still
    points at the end of the last completed sub-interval.
    """

    def __init__(
        self,
        config: DownloaderConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize downloader.

        Args:
            config: Validated configuration
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.client = LogsClient(
            base_url=config.url,
            auth_email=config.auth_email,
            auth_key=config.auth_key,
            timeout=config.timeout,
            transport=transport,
        )
        self.checkpoint = CheckpointStore(config.directory)

    def run(self) -> RunSummary:
        """
        Download every sub-interval of the configured range.

        Returns:
            RunSummary of the completed run

        Raises:
            DownloaderError: On the first failed sub-interval
        """
        config = self.config
        total = count_subintervals(config.start, config.end, config.interval, align=config.align)

        logger.info("starting_download", total=total, **config.to_dict())

        summary = RunSummary()
        with self.client:
            for index, interval in enumerate(
                iter_subintervals(config.start, config.end, config.interval, align=config.align)
            ):
                logger.info(
                    "downloading_interval",
                    index=index + 1,
                    total=total,
                    time_range=interval.describe(),
                )
                result = self.download_interval(interval)
                summary.record(result)

        logger.info("download_complete", **summary.to_dict())
        return summary

    def download_interval(self, interval: SubInterval) -> DownloadResult:
        """
        Fetch and persist one sub-interval, then advance the checkpoint.

        Args:
            interval: Sub-interval to download

        Returns:
            DownloadResult describing the written files
        """
        logs = self.client.fetch(interval.start, interval.end)

        path = log_path(self.config.directory, interval.start)
        size = write_atomic(path, logs.content)
        logger.info("saved_log_file", path=str(path), size=size)

        self.checkpoint.save(interval.end)

        sidecar = None
        if self.config.write_metadata:
            metadata = DownloadMetadata(
                time_range=interval.describe(),
                download_url=logs.url,
                response_headers=logs.headers,
            )
            try:
                sidecar = str(write_metadata(path, metadata))
            except StorageError as e:
                logger.warning("metadata_write_failed", path=e.path, error=str(e))

        return DownloadResult(
            interval=interval,
            log_path=str(path),
            metadata_path=sidecar,
            size=size,
        )


def run_download(
    config: DownloaderConfig,
    transport: Optional[httpx.BaseTransport] = None,
) -> RunSummary:
    """
    Convenience function to run the downloader.

    Args:
        config: Validated configuration
        transport: Optional httpx transport

    Returns:
        RunSummary of the completed run
    """
    return Downloader(config, transport=transport).run()
