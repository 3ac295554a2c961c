"""
Local file storage for downloaded log batches.

Log files are published with a write-to-temp, fsync, rename sequence so a
file under its final name is always complete.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Union

import structlog

from .errors import StorageError
from .models import DownloadMetadata, utc_datetime

logger = structlog.get_logger(__name__)


LOG_FILE_FORMAT = "logs-%Y_%m_%d-%H_%M_%S.log.gz"
METADATA_SUFFIX = ".json"

PathLike = Union[str, Path]


def log_filename(ts: int) -> str:
    """File name for the sub-interval starting at ts (UTC)."""
    return utc_datetime(ts).strftime(LOG_FILE_FORMAT)


def log_path(directory: PathLike, ts: int) -> Path:
    return Path(directory) / log_filename(ts)


def metadata_path(path: PathLike) -> Path:
    """Sidecar path: the log file path plus '.json'."""
    return Path(f"{path}{METADATA_SUFFIX}")


def write_atomic(path: PathLike, data: bytes) -> int:
    """
    Write bytes so that path is either absent or complete.

    The temporary file lives in the destination directory so the final
    os.replace never crosses a filesystem boundary.

    Args:
        path: Final file path
        data: File content

    Returns:
        Number of bytes written

    Raises:
        StorageError: If any step fails (the temp file is removed)
    """
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
    except OSError as e:
        raise StorageError(f"Failed to create temp file for {path}: {e}", path=str(path)) from e

    replaced = False
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        replaced = True
    except OSError as e:
        raise StorageError(f"Failed to create file ({path}): {e}", path=str(path)) from e
    finally:
        if not replaced:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass

    return len(data)


def write_metadata(path: PathLike, metadata: DownloadMetadata) -> Path:
    """
    Write the JSON sidecar for a log file.

    Args:
        path: Log file path (the sidecar gets '.json' appended)
        metadata: Metadata to serialize

    Returns:
        Path of the sidecar

    Raises:
        StorageError: If serialization or writing fails
    """
    target = metadata_path(path)
    try:
        payload = json.dumps(metadata.to_dict(), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise StorageError(f"Failed to serialize metadata for {path}: {e}", path=str(target)) from e

    write_atomic(target, payload.encode("utf-8"))
    logger.debug("saved_metadata", path=str(target))
    return target
