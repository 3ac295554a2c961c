"""
Startup validation and checkpoint bootstrap.

Turns the layered option dict into one immutable DownloaderConfig. Any
violation raises before the driver is constructed, so no request is ever
sent with an invalid configuration.
"""

import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import structlog

from logs_downloader.core.checkpoint import CheckpointStore
from logs_downloader.core.durations import format_duration, parse_duration
from logs_downloader.core.errors import ConfigError
from logs_downloader.core.http_client import DEFAULT_TIMEOUT

logger = structlog.get_logger(__name__)


DEFAULT_MAX_AGE = 72 * 3600
DEFAULT_INTERVAL = 60
MIN_INTERVAL = 1
MAX_INTERVAL = 24 * 3600

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class DownloaderConfig:
    """Resolved, validated configuration for one run."""

    auth_email: str
    auth_key: str
    url: str

    # Global range, Unix seconds
    start: int
    end: int

    interval: int = DEFAULT_INTERVAL
    directory: str = tempfile.gettempdir()
    max_age: int = DEFAULT_MAX_AGE

    align: bool = False
    write_metadata: bool = True
    timeout: float = DEFAULT_TIMEOUT

    # True when start was read from the checkpoint file
    resumed: bool = False

    def to_dict(self) -> dict:
        """Loggable view without credentials."""
        return {
            "url": self.url,
            "start": self.start,
            "end": self.end,
            "interval": format_duration(self.interval),
            "directory": self.directory,
            "max_age": format_duration(self.max_age),
            "align": self.align,
            "write_metadata": self.write_metadata,
            "resumed": self.resumed,
        }


def _parse_int(name: str, value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigError(f"The provided {name} ({value!r}) is not an integer")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigError(f"The provided {name} ({value!r}) is not an integer")


def _parse_duration(name: str, value: Any, default: int) -> int:
    try:
        seconds = parse_duration(value)
    except ValueError as e:
        raise ConfigError(f"The provided {name} is invalid: {e}") from e
    return default if seconds is None else seconds


def _parse_bool(name: str, value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigError(f"The provided {name} ({value!r}) is not a boolean")


def _parse_timeout(value: Any) -> float:
    if value is None or value == "":
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"The provided timeout ({value!r}) is not a number")
    if timeout <= 0:
        raise ConfigError(f"The provided timeout ({timeout}) must be positive")
    return timeout


def build_config(options: Mapping[str, Any], now: Optional[int] = None) -> DownloaderConfig:
    """
    Validate options and resolve the start timestamp.

    Args:
        options: Layered options (see config.loader.OPTION_KEYS)
        now: Current Unix time, defaults to time.time()

    Returns:
        DownloaderConfig ready for the driver

    Raises:
        ConfigError: Missing or invalid option
        CheckpointError: Start omitted and checkpoint missing or corrupt
    """
    now = int(time.time()) if now is None else int(now)

    auth_email = str(options.get("auth_email") or "")
    auth_key = str(options.get("auth_key") or "")
    url = str(options.get("url") or "")

    if not auth_email:
        raise ConfigError("No auth email provided")
    if not auth_key:
        raise ConfigError("No auth key provided")
    if not url:
        raise ConfigError("No url provided")

    directory = str(options.get("dir") or tempfile.gettempdir())
    if not Path(directory).is_dir():
        raise ConfigError(f"The provided dir ({directory}) does not exist")

    max_age = _parse_duration("max age", options.get("max_age"), DEFAULT_MAX_AGE)
    if max_age < 0:
        raise ConfigError(f"The provided max age ({max_age}s) is negative")

    interval = _parse_duration("interval", options.get("interval"), DEFAULT_INTERVAL)
    end = _parse_int("end", options.get("end"))
    if end is None:
        end = now

    start = _parse_int("start", options.get("start"))
    resumed = False
    if start is None or start < 0:
        store = CheckpointStore(directory)
        start = store.load()
        resumed = True
        logger.info("resuming_from_checkpoint", path=str(store.path), start=start)

    if now - start > max_age:
        raise ConfigError(f"Start ({start}) is more than {format_duration(max_age)} old")
    if end < 0:
        raise ConfigError(f"The provided end ({end}) is < 0")
    if not end > start:
        raise ConfigError(f"The provided end ({end}) is not after start ({start})")
    if interval < MIN_INTERVAL:
        raise ConfigError("The interval of time is less than one second")
    if interval > MAX_INTERVAL:
        raise ConfigError("The interval of time is greater than twenty-four hours")

    return DownloaderConfig(
        auth_email=auth_email,
        auth_key=auth_key,
        url=url,
        start=start,
        end=end,
        interval=interval,
        directory=os.path.abspath(directory),
        max_age=max_age,
        align=_parse_bool("align", options.get("align"), False),
        write_metadata=_parse_bool("metadata", options.get("metadata"), True),
        timeout=_parse_timeout(options.get("timeout")),
        resumed=resumed,
    )
