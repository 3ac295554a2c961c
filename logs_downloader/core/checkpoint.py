"""Checkpoint persistence for resumable downloading."""

import re
from pathlib import Path
from typing import Optional, Union

import structlog

from .errors import CheckpointError
from .storage import write_atomic

logger = structlog.get_logger(__name__)


CHECKPOINT_FILE = "checkpoint"
CHECKPOINT_PATTERN = re.compile(r"[0-9]+")


class CheckpointStore:
    """
    Reads and overwrites the checkpoint file.

    The file holds one decimal Unix timestamp: everything before it has been
    downloaded and written.
    """

    def __init__(self, directory: Union[str, Path], filename: str = CHECKPOINT_FILE):
        self.path = Path(directory) / filename
        self.last_saved: Optional[int] = None

    def load(self) -> int:
        """
        Read the persisted timestamp.

        Only ASCII decimal digits are accepted, optionally surrounded by
        whitespace.

        Raises:
            CheckpointError: File missing, unreadable, or not a non-negative integer
        """
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise CheckpointError(
                f"Failed to read checkpoint file ({self.path}): {e}",
                path=str(self.path),
            ) from e

        try:
            text = raw.decode("ascii").strip()
        except UnicodeDecodeError:
            raise CheckpointError(f"Corrupt checkpoint file ({self.path})", path=str(self.path))

        if not CHECKPOINT_PATTERN.fullmatch(text):
            raise CheckpointError(f"Corrupt checkpoint file ({self.path})", path=str(self.path))
        value = int(text)

        logger.debug("checkpoint_loaded", path=str(self.path), checkpoint=value)
        return value

    def save(self, ts: int) -> None:
        """
        Overwrite the checkpoint with ts.

        Raises:
            CheckpointError: ts is behind a value saved earlier in this run
            StorageError: The file could not be written
        """
        if self.last_saved is not None and ts < self.last_saved:
            raise CheckpointError(
                f"Checkpoint would move backwards ({ts} < {self.last_saved})",
                path=str(self.path),
            )

        write_atomic(self.path, str(int(ts)).encode("ascii"))
        self.last_saved = ts
        logger.debug("checkpoint_saved", path=str(self.path), checkpoint=ts)
