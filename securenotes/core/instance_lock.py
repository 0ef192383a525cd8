"""Single-instance guard for the data directory."""
import fcntl
import logging
import os
from pathlib import Path
from typing import Optional, TextIO

from securenotes.core.exceptions import InstanceLockError

logger = logging.getLogger(__name__)


class InstanceLock:
    """Exclusive, non-blocking advisory lock held for the process lifetime."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._file: Optional[TextIO] = None

    @property
    def held(self) -> bool:
        return self._file is not None

    def acquire(self) -> None:
        if self._file is not None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        lock_file = open(self.path, "a+")
        try:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            lock_file.close()
            raise InstanceLockError(f"Another instance is already using {self.path.parent}")

        lock_file.seek(0)
        lock_file.truncate()
        lock_file.write(str(os.getpid()))
        lock_file.flush()
        self._file = lock_file
        logger.info(f"Acquired instance lock {self.path}")

    def release(self) -> None:
        if self._file is None:
            return
        fcntl.flock(self._file.fileno(), fcntl.LOCK_UN)
        self._file.close()
        self._file = None
        logger.info(f"Released instance lock {self.path}")

    def __enter__(self) -> "InstanceLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
