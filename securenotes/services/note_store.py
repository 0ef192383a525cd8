"""
Note Document Store
Reads and writes the whole notes collection as one JSON document.
"""
import fcntl
import json
import logging
import os
import tempfile
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List

from pydantic import ValidationError as PydanticValidationError

from securenotes.core.exceptions import StorageError
from securenotes.models.note import NoteRecord

logger = logging.getLogger(__name__)

NoteDocument = List[NoteRecord]


class NoteDocumentStore:
    """Sole reader and writer of the notes document.

    Every write replaces the file atomically (temp file, fsync, rename), so a
    crash leaves either the old or the new document, never a mix. Transactions
    are serialized by a thread lock and an advisory file lock.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: Location of the JSON document
        """
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold the in-process lock and, at the outermost level, the file lock."""
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                lock_file = open(self.lock_path, "a")
            except OSError as e:
                logger.error(f"Error opening notes lock file: {e}")
                raise StorageError(f"Could not lock notes: {e}")

            with lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                self._depth = 1
                try:
                    yield
                finally:
                    self._depth = 0
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def load(self) -> NoteDocument:
        """Load the document, creating an empty one if it does not exist."""
        with self._exclusive():
            return self._read()

    def transaction(self, fn: Callable[[NoteDocument], NoteDocument]) -> NoteDocument:
        """
        Load, apply ``fn`` and persist the result as one serialized step.

        If ``fn`` raises, nothing is written and the error propagates.

        Returns:
            The document as persisted
        """
        with self._exclusive():
            document = fn(self._read())
            self._write(document)
            return document

    def _read(self) -> NoteDocument:
        if not self.path.exists():
            self._write([])
            logger.info(f"Created empty notes document at {self.path}")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError("notes document is not a JSON array")
        except ValueError as e:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            self._quarantine_document(e)
            return []
        except OSError as e:
            logger.error(f"Error reading notes document: {e}")
            raise StorageError(f"Could not read notes: {e}")

        document: NoteDocument = []
        rejected = []
        for item in raw:
            try:
                document.append(NoteRecord.model_validate(item))
            except PydanticValidationError as e:
                logger.warning(f"Dropping invalid note record: {e.error_count()} error(s)")
                rejected.append(item)

        if rejected:
            self._quarantine_records(rejected, document)
        return document

    def _backup_path(self, kind: str) -> Path:
        return self.path.with_name(f"{self.path.name}.{kind}-{int(time.time() * 1000)}")

    def _quarantine_document(self, error: Exception) -> None:
        """Move an unparseable document aside and start an empty one.

        Later reads see the empty document, so the file is moved only once.
        """
        backup = self._backup_path("corrupt")
        try:
            os.replace(self.path, backup)
        except OSError as e:
            logger.error(f"Could not move corrupt notes document aside: {e}")
            return
        logger.warning(f"Notes document is unreadable ({error}); moved to {backup}, starting empty")
        self._write([])

    def _quarantine_records(self, rejected: list, document: NoteDocument) -> None:
        """Save invalid records to a side file and rewrite the document without them."""
        backup = self._backup_path("rejected")
        self._atomic_write(backup, json.dumps(rejected, indent=2))
        logger.warning(f"Moved {len(rejected)} invalid note record(s) to {backup}")
        self._write(document)

    def _write(self, document: NoteDocument) -> None:
        payload = json.dumps(
            [record.to_document() for record in document],
            ensure_ascii=False,
            indent=2,
        )
        self._atomic_write(self.path, payload)

    def _atomic_write(self, path: Path, payload: str) -> None:
        tmp_path = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
        except OSError as e:
            logger.error(f"Error saving {path.name}: {e}")
            raise StorageError(f"Could not save notes: {e}")
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
