# genomedb/storage.py
"""
JSON document storage rooted at a data directory.

Documents are addressed by a path relative to the storage root, e.g.
"trackList.json" or "seq/refSeqs.json". Writes go through modify(), which
holds an exclusive lock on a sidecar lock file for the whole
read / transform / write sequence, so concurrent writers never lose updates.

Structure:
    out_dir/
        trackList.json          # or trackList.jsonz when compressed
        trackList.json.lock     # created on first modify()
        seq/
            refSeqs.json
"""

import copy
import fcntl
import gzip
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from .errors import StorageError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """
    Atomic read-modify-write store for JSON documents.

    Args:
        out_dir: Root directory for all documents
        compress: gzip documents and append "z" to their file names
        pretty: Write indented JSON
    """

    def __init__(self, out_dir: Path | str, compress: bool = False, pretty: bool = False):
        self.out_dir = Path(out_dir)
        self.compress = compress
        self.pretty = pretty

    def full_path(self, path: str) -> Path:
        """Get the on-disk location of a document."""
        full = self.out_dir / path
        if self.compress:
            full = full.with_name(full.name + "z")
        return full

    def _lock_path(self, path: str) -> Path:
        full = self.full_path(path)
        return full.with_name(full.name + ".lock")

    def _encode(self, document: Any) -> bytes:
        if self.pretty:
            text = json.dumps(document, indent=2)
        else:
            text = json.dumps(document, separators=(",", ":"))
        data = text.encode("utf-8")
        if self.compress:
            data = gzip.compress(data)
        return data

    def _read(self, full: Path) -> Any:
        try:
            data = full.read_bytes()
            if self.compress:
                data = gzip.decompress(data)
            return json.loads(data.decode("utf-8"))
        except (OSError, EOFError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageError(full, f"failed to read document: {e}") from e

    def _write(self, full: Path, document: Any) -> None:
        try:
            data = self._encode(document)
        except (TypeError, ValueError) as e:
            raise StorageError(full, f"document is not JSON serializable: {e}") from e

        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=full.parent, prefix=f".{full.name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, full)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(full, f"failed to write document: {e}") from e

    @contextmanager
    def _locked(self, path: str) -> Iterator[None]:
        lock_path = self._lock_path(path)
        try:
            lock_path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(lock_path, "a")
        except OSError as e:
            raise StorageError(lock_path, f"failed to open lock file: {e}") from e
        with lock_file:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            except OSError as e:
                raise StorageError(lock_path, f"failed to lock document: {e}") from e
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def get(self, path: str, default: Any = None) -> Any:
        """
        Read a document.

        Returns a deep copy of default if the document does not exist.
        """
        full = self.full_path(path)
        if not full.exists():
            logger.debug(f"No document at {full}, using default")
            return copy.deepcopy(default)
        return self._read(full)

    def put(self, path: str, document: Any) -> None:
        """Replace a document wholesale."""
        self.modify(path, lambda _: document)

    def modify(self, path: str, fn: Callable[[Any], Any], default: Any = None) -> Any:
        """
        Atomically transform a document.

        Args:
            path: Document path relative to the storage root
            fn: Receives the current document (or a copy of default when it
                does not exist yet) and returns the document to write
            default: Starting value for a missing document

        Returns:
            The document that was written

        Nothing is written if fn raises.
        """
        full = self.full_path(path)
        with self._locked(path):
            if full.exists():
                current = self._read(full)
            else:
                current = copy.deepcopy(default)
            updated = fn(current)
            self._write(full, updated)
        logger.debug(f"Wrote {full}")
        return updated
