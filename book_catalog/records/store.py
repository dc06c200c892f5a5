"""
Record Store Module

The record store is the system of record for the catalog. It has no
partial-record concept: callers load the whole ordered sequence of books
and persist the whole sequence back.
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Protocol

from pydantic import ValidationError

from ..errors import RecordStoreError
from ..models import Book, dump_books, load_books

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Load-all / save-all access to the durable record sequence."""

    def load_all(self) -> List[Book]:
        """Return every record in stored order. Raises RecordStoreError."""
        ...

    def save_all(self, books: List[Book]) -> None:
        """Replace the stored sequence with ``books``. Raises RecordStoreError."""
        ...


class JsonFileRecordStore:
    """
    Record store backed by a single JSON file.

    The file holds one JSON array of book objects, written with two-space
    indentation. Saves go through a temporary file in the same directory
    followed by ``os.replace``, so readers observe either the old or the
    new sequence and never a partial write.

    A missing file reads as an empty catalog. Error messages never include
    the file path, since they are passed through to RPC callers.

    Attributes:
        path: Location of the JSON file
    """

    def __init__(self, path):
        self.path = Path(path)

    def load_all(self) -> List[Book]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug(f"Record file {self.path} does not exist, starting empty")
            return []
        except OSError as exc:
            logger.error(f"Failed to read record file {self.path}: {exc}")
            raise RecordStoreError(f"Error reading books: {_reason(exc)}") from exc

        try:
            return load_books(raw)
        except ValidationError as exc:
            logger.error(f"Malformed record file {self.path}: {exc}")
            raise RecordStoreError("Error reading books: malformed record file") from exc

    def save_all(self, books: List[Book]) -> None:
        payload = dump_books(books, indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error(f"Failed to write record file {self.path}: {exc}")
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise RecordStoreError(f"Error writing books: {_reason(exc)}") from exc


def _reason(exc: OSError) -> str:
    return exc.strerror or type(exc).__name__
