"""Single JSON document shared by every JSON-backed repository.

All collections live in one file so that a write spanning several of
them (a cascade archive, a deep product create) can land as one file
replacement.  Writers serialize on a re-entrant lock and see the
document through ``transaction()``; the document is written back once,
atomically, when the outermost transaction exits cleanly.  If the block
raises, nothing is written.

Readers take no lock.  The file is only ever swapped in whole with
``os.replace``, so a reader sees either the old or the new document.

The lock is a thread lock, so transactions are atomic only among the
threads of one process.  Two processes writing the same file (two
concurrent ``ims`` commands, say) can each load the document before
the other persists, and the later write wins.  Run writers through one
process.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

COLLECTIONS = ("products", "variants", "sizes", "orders", "archive", "masters")

Document = dict[str, list[dict[str, Any]]]


class JsonDocumentStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._local = threading.local()
        self._ensure_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    @contextmanager
    def transaction(self) -> Iterator[Document]:
        """Yield the live document for read-modify-write.

        Nested calls on the same thread join the outer transaction.
        """
        with self._lock:
            current = getattr(self._local, "document", None)
            if current is not None:
                yield current
                return

            document = self._load()
            self._local.document = document
            try:
                yield document
                self._persist(document)
            finally:
                self._local.document = None

    def read(self) -> Document:
        """Point-in-time copy for readers; inside a transaction, its view."""
        current = getattr(self._local, "document", None)
        if current is not None:
            return current
        return self._load()

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> Document:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        for name in COLLECTIONS:
            raw.setdefault(name, [])
        return raw

    def _persist(self, document: Document) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(document, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps({name: [] for name in COLLECTIONS}, indent=2) + "\n",
                encoding="utf-8",
            )


def find(records: list[dict[str, Any]], key: str, value: Any) -> tuple[int, dict[str, Any] | None]:
    for i, raw in enumerate(records):
        if raw.get(key) == value:
            return i, raw
    return -1, None


def upsert(records: list[dict[str, Any]], key: str, raw: dict[str, Any]) -> None:
    """Replace the record with the same *key*, otherwise append."""
    i, _ = find(records, key, raw[key])
    if i >= 0:
        records[i] = raw
    else:
        records.append(raw)
