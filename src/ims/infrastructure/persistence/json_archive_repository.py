"""JSON-document-backed implementation of ArchiveRepository."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ims.domain.model.archive import ArchiveKind, ArchiveRecord
from ims.domain.repository.archive_repository import ArchiveRepository
from ims.infrastructure.persistence.json_store import JsonDocumentStore


class JsonArchiveRepository(ArchiveRepository):

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    def append(self, records: list[ArchiveRecord]) -> None:
        with self._store.transaction() as document:
            document["archive"].extend(self._to_raw(r) for r in records)

    def list_all(self) -> list[ArchiveRecord]:
        return [self._to_domain(raw) for raw in self._store.read()["archive"]]

    @staticmethod
    def _to_raw(record: ArchiveRecord) -> dict[str, Any]:
        return {
            "kind": record.kind.value,
            "original_id": record.original_id,
            "snapshot": record.snapshot,
            "deleted_by": record.deleted_by,
            "timestamp": record.timestamp.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict[str, Any]) -> ArchiveRecord:
        return ArchiveRecord(
            kind=ArchiveKind(raw["kind"]),
            original_id=raw["original_id"],
            snapshot=raw["snapshot"],
            deleted_by=raw.get("deleted_by"),
            timestamp=datetime.fromisoformat(raw["timestamp"]),
        )
