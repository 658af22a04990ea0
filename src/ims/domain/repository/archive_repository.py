"""Abstract append-only store for soft-delete snapshots."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ims.domain.model.archive import ArchiveRecord


class ArchiveRepository(ABC):

    @abstractmethod
    def append(self, records: list[ArchiveRecord]) -> None:
        """Write records; existing records are never modified."""

    @abstractmethod
    def list_all(self) -> list[ArchiveRecord]:
        """Return every record in write order."""
