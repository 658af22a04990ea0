"""Archive records — the write-once audit trail of soft deletes."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ims.domain.model.inventory import InventoryRow


class ArchiveKind(Enum):
    PRODUCT = "product"
    VARIANT = "variant"
    SIZE = "size"


@dataclass(frozen=True)
class ArchiveRecord:
    kind: ArchiveKind
    original_id: str
    snapshot: dict[str, Any]
    deleted_by: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def snapshot_of(entity: Any, inventory: list[InventoryRow] | None = None) -> dict[str, Any]:
    """Plain-dict copy of a catalog entity as it stood before deletion."""
    snapshot = {
        key: value.value if isinstance(value, Enum) else value
        for key, value in asdict(entity).items()
    }
    if "price" in snapshot and isinstance(snapshot["price"], dict):
        snapshot["price"] = snapshot["price"]["minor"]
    if inventory is not None:
        snapshot["inventory"] = [asdict(row) for row in inventory]
    return snapshot
