"""JSON-document-backed implementation of InventoryLedger.

Rows are stored inside their size's document, as an ``inventory`` list.
``apply`` runs its whole read-check-write inside one store transaction,
which is what makes a reservation's check and increment indivisible.
"""

from __future__ import annotations

from typing import Any

from ims.domain.exceptions import EntityNotFoundError
from ims.domain.model.inventory import InventoryRow, LedgerUpdate, StockDelta
from ims.domain.repository.inventory_ledger import InventoryLedger
from ims.infrastructure.persistence.json_store import JsonDocumentStore, find


class JsonInventoryLedger(InventoryLedger):

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    # --- InventoryLedger interface --------------------------------------------

    def get_row(self, size_id: str, location: str) -> InventoryRow | None:
        _, size = find(self._store.read()["sizes"], "id", size_id)
        if size is None:
            return None
        _, raw = find(size.get("inventory", []), "location", location)
        return self._to_domain(raw) if raw is not None else None

    def rows_for(self, size_id: str) -> list[InventoryRow]:
        _, size = find(self._store.read()["sizes"], "id", size_id)
        if size is None:
            return []
        return [self._to_domain(raw) for raw in size.get("inventory", [])]

    def apply(
        self,
        size_id: str,
        location: str,
        delta: StockDelta,
        clamp: bool = False,
        require_live: bool = False,
    ) -> LedgerUpdate:
        with self._store.transaction() as document:
            _, size = find(document["sizes"], "id", size_id)
            if size is None or (require_live and size.get("is_deleted", False)):
                raise EntityNotFoundError(f"Size {size_id} not found")

            rows = size.setdefault("inventory", [])
            i, raw = find(rows, "location", location)
            before = self._to_domain(raw) if raw is not None else InventoryRow(location=location)
            after = before.apply(delta, size_id, clamp=clamp)

            if i >= 0:
                rows[i] = self._to_raw(after)
            else:
                rows.append(self._to_raw(after))

        return LedgerUpdate(size_id=size_id, delta=delta, before=before, after=after)

    def seed(self, size_id: str, rows: list[InventoryRow]) -> None:
        with self._store.transaction() as document:
            _, size = find(document["sizes"], "id", size_id)
            if size is None:
                raise EntityNotFoundError(f"Size {size_id} not found")
            size["inventory"] = [self._to_raw(row) for row in rows]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(row: InventoryRow) -> dict[str, Any]:
        return {
            "location": row.location,
            "on_hand": row.on_hand,
            "on_order": row.on_order,
            "reserved": row.reserved,
        }

    @staticmethod
    def _to_domain(raw: dict[str, Any]) -> InventoryRow:
        return InventoryRow(
            location=raw["location"],
            on_hand=raw.get("on_hand", 0),
            on_order=raw.get("on_order", 0),
            reserved=raw.get("reserved", 0),
        )
