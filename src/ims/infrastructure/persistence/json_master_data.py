"""JSON-document-backed master-data resolver (upsert by name)."""

from __future__ import annotations

from uuid import uuid4

from ims.domain.repository.master_data import MasterDataResolver
from ims.infrastructure.persistence.json_store import JsonDocumentStore


class JsonMasterDataResolver(MasterDataResolver):

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    def resolve(self, kind: str, name: str) -> str:
        key = name.strip().lower()
        with self._store.transaction() as document:
            for raw in document["masters"]:
                if raw["kind"] == kind and raw["name"].lower() == key:
                    return raw["id"]
            master_id = uuid4().hex
            document["masters"].append({"id": master_id, "kind": kind, "name": name.strip()})
            return master_id
