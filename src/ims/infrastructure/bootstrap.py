"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from ims.infrastructure.config import Settings
from ims.infrastructure.persistence.json_archive_repository import JsonArchiveRepository
from ims.infrastructure.persistence.json_catalog_repository import JsonCatalogRepository
from ims.infrastructure.persistence.json_inventory_ledger import JsonInventoryLedger
from ims.infrastructure.persistence.json_master_data import JsonMasterDataResolver
from ims.infrastructure.persistence.json_order_repository import JsonOrderRepository
from ims.infrastructure.persistence.json_store import JsonDocumentStore


@dataclass
class Container:
    """Repositories sharing one JSON document store."""

    settings: Settings

    @cached_property
    def store(self) -> JsonDocumentStore:
        return JsonDocumentStore(self.settings.store_path)

    @cached_property
    def catalog(self) -> JsonCatalogRepository:
        return JsonCatalogRepository(self.store)

    @cached_property
    def ledger(self) -> JsonInventoryLedger:
        return JsonInventoryLedger(self.store)

    @cached_property
    def orders(self) -> JsonOrderRepository:
        return JsonOrderRepository(self.store)

    @cached_property
    def archive(self) -> JsonArchiveRepository:
        return JsonArchiveRepository(self.store)

    @cached_property
    def masters(self) -> JsonMasterDataResolver:
        return JsonMasterDataResolver(self.store)


def build_container(settings: Settings | None = None) -> Container:
    return Container(settings or Settings())
