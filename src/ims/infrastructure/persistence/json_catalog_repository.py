"""JSON-document-backed implementation of CatalogRepository."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ims.domain.model.catalog import Color, Product, ProductStatus, Size, Variant
from ims.domain.model.value_objects import Price
from ims.domain.repository.catalog_repository import CatalogRepository
from ims.infrastructure.persistence.json_store import JsonDocumentStore, find, upsert


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._store.transaction():
            yield

    # --- Products -------------------------------------------------------------

    def get_product(self, product_id: str) -> Product | None:
        _, raw = find(self._store.read()["products"], "id", product_id)
        return self._product(raw) if raw is not None else None

    def list_products(self) -> list[Product]:
        return [self._product(raw) for raw in self._store.read()["products"]]

    def save_product(self, product: Product) -> None:
        with self._store.transaction() as document:
            upsert(document["products"], "id", {
                "id": product.id,
                "style_number": product.style_number,
                "title": product.title,
                "description": product.description,
                "price": product.price.minor,
                "status": product.status.value,
                "attributes": product.attributes,
                "is_deleted": product.is_deleted,
                "created_by": product.created_by,
                "updated_by": product.updated_by,
            })

    # --- Variants -------------------------------------------------------------

    def get_variant(self, variant_id: str) -> Variant | None:
        _, raw = find(self._store.read()["variants"], "id", variant_id)
        return self._variant(raw) if raw is not None else None

    def get_variant_by_sku(self, sku: str) -> Variant | None:
        _, raw = find(self._store.read()["variants"], "sku", sku)
        return self._variant(raw) if raw is not None else None

    def variants_of(self, product_id: str) -> list[Variant]:
        return [
            self._variant(raw)
            for raw in self._store.read()["variants"]
            if raw["product_id"] == product_id
        ]

    def save_variant(self, variant: Variant) -> None:
        with self._store.transaction() as document:
            upsert(document["variants"], "id", {
                "id": variant.id,
                "product_id": variant.product_id,
                "sku": variant.sku,
                "color": {"name": variant.color.name, "code": variant.color.code},
                "color_master_id": variant.color_master_id,
                "is_deleted": variant.is_deleted,
                "created_by": variant.created_by,
                "updated_by": variant.updated_by,
            })

    # --- Sizes ----------------------------------------------------------------

    def get_size(self, size_id: str) -> Size | None:
        _, raw = find(self._store.read()["sizes"], "id", size_id)
        return self._size(raw) if raw is not None else None

    def sizes_of(self, variant_id: str) -> list[Size]:
        return [
            self._size(raw)
            for raw in self._store.read()["sizes"]
            if raw["variant_id"] == variant_id
        ]

    def save_size(self, size: Size) -> None:
        with self._store.transaction() as document:
            _, existing = find(document["sizes"], "id", size.id)
            upsert(document["sizes"], "id", {
                "id": size.id,
                "variant_id": size.variant_id,
                "label": size.label,
                "barcode": size.barcode,
                "size_master_id": size.size_master_id,
                "is_deleted": size.is_deleted,
                "created_by": size.created_by,
                "updated_by": size.updated_by,
                # Rows belong to the ledger; carry them over untouched.
                "inventory": existing.get("inventory", []) if existing else [],
            })

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _product(raw: dict[str, Any]) -> Product:
        return Product(
            id=raw["id"],
            style_number=raw["style_number"],
            title=raw["title"],
            description=raw.get("description"),
            price=Price(raw["price"]),
            status=ProductStatus(raw.get("status", "draft")),
            attributes=dict(raw.get("attributes") or {}),
            is_deleted=raw.get("is_deleted", False),
            created_by=raw.get("created_by"),
            updated_by=raw.get("updated_by"),
        )

    @staticmethod
    def _variant(raw: dict[str, Any]) -> Variant:
        color = raw.get("color") or {}
        return Variant(
            id=raw["id"],
            product_id=raw["product_id"],
            sku=raw["sku"],
            color=Color(name=color.get("name", ""), code=color.get("code")),
            color_master_id=raw.get("color_master_id"),
            is_deleted=raw.get("is_deleted", False),
            created_by=raw.get("created_by"),
            updated_by=raw.get("updated_by"),
        )

    @staticmethod
    def _size(raw: dict[str, Any]) -> Size:
        return Size(
            id=raw["id"],
            variant_id=raw["variant_id"],
            label=raw["label"],
            barcode=raw["barcode"],
            size_master_id=raw.get("size_master_id"),
            is_deleted=raw.get("is_deleted", False),
            created_by=raw.get("created_by"),
            updated_by=raw.get("updated_by"),
        )
