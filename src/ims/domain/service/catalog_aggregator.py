"""Domain service: Catalog Aggregator.

Read-side rollups of the ledger joined over the catalog hierarchy.  A
pure projection: it never writes and never waits on a ledger write, so
what it returns is a point-in-time view that may be a moment behind a
concurrent reservation.

Soft-deleted nodes are invisible at every level.  Sizes are ordered by
label and variants by SKU so the output is deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ims.domain.model.catalog import Color, Product, ProductStatus, Size, Variant
from ims.domain.model.inventory import InventoryRow, StockTotals
from ims.domain.repository.catalog_repository import CatalogRepository
from ims.domain.repository.inventory_ledger import InventoryLedger


@dataclass(frozen=True)
class SizeView:
    id: str
    label: str
    barcode: str
    total_quantity: int
    reserved_total: int
    on_order_total: int
    sellable_quantity: int
    inventory: list[InventoryRow] = field(default_factory=list)


@dataclass(frozen=True)
class ProductSummary:
    id: str
    title: str
    style_number: str


@dataclass(frozen=True)
class VariantView:
    id: str
    sku: str
    color: Color
    product: ProductSummary
    sizes: list[SizeView]


@dataclass(frozen=True)
class ProductView:
    id: str
    style_number: str
    title: str
    description: str | None
    price: int
    status: str
    attributes: dict[str, Any]
    variants: list[VariantView]


@dataclass(frozen=True)
class ProductListing:
    id: str
    style_number: str
    title: str
    status: str
    price: int
    variant_count: int


class CatalogAggregator:

    def __init__(self, catalog: CatalogRepository, ledger: InventoryLedger) -> None:
        self._catalog = catalog
        self._ledger = ledger

    # --- Deep reads -----------------------------------------------------------

    def product_deep(self, product_id: str) -> ProductView | None:
        product = self._live_product(product_id)
        if product is None:
            return None
        summary = self._summary(product)
        variants = [
            self._variant_view(v, summary)
            for v in self._live_variants(product.id)
        ]
        return ProductView(
            id=product.id,
            style_number=product.style_number,
            title=product.title,
            description=product.description,
            price=product.price.minor,
            status=product.status.value,
            attributes=dict(product.attributes),
            variants=variants,
        )

    def variant_deep(self, variant_id: str) -> VariantView | None:
        return self._deep_of(self._catalog.get_variant(variant_id))

    def variant_deep_by_sku(self, sku: str) -> VariantView | None:
        return self._deep_of(self._catalog.get_variant_by_sku(sku))

    def size_view(self, size_id: str) -> SizeView | None:
        size = self._catalog.get_size(size_id)
        if size is None or size.is_deleted:
            return None
        return self._size_view(size)

    def list_products(self, status: ProductStatus | None = None) -> list[ProductListing]:
        """Live products with the number of live variants each has."""
        products = [
            p for p in self._catalog.list_products()
            if not p.is_deleted and (status is None or p.status == status)
        ]
        return [
            ProductListing(
                id=p.id,
                style_number=p.style_number,
                title=p.title,
                status=p.status.value,
                price=p.price.minor,
                variant_count=len(self._live_variants(p.id)),
            )
            for p in sorted(products, key=lambda p: (p.style_number, p.id))
        ]

    # --- Internal helpers -----------------------------------------------------

    def _deep_of(self, variant: Variant | None) -> VariantView | None:
        # A variant is only as visible as its product.
        if variant is None or variant.is_deleted:
            return None
        product = self._live_product(variant.product_id)
        if product is None:
            return None
        return self._variant_view(variant, self._summary(product))

    def _live_product(self, product_id: str) -> Product | None:
        product = self._catalog.get_product(product_id)
        if product is None or product.is_deleted:
            return None
        return product

    def _live_variants(self, product_id: str) -> list[Variant]:
        variants = [v for v in self._catalog.variants_of(product_id) if not v.is_deleted]
        return sorted(variants, key=lambda v: v.sku)

    def _variant_view(self, variant: Variant, product: ProductSummary) -> VariantView:
        sizes = [s for s in self._catalog.sizes_of(variant.id) if not s.is_deleted]
        return VariantView(
            id=variant.id,
            sku=variant.sku,
            color=variant.color,
            product=product,
            sizes=[self._size_view(s) for s in sorted(sizes, key=lambda s: s.label)],
        )

    def _size_view(self, size: Size) -> SizeView:
        rows = sorted(self._ledger.rows_for(size.id), key=lambda r: r.location)
        totals = StockTotals.of(rows)
        return SizeView(
            id=size.id,
            label=size.label,
            barcode=size.barcode,
            total_quantity=totals.total_quantity,
            reserved_total=totals.reserved_total,
            on_order_total=totals.on_order_total,
            sellable_quantity=totals.sellable_quantity,
            inventory=rows,
        )

    @staticmethod
    def _summary(product: Product) -> ProductSummary:
        return ProductSummary(
            id=product.id,
            title=product.title,
            style_number=product.style_number,
        )
