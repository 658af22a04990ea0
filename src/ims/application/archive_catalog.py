"""Application services: cascade archive and product status.

Archiving soft-deletes a node and every live descendant, after writing
one snapshot per affected document to the Archive.  Snapshots and flag
flips happen inside one catalog transaction, so a partial cascade is
never observable.  Ledger rows are left exactly as they were: an
archived size keeps its counts, frozen.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.model.archive import ArchiveKind, ArchiveRecord, snapshot_of
from ims.domain.model.catalog import Product, ProductStatus, Size, Variant
from ims.domain.repository.archive_repository import ArchiveRepository
from ims.domain.repository.catalog_repository import CatalogRepository
from ims.domain.repository.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


class _CascadeArchiver:

    def __init__(
        self,
        catalog: CatalogRepository,
        archive: ArchiveRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._catalog = catalog
        self._archive = archive
        self._ledger = ledger

    def live_sizes(self, variant: Variant) -> list[Size]:
        return [s for s in self._catalog.sizes_of(variant.id) if not s.is_deleted]

    def live_variants(self, product: Product) -> list[Variant]:
        return [v for v in self._catalog.variants_of(product.id) if not v.is_deleted]

    def archive(
        self,
        actor: str | None,
        product: Product | None = None,
        variants: Sequence[Variant] = (),
        sizes: Sequence[Size] = (),
    ) -> int:
        """Snapshot, then flip; call inside ``catalog.atomic()``."""
        records: list[ArchiveRecord] = []
        if product is not None:
            records.append(ArchiveRecord(ArchiveKind.PRODUCT, product.id, snapshot_of(product), actor))
        records += [
            ArchiveRecord(ArchiveKind.VARIANT, v.id, snapshot_of(v), actor)
            for v in variants
        ]
        records += [
            ArchiveRecord(
                ArchiveKind.SIZE, s.id, snapshot_of(s, self._ledger.rows_for(s.id)), actor
            )
            for s in sizes
        ]
        self._archive.append(records)

        for size in sizes:
            size.soft_delete(actor)
            self._catalog.save_size(size)
        for variant in variants:
            variant.soft_delete(actor)
            self._catalog.save_variant(variant)
        if product is not None:
            product.archive(actor)
            self._catalog.save_product(product)
        return len(records)


class ArchiveProductHandler:

    def __init__(
        self,
        catalog: CatalogRepository,
        archive: ArchiveRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._catalog = catalog
        self._cascade = _CascadeArchiver(catalog, archive, ledger)

    def handle(self, product_id: str, actor: str | None = None) -> int:
        """Archive a product, its variants and their sizes.

        Returns the number of documents archived.
        """
        with self._catalog.atomic():
            product = self._catalog.get_product(product_id)
            if product is None or product.is_deleted:
                raise EntityNotFoundError(f"Product {product_id} not found")

            variants = self._cascade.live_variants(product)
            sizes = [s for v in variants for s in self._cascade.live_sizes(v)]
            count = self._cascade.archive(actor, product=product, variants=variants, sizes=sizes)

        logger.info("Product archived", product_id=product_id, documents=count, actor=actor)
        return count


class ArchiveVariantHandler:

    def __init__(
        self,
        catalog: CatalogRepository,
        archive: ArchiveRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._catalog = catalog
        self._cascade = _CascadeArchiver(catalog, archive, ledger)

    def handle(self, variant_id: str, actor: str | None = None) -> int:
        with self._catalog.atomic():
            variant = self._catalog.get_variant(variant_id)
            if variant is None or variant.is_deleted:
                raise EntityNotFoundError(f"Variant {variant_id} not found")

            sizes = self._cascade.live_sizes(variant)
            count = self._cascade.archive(actor, variants=[variant], sizes=sizes)

        logger.info("Variant archived", variant_id=variant_id, documents=count, actor=actor)
        return count


class ArchiveSizeHandler:

    def __init__(
        self,
        catalog: CatalogRepository,
        archive: ArchiveRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._catalog = catalog
        self._cascade = _CascadeArchiver(catalog, archive, ledger)

    def handle(self, size_id: str, actor: str | None = None) -> int:
        with self._catalog.atomic():
            size = self._catalog.get_size(size_id)
            if size is None or size.is_deleted:
                raise EntityNotFoundError(f"Size {size_id} not found")
            count = self._cascade.archive(actor, sizes=[size])

        logger.info("Size archived", size_id=size_id, actor=actor)
        return count


class SetProductStatusHandler:
    """Status writes are metadata, except ``archived`` which cascades."""

    def __init__(
        self,
        catalog: CatalogRepository,
        archive: ArchiveRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._catalog = catalog
        self._archive_product = ArchiveProductHandler(catalog, archive, ledger)

    def handle(self, product_id: str, status: str, actor: str | None = None) -> ProductStatus:
        try:
            target = ProductStatus(status.lower())
        except ValueError:
            allowed = ", ".join(s.value for s in ProductStatus)
            raise ValidationError(f"Unknown product status '{status}' (expected one of: {allowed})")

        if target == ProductStatus.ARCHIVED:
            self._archive_product.handle(product_id, actor)
            return target

        product = self._catalog.get_product(product_id)
        if product is None or product.is_deleted:
            raise EntityNotFoundError(f"Product {product_id} not found")
        product.set_status(target, actor)
        self._catalog.save_product(product)
        return target
