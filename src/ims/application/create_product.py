"""Application service: Create Product (deep) use case.

Creates a product with its variants, sizes and opening stock in one
all-or-nothing write.  Colors and size labels are resolved to master
records on the way in.
"""

from __future__ import annotations

import structlog

from ims.application.dto import CreateProductCommand, SizeSpec
from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.model.catalog import Color, Product, ProductStatus, Size, Variant
from ims.domain.model.inventory import InventoryRow
from ims.domain.repository.catalog_repository import CatalogRepository
from ims.domain.repository.inventory_ledger import InventoryLedger
from ims.domain.repository.master_data import MasterDataResolver
from ims.domain.service.catalog_aggregator import CatalogAggregator, ProductView

logger = structlog.get_logger(__name__)


class CreateProductHandler:

    def __init__(
        self,
        catalog: CatalogRepository,
        ledger: InventoryLedger,
        masters: MasterDataResolver,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._masters = masters

    def handle(self, command: CreateProductCommand, actor: str | None = None) -> ProductView:
        status = self._status(command.status)
        self._check_skus(command)
        for variant_spec in command.variants:
            for size_spec in variant_spec.sizes:
                self._check_inventory(size_spec)

        with self._catalog.atomic():
            product = Product.create(
                style_number=command.style_number,
                title=command.title,
                price=command.price,
                status=status,
                description=command.description,
                attributes=command.attributes,
                created_by=actor,
            )
            self._catalog.save_product(product)

            for variant_spec in command.variants:
                variant = Variant.create(
                    product_id=product.id,
                    sku=variant_spec.sku,
                    color=Color(variant_spec.color_name, variant_spec.color_code),
                    color_master_id=self._masters.resolve("color", variant_spec.color_name),
                    created_by=actor,
                )
                self._catalog.save_variant(variant)

                for size_spec in variant_spec.sizes:
                    size = Size.create(
                        variant_id=variant.id,
                        label=size_spec.label,
                        barcode=size_spec.barcode,
                        size_master_id=self._masters.resolve("size", size_spec.label),
                        created_by=actor,
                    )
                    self._catalog.save_size(size)
                    self._ledger.seed(size.id, self._rows(size_spec))

        logger.info(
            "Product created",
            product_id=product.id,
            style_number=product.style_number,
            variants=len(command.variants),
        )
        view = CatalogAggregator(self._catalog, self._ledger).product_deep(product.id)
        if view is None:
            raise EntityNotFoundError(f"Product {product.id} not found")
        return view

    # --- Validation -----------------------------------------------------------

    @staticmethod
    def _status(raw: str | None) -> ProductStatus:
        if raw is None:
            return ProductStatus.ACTIVE
        try:
            return ProductStatus(raw.lower())
        except ValueError:
            allowed = ", ".join(s.value for s in ProductStatus)
            raise ValidationError(f"Unknown product status '{raw}' (expected one of: {allowed})")

    def _check_skus(self, command: CreateProductCommand) -> None:
        seen: set[str] = set()
        for variant_spec in command.variants:
            sku = variant_spec.sku
            if sku in seen or self._catalog.get_variant_by_sku(sku) is not None:
                raise ValidationError(f"SKU '{sku}' already exists")
            seen.add(sku)

    @staticmethod
    def _check_inventory(size_spec: SizeSpec) -> None:
        locations: set[str] = set()
        for row in size_spec.inventory:
            if row.location in locations:
                raise ValidationError(
                    f"Duplicate location '{row.location}' for size '{size_spec.label}'"
                )
            if row.reserved > row.on_hand:
                raise ValidationError(
                    f"Reserved exceeds on-hand at '{row.location}' for size '{size_spec.label}'"
                )
            locations.add(row.location)

    @staticmethod
    def _rows(size_spec: SizeSpec) -> list[InventoryRow]:
        return [
            InventoryRow(
                location=r.location,
                on_hand=r.on_hand,
                on_order=r.on_order,
                reserved=r.reserved,
            )
            for r in size_spec.inventory
        ]
