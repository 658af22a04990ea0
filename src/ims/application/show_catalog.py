"""Application services: catalog read use cases (queries).

Thin wrappers over the Catalog Aggregator that turn "not visible" into
EntityNotFoundError.
"""

from __future__ import annotations

from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.model.catalog import ProductStatus
from ims.domain.repository.catalog_repository import CatalogRepository
from ims.domain.repository.inventory_ledger import InventoryLedger
from ims.domain.service.catalog_aggregator import (
    CatalogAggregator,
    ProductListing,
    ProductView,
    SizeView,
    VariantView,
)


class ShowProductHandler:

    def __init__(self, catalog: CatalogRepository, ledger: InventoryLedger) -> None:
        self._aggregator = CatalogAggregator(catalog, ledger)

    def handle(self, product_id: str) -> ProductView:
        view = self._aggregator.product_deep(product_id)
        if view is None:
            raise EntityNotFoundError(f"Product {product_id} not found")
        return view


class ShowVariantHandler:

    def __init__(self, catalog: CatalogRepository, ledger: InventoryLedger) -> None:
        self._aggregator = CatalogAggregator(catalog, ledger)

    def handle(self, variant_id: str | None = None, sku: str | None = None) -> VariantView:
        if (variant_id is None) == (sku is None):
            raise ValidationError("Give exactly one of variant id or SKU")
        if sku is not None:
            view = self._aggregator.variant_deep_by_sku(sku)
        else:
            view = self._aggregator.variant_deep(variant_id)
        if view is None:
            raise EntityNotFoundError(f"Variant {sku or variant_id} not found")
        return view


class ShowSizeHandler:

    def __init__(self, catalog: CatalogRepository, ledger: InventoryLedger) -> None:
        self._aggregator = CatalogAggregator(catalog, ledger)

    def handle(self, size_id: str) -> SizeView:
        view = self._aggregator.size_view(size_id)
        if view is None:
            raise EntityNotFoundError(f"Size {size_id} not found")
        return view


class ListProductsHandler:

    def __init__(self, catalog: CatalogRepository, ledger: InventoryLedger) -> None:
        self._aggregator = CatalogAggregator(catalog, ledger)

    def handle(self, status: str | None = None) -> list[ProductListing]:
        target = None
        if status is not None:
            try:
                target = ProductStatus(status.lower())
            except ValueError:
                raise ValidationError(f"Unknown product status '{status}'")
        return self._aggregator.list_products(target)
