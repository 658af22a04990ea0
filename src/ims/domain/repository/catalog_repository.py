"""Abstract repository for the catalog aggregates.

Defined in the domain layer so the domain never depends on
infrastructure.  Products, variants and sizes share one repository
because cascades and deep reads always walk all three levels.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from ims.domain.model.catalog import Product, Size, Variant


class CatalogRepository(ABC):

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """All writes made inside the block land together or not at all.

        The block also covers writes made through the archive repository
        and the ledger when they share the same store.
        """

    # --- Products -------------------------------------------------------------

    @abstractmethod
    def get_product(self, product_id: str) -> Product | None:
        """Return a product by ID (deleted or not), or None."""

    @abstractmethod
    def list_products(self) -> list[Product]:
        """Return every product, deleted ones included."""

    @abstractmethod
    def save_product(self, product: Product) -> None:
        """Persist a new or updated product."""

    # --- Variants -------------------------------------------------------------

    @abstractmethod
    def get_variant(self, variant_id: str) -> Variant | None:
        """Return a variant by ID (deleted or not), or None."""

    @abstractmethod
    def get_variant_by_sku(self, sku: str) -> Variant | None:
        """Return the variant with this SKU (deleted or not), or None."""

    @abstractmethod
    def variants_of(self, product_id: str) -> list[Variant]:
        """Return every variant of a product, deleted ones included."""

    @abstractmethod
    def save_variant(self, variant: Variant) -> None:
        """Persist a new or updated variant."""

    # --- Sizes ----------------------------------------------------------------

    @abstractmethod
    def get_size(self, size_id: str) -> Size | None:
        """Return a size by ID (deleted or not), or None."""

    @abstractmethod
    def sizes_of(self, variant_id: str) -> list[Size]:
        """Return every size of a variant, deleted ones included."""

    @abstractmethod
    def save_size(self, size: Size) -> None:
        """Persist a new or updated size without touching its inventory rows."""
