"""Catalog aggregates: Product -> Variant -> Size.

A Product groups Variants under one style number; a Variant groups Sizes
under one color/SKU identity.  Ownership is by foreign key, not
embedding.  Every level is soft-deletable and a soft delete on a parent
is cascaded to its descendants by the archive use cases.

Stock does not live on these classes.  A Size's inventory rows are owned
by the Size but reached through the InventoryLedger, which is the only
way to change them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import uuid4

from ims.domain.exceptions import ValidationError
from ims.domain.model.value_objects import Price


class ProductStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"
    ARCHIVED = "archived"


def new_id() -> str:
    return uuid4().hex


def _required(value: str | None, what: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{what} is required")
    return str(value).strip()


@dataclass
class Product:
    """Aggregate root for a style.

    Use ``Product.create()`` for new products; ``__init__`` is kept
    simple so repositories can reconstitute persisted products.
    """

    id: str
    style_number: str
    title: str
    price: Price
    status: ProductStatus = ProductStatus.DRAFT
    description: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    is_deleted: bool = False
    created_by: str | None = None
    updated_by: str | None = None

    @staticmethod
    def create(
        style_number: str,
        title: str,
        price: int,
        status: ProductStatus = ProductStatus.ACTIVE,
        description: str | None = None,
        attributes: dict[str, Any] | None = None,
        created_by: str | None = None,
    ) -> Product:
        if status == ProductStatus.ARCHIVED:
            raise ValidationError("A new product cannot start archived")
        return Product(
            id=new_id(),
            style_number=_required(style_number, "Style number"),
            title=_required(title, "Title"),
            price=Price(price),
            status=status,
            description=description,
            attributes=dict(attributes or {}),
            created_by=created_by,
        )

    def set_status(self, status: ProductStatus, actor: str | None = None) -> None:
        """Metadata-only status change.

        Archiving is not a plain status write; it goes through the
        cascade archive so that the soft delete reaches every descendant.
        """
        if self.is_deleted:
            raise ValidationError(f"Product {self.id} is archived")
        if status == ProductStatus.ARCHIVED:
            raise ValidationError("Use the archive operation to archive a product")
        self.status = status
        self.updated_by = actor

    def archive(self, actor: str | None = None) -> None:
        self.status = ProductStatus.ARCHIVED
        self.is_deleted = True
        self.updated_by = actor


@dataclass
class Color:
    name: str
    code: str | None = None


@dataclass
class Variant:
    """One color/SKU of a product."""

    id: str
    product_id: str
    sku: str
    color: Color
    color_master_id: str | None = None
    is_deleted: bool = False
    created_by: str | None = None
    updated_by: str | None = None

    @staticmethod
    def create(
        product_id: str,
        sku: str,
        color: Color,
        color_master_id: str | None = None,
        created_by: str | None = None,
    ) -> Variant:
        return Variant(
            id=new_id(),
            product_id=product_id,
            sku=_required(sku, "SKU"),
            color=Color(name=_required(color.name, "Color name"), code=color.code),
            color_master_id=color_master_id,
            created_by=created_by,
        )

    def soft_delete(self, actor: str | None = None) -> None:
        self.is_deleted = True
        self.updated_by = actor


@dataclass
class Size:
    """One size of a variant; the unit that stock is tracked against."""

    id: str
    variant_id: str
    label: str
    barcode: str
    size_master_id: str | None = None
    is_deleted: bool = False
    created_by: str | None = None
    updated_by: str | None = None

    @staticmethod
    def create(
        variant_id: str,
        label: str,
        barcode: str,
        size_master_id: str | None = None,
        created_by: str | None = None,
    ) -> Size:
        return Size(
            id=new_id(),
            variant_id=variant_id,
            label=_required(label, "Size label"),
            barcode=_required(barcode, "Barcode"),
            size_master_id=size_master_id,
            created_by=created_by,
        )

    def soft_delete(self, actor: str | None = None) -> None:
        self.is_deleted = True
        self.updated_by = actor
