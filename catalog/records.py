from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from core.records.base import pick, to_datetime, to_decimal, to_int


class ProductStatus:
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"

    choices = [
        (DRAFT, "Draft"),
        (ACTIVE, "Active"),
        (INACTIVE, "Inactive"),
        (ARCHIVED, "Archived"),
    ]


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    slug: str
    description: str = ""
    image: str = ""
    parent_id: int | None = None
    sort_order: int = 0
    is_active: bool = True

    @classmethod
    def from_api(cls, data: dict) -> "Category":
        return cls(
            id=to_int(pick(data, "id")),
            name=pick(data, "name", default=""),
            slug=pick(data, "slug", default=""),
            description=pick(data, "description", default=""),
            image=pick(data, "image", default=""),
            parent_id=to_int(pick(data, "parentId", "parent_id")),
            sort_order=to_int(pick(data, "sortOrder", "sort_order"), 0),
            is_active=bool(pick(data, "isActive", "is_active", default=True)),
        )

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Purpose:
    id: int
    name: str
    slug: str
    description: str = ""
    color: str = "#6366f1"
    is_active: bool = True
    sort_order: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "Purpose":
        return cls(
            id=to_int(pick(data, "id")),
            name=pick(data, "name", default=""),
            slug=pick(data, "slug", default=""),
            description=pick(data, "description", default=""),
            color=pick(data, "color", default="#6366f1"),
            is_active=bool(pick(data, "isActive", "is_active", default=True)),
            sort_order=to_int(pick(data, "sortOrder", "sort_order"), 0),
        )

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class ProductImage:
    id: int
    image_url: str
    alt_text: str = ""
    is_primary: bool = False
    sort_order: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "ProductImage":
        return cls(
            id=to_int(pick(data, "id")),
            image_url=pick(data, "imageUrl", "image_url", default=""),
            alt_text=pick(data, "altText", "alt_text", default=""),
            is_primary=bool(pick(data, "isPrimary", "is_primary", default=False)),
            sort_order=to_int(pick(data, "sortOrder", "sort_order"), 0),
        )


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    slug: str = ""
    category_id: int | None = None
    sku: str = ""
    description: str = ""
    short_description: str = ""
    base_price: Decimal = Decimal("0")
    compare_price: Decimal | None = None
    stock: int = 0
    low_stock_threshold: int = 0
    thumbnail_image: str = ""
    status: str = ProductStatus.DRAFT
    is_featured: bool = False
    category: Category | None = None
    images: list[ProductImage] = field(default_factory=list)
    purposes: list[Purpose] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Product":
        category = pick(data, "category")
        compare_price = pick(data, "comparePrice", "compare_price")
        return cls(
            id=to_int(pick(data, "id")),
            name=pick(data, "name", default=""),
            slug=pick(data, "slug", default=""),
            category_id=to_int(pick(data, "categoryId", "category_id")),
            sku=pick(data, "sku", default=""),
            description=pick(data, "description", default=""),
            short_description=pick(data, "shortDescription", "short_description", default=""),
            base_price=to_decimal(pick(data, "basePrice", "base_price")),
            compare_price=to_decimal(compare_price) if compare_price is not None else None,
            stock=to_int(pick(data, "stock"), 0),
            low_stock_threshold=to_int(pick(data, "lowStockThreshold", "low_stock_threshold"), 0),
            thumbnail_image=pick(data, "thumbnailImage", "thumbnail_image", default=""),
            status=pick(data, "status", default=ProductStatus.DRAFT),
            is_featured=bool(pick(data, "isFeatured", "is_featured", default=False)),
            category=Category.from_api(category) if isinstance(category, dict) else None,
            images=[ProductImage.from_api(i) for i in pick(data, "images", default=[])],
            purposes=[Purpose.from_api(p) for p in pick(data, "purposes", default=[])],
            tags=list(pick(data, "tags", default=[])),
            created_at=to_datetime(pick(data, "createdAt", "created_at")),
        )

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.stock <= self.low_stock_threshold

    @property
    def stock_status(self) -> str:
        if self.is_out_of_stock:
            return "Out of Stock"
        if self.stock <= self.low_stock_threshold:
            return "Low Stock"
        return "In Stock"

    def __str__(self):
        return self.name
