from __future__ import annotations

from catalog.records import Category, Product, ProductImage, Purpose
from core.services.api import CommerceApiClient, Page

SORT_ORDERS = ("ASC", "DESC")


def product_params(filters: dict | None) -> dict:
    """Query params for GET /admin/products; sort order must be ASC or DESC."""
    params = {}
    for key, value in (filters or {}).items():
        if value in (None, ""):
            continue
        if key == "sortOrder":
            value = str(value).upper()
            if value not in SORT_ORDERS:
                raise ValueError("Sort order must be ASC or DESC")
        params[key] = value
    return params


# Products

def list_products(client: CommerceApiClient, filters: dict | None = None) -> Page:
    data = client.get("/admin/products", product_params(filters), error_message="Failed to load products")
    return Page.from_api(data, Product.from_api)


def get_product(client: CommerceApiClient, product_id: int) -> Product:
    data = client.get(f"/admin/products/{product_id}", error_message="Failed to load product")
    return Product.from_api(data or {})


def create_product(client: CommerceApiClient, payload: dict) -> Product | None:
    data = client.post("/admin/products", payload, error_message="Failed to create product")
    return Product.from_api(data) if isinstance(data, dict) else None


def update_product(client: CommerceApiClient, product_id: int, payload: dict) -> Product | None:
    data = client.put(f"/admin/products/{product_id}", payload, error_message="Failed to update product")
    return Product.from_api(data) if isinstance(data, dict) else None


def delete_product(client: CommerceApiClient, product_id: int) -> None:
    client.delete(f"/admin/products/{product_id}", error_message="Failed to delete product")


def bulk_delete_products(client: CommerceApiClient, ids: list[int]) -> None:
    client.delete("/admin/products/bulk-delete", {"ids": ids}, error_message="Failed to delete products")


def low_stock_products(client: CommerceApiClient) -> list[Product]:
    data = client.get("/admin/products/low-stock", error_message="Failed to load low stock products")
    return [Product.from_api(row) for row in data or []]


def update_stock(client: CommerceApiClient, product_id: int, stock: int) -> None:
    client.put(f"/admin/products/{product_id}/stock", {"stock": stock}, error_message="Failed to update stock")


def add_product_image(client: CommerceApiClient, product_id: int, image_url: str,
                      alt_text: str = "", is_primary: bool = False) -> ProductImage | None:
    data = client.post(
        f"/admin/products/{product_id}/images",
        {"imageUrl": image_url, "altText": alt_text, "isPrimary": is_primary},
        error_message="Failed to add image",
    )
    return ProductImage.from_api(data) if isinstance(data, dict) else None


def remove_product_image(client: CommerceApiClient, product_id: int, image_id: int) -> None:
    client.delete(f"/admin/products/{product_id}/images/{image_id}", error_message="Failed to remove image")


def attach_purpose(client: CommerceApiClient, product_id: int, purpose_id: int) -> None:
    client.post(f"/admin/products/{product_id}/purposes/{purpose_id}", error_message="Failed to attach purpose")


def detach_purpose(client: CommerceApiClient, product_id: int, purpose_id: int) -> None:
    client.delete(f"/admin/products/{product_id}/purposes/{purpose_id}", error_message="Failed to detach purpose")


# Categories

def list_categories(client: CommerceApiClient) -> list[Category]:
    data = client.get("/categories", error_message="Failed to load categories")
    return [Category.from_api(row) for row in data or []]


def create_category(client: CommerceApiClient, payload: dict) -> None:
    client.post("/categories", payload, error_message="Failed to create category")


def update_category(client: CommerceApiClient, category_id: int, payload: dict) -> None:
    client.put(f"/categories/{category_id}", payload, error_message="Failed to update category")


def delete_category(client: CommerceApiClient, category_id: int) -> None:
    client.delete(f"/categories/{category_id}", error_message="Failed to delete category")


# Purposes

def list_purposes(client: CommerceApiClient) -> list[Purpose]:
    data = client.get("/purposes", error_message="Failed to load purposes")
    return [Purpose.from_api(row) for row in data or []]


def create_purpose(client: CommerceApiClient, payload: dict) -> None:
    client.post("/purposes", payload, error_message="Failed to create purpose")


def update_purpose(client: CommerceApiClient, purpose_id: int, payload: dict) -> None:
    client.put(f"/purposes/{purpose_id}", payload, error_message="Failed to update purpose")


def delete_purpose(client: CommerceApiClient, purpose_id: int) -> None:
    client.delete(f"/purposes/{purpose_id}", error_message="Failed to delete purpose")


def inventory_snapshot(products) -> dict:
    """Counts shown by the dashboard's product monitor."""
    products = list(products)
    return {
        "total": len(products),
        "active": sum(1 for p in products if p.status == "active"),
        "inactive": sum(1 for p in products if p.status == "inactive"),
        "low_stock": sum(1 for p in products if p.is_low_stock),
        "out_of_stock": sum(1 for p in products if p.is_out_of_stock),
    }
