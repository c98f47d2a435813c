from django.urls import path

from catalog.views.products import (
    low_stock,
    product_bulk_delete,
    product_create,
    product_delete,
    product_detail,
    product_edit,
    product_image_add,
    product_image_remove,
    product_list,
    product_purpose_attach,
    product_purpose_detach,
    product_stock_update,
)
from catalog.views.taxonomy import category_delete, category_edit, purpose_delete, purpose_edit

app_name = "catalog"

urlpatterns = [
    # Products
    path("products/", product_list, name="product-list"),
    path("products/new/", product_create, name="product-create"),
    path("products/bulk-delete/", product_bulk_delete, name="product-bulk-delete"),
    path("products/low-stock/", low_stock, name="low-stock"),
    path("products/<int:pk>/", product_detail, name="product-detail"),
    path("products/<int:pk>/edit/", product_edit, name="product-edit"),
    path("products/<int:pk>/delete/", product_delete, name="product-delete"),
    path("products/<int:pk>/stock/", product_stock_update, name="product-stock"),
    path("products/<int:pk>/images/", product_image_add, name="product-image-add"),
    path("products/<int:pk>/images/<int:image_id>/delete/", product_image_remove, name="product-image-remove"),
    path("products/<int:pk>/purposes/", product_purpose_attach, name="product-purpose-attach"),
    path("products/<int:pk>/purposes/<int:purpose_id>/delete/", product_purpose_detach, name="product-purpose-detach"),

    # Categories / purposes
    path("categories/", category_edit, name="category-list"),
    path("categories/<int:pk>/", category_edit, name="category-edit"),
    path("categories/<int:pk>/delete/", category_delete, name="category-delete"),
    path("purposes/", purpose_edit, name="purpose-list"),
    path("purposes/<int:pk>/", purpose_edit, name="purpose-edit"),
    path("purposes/<int:pk>/delete/", purpose_delete, name="purpose-delete"),
]
