"""
Catalog tests: image pipeline, product records and services, product/taxonomy screens.
"""
import io
from decimal import Decimal
from unittest import mock

from django.contrib.messages import get_messages
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from django.urls import reverse
from PIL import Image

from catalog import services
from catalog.forms import ProductForm, PurposeForm
from catalog.images import (
    ImageValidationError,
    compress_image,
    format_bytes,
    safe_filename,
    upload_image,
    validate_image,
)
from catalog.records import Category, Product, Purpose
from core.services.api import ApiError, Page
from core.test_utils import ApiRecordFactory, ConsoleClient


def _image_bytes(size=(100, 100), fmt="PNG", mode="RGB"):
    out = io.BytesIO()
    Image.new(mode, size, "orange").save(out, format=fmt)
    return out.getvalue()


def _upload(name="photo.png", size=(100, 100), fmt="PNG", content_type="image/png", mode="RGB"):
    return SimpleUploadedFile(name, _image_bytes(size, fmt, mode), content_type=content_type)


def _product(**overrides):
    return Product.from_api(ApiRecordFactory.product_data(**overrides))


def _messages(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


class FormatBytesTests(SimpleTestCase):
    def test_format_bytes(self):
        self.assertEqual(format_bytes(0), "0 Bytes")
        self.assertEqual(format_bytes(500), "500 Bytes")
        self.assertEqual(format_bytes(1536), "1.5 KB")
        self.assertEqual(format_bytes(int(2.5 * 1024 * 1024)), "2.5 MB")

    def test_safe_filename(self):
        self.assertEqual(safe_filename("my photo (1).jpg"), "my_photo__1_.jpg")
        self.assertEqual(safe_filename(""), "upload")


class ValidateImageTests(SimpleTestCase):
    def test_valid_png(self):
        validate_image(_upload())

    def test_too_large(self):
        with self.assertRaisesMessage(ImageValidationError, "File size must be less than"):
            validate_image(_upload(fmt="JPEG", content_type="image/jpeg"), max_size_mb=0.0001)

    def test_type_not_allowed(self):
        with self.assertRaisesMessage(ImageValidationError, "File type not allowed"):
            validate_image(_upload(name="photo.bmp", fmt="BMP", content_type="image/bmp"))

    def test_not_an_image(self):
        upload = SimpleUploadedFile("photo.png", b"definitely not a png", content_type="image/png")
        with self.assertRaisesMessage(ImageValidationError, "File is not a readable image"):
            validate_image(upload)

    def test_dimensions(self):
        with self.assertRaisesMessage(ImageValidationError, "at most 50x50 pixels"):
            validate_image(_upload(size=(100, 100)), max_width=50, max_height=50)


@override_settings(IMAGE_UPLOAD_MAX_WIDTH=1200, IMAGE_UPLOAD_QUALITY=80)
class CompressImageTests(SimpleTestCase):
    def test_downscales_keeping_aspect_ratio(self):
        content, content_type = compress_image(_upload(size=(2400, 1200)))
        self.assertEqual(content_type, "image/png")
        img = Image.open(io.BytesIO(content))
        self.assertEqual(img.size, (1200, 600))
        self.assertEqual(img.format, "PNG")

    def test_small_image_keeps_size(self):
        content, _ = compress_image(_upload(size=(300, 200)))
        self.assertEqual(Image.open(io.BytesIO(content)).size, (300, 200))

    def test_jpeg_drops_alpha(self):
        upload = _upload(name="photo.jpg", mode="RGBA", content_type="image/jpeg")
        content, content_type = compress_image(upload, max_width=50)
        img = Image.open(io.BytesIO(content))
        self.assertEqual(content_type, "image/jpeg")
        self.assertEqual((img.format, img.mode, img.size), ("JPEG", "RGB", (50, 50)))

    def test_upload(self):
        client = mock.Mock()
        client.upload.return_value = {"url": "https://cdn.example/products/1/a.png", "key": "products/1/a.png"}
        with self.assertLogs("catalog.images", "INFO"):
            result = upload_image(client, _upload(name="front view.png", size=(1600, 800)), path="products/1")

        self.assertEqual(result, {"url": "https://cdn.example/products/1/a.png", "key": "products/1/a.png"})
        args, kwargs = client.upload.call_args
        self.assertEqual(args[0], "/upload")
        self.assertEqual(args[1], "front_view.png")
        self.assertEqual(args[3], "image/png")
        self.assertEqual(Image.open(io.BytesIO(args[2])).size, (1200, 600))
        self.assertEqual(kwargs["extra"], {"path": "products/1"})


class ProductRecordTests(SimpleTestCase):
    def test_from_api(self):
        product = _product(comparePrice="24.50", category={"id": 1, "name": "Idols", "slug": "idols"},
                           purposes=[{"id": 2, "name": "Prosperity", "color": "#ffaa00"}], tags=["brass"])
        self.assertEqual(product.base_price, Decimal("19.99"))
        self.assertEqual(product.compare_price, Decimal("24.50"))
        self.assertEqual(product.category.name, "Idols")
        self.assertEqual(product.purposes[0].color, "#ffaa00")
        self.assertEqual(product.tags, ["brass"])
        self.assertIsNone(_product().compare_price)

    def test_stock_status(self):
        self.assertEqual(_product(stock=0).stock_status, "Out of Stock")
        self.assertEqual(_product(stock=5, lowStockThreshold=5).stock_status, "Low Stock")
        self.assertEqual(_product(stock=6, lowStockThreshold=5).stock_status, "In Stock")
        self.assertTrue(_product(stock=1).is_low_stock)
        self.assertFalse(_product(stock=0).is_low_stock)


class CatalogServiceTests(SimpleTestCase):
    def setUp(self):
        self.api = mock.Mock()

    def test_product_params(self):
        self.assertEqual(
            services.product_params({"page": 1, "search": "", "status": None, "sortOrder": "asc"}),
            {"page": 1, "sortOrder": "ASC"},
        )
        with self.assertRaisesMessage(ValueError, "Sort order must be ASC or DESC"):
            services.product_params({"sortOrder": "sideways"})

    def test_list_products(self):
        self.api.get.return_value = {
            "items": [ApiRecordFactory.product_data(id=4)],
            "pagination": {"page": 1, "limit": 20, "total": 1, "totalPages": 1},
        }
        page = services.list_products(self.api, {"page": 1, "limit": 20, "category": None})
        self.api.get.assert_called_once_with(
            "/admin/products", {"page": 1, "limit": 20}, error_message="Failed to load products",
        )
        self.assertEqual([p.id for p in page.items], [4])

    def test_bulk_delete(self):
        services.bulk_delete_products(self.api, [1, 2])
        self.api.delete.assert_called_once_with(
            "/admin/products/bulk-delete", {"ids": [1, 2]}, error_message="Failed to delete products",
        )

    def test_update_stock(self):
        services.update_stock(self.api, 3, 12)
        self.api.put.assert_called_once_with(
            "/admin/products/3/stock", {"stock": 12}, error_message="Failed to update stock",
        )

    def test_add_image(self):
        self.api.post.return_value = {"id": 8, "imageUrl": "https://cdn.example/a.png", "isPrimary": True}
        image = services.add_product_image(self.api, 3, "https://cdn.example/a.png", is_primary=True)
        self.api.post.assert_called_once_with(
            "/admin/products/3/images",
            {"imageUrl": "https://cdn.example/a.png", "altText": "", "isPrimary": True},
            error_message="Failed to add image",
        )
        self.assertTrue(image.is_primary)

    def test_purposes(self):
        services.attach_purpose(self.api, 3, 7)
        self.api.post.assert_called_once_with("/admin/products/3/purposes/7", error_message="Failed to attach purpose")
        services.detach_purpose(self.api, 3, 7)
        self.api.delete.assert_called_once_with("/admin/products/3/purposes/7", error_message="Failed to detach purpose")

    def test_list_categories(self):
        self.api.get.return_value = [ApiRecordFactory.category_data(id=2, name="Incense", slug="incense")]
        self.assertEqual(services.list_categories(self.api), [Category(id=2, name="Incense", slug="incense")])

    def test_inventory_snapshot(self):
        products = [_product(stock=0), _product(stock=2), _product(stock=50, status="inactive")]
        self.assertEqual(services.inventory_snapshot(products), {
            "total": 3, "active": 2, "inactive": 1, "low_stock": 1, "out_of_stock": 1,
        })


class ProductFormTests(SimpleTestCase):
    categories = [Category(id=1, name="Idols", slug="idols")]

    def _data(self, **overrides):
        data = {
            "name": "Brass Ganesha", "slug": "", "category": "1", "base_price": "49.00",
            "compare_price": "", "stock": "10", "low_stock_threshold": "5", "status": "active",
            "tags": "brass, idol, ",
        }
        data.update(overrides)
        return data

    def test_payload(self):
        form = ProductForm(self._data(), categories=self.categories)
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.payload()
        self.assertEqual(payload["slug"], "brass-ganesha")
        self.assertEqual(payload["categoryId"], 1)
        self.assertEqual(payload["basePrice"], 49.0)
        self.assertIsNone(payload["comparePrice"])
        self.assertEqual(payload["tags"], ["brass", "idol"])

    def test_compare_price_below_base(self):
        form = ProductForm(self._data(compare_price="10.00"), categories=self.categories)
        self.assertFalse(form.is_valid())
        self.assertIn("compare_price", form.errors)

    def test_unknown_category(self):
        form = ProductForm(self._data(category="9"), categories=self.categories)
        self.assertFalse(form.is_valid())

    def test_purpose_color(self):
        form = PurposeForm({"name": "Peace", "color": "blue", "sort_order": "0"})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["color"], ["Use a hex color like #6366f1."])


class ConsoleViewTestCase(SimpleTestCase):
    client_class = ConsoleClient

    def setUp(self):
        self.client.login_as()

    def patch(self, target, **kwargs):
        patcher = mock.patch(target, **kwargs)
        self.addCleanup(patcher.stop)
        return patcher.start()


class ProductViewTests(ConsoleViewTestCase):
    def test_list(self):
        self.patch("catalog.views.products.list_categories", return_value=[Category(id=1, name="Idols", slug="idols")])
        list_products = self.patch("catalog.views.products.list_products", return_value=Page(
            items=[_product(id=1, name="Brass Ganesha")], total=41, total_pages=3,
        ))
        response = self.client.get(reverse("catalog:product-list"), {"search": "brass", "page": "1"})
        self.assertContains(response, "Brass Ganesha")
        self.assertContains(response, "Idols")
        self.assertContains(response, "Page 1 of 3")
        filters = list_products.call_args.args[1]
        self.assertEqual(filters["search"], "brass")
        self.assertEqual(filters["sortOrder"], "DESC")

    def test_list_failure(self):
        self.patch("catalog.views.products.list_categories", return_value=[])
        self.patch("catalog.views.products.list_products", side_effect=ApiError("Failed to load products"))
        response = self.client.get(reverse("catalog:product-list"))
        self.assertContains(response, "Failed to load products")
        self.assertContains(response, "No products found.")

    def test_create(self):
        self.patch("catalog.views.products.list_categories", return_value=[Category(id=1, name="Idols", slug="idols")])
        create_product = self.patch("catalog.views.products.create_product")
        response = self.client.post(reverse("catalog:product-create"), {
            "name": "Lotus Incense", "category": "1", "base_price": "4.50", "stock": "100",
            "low_stock_threshold": "10", "status": "draft",
        })
        self.assertRedirects(response, reverse("catalog:product-list"), fetch_redirect_response=False)
        self.assertEqual(create_product.call_args.args[1]["slug"], "lotus-incense")

    def test_bulk_delete(self):
        bulk_delete = self.patch("catalog.views.products.bulk_delete_products")
        response = self.client.post(reverse("catalog:product-bulk-delete"), {"ids": ["1", "2", "x"]})
        self.assertRedirects(response, reverse("catalog:product-list"), fetch_redirect_response=False)
        bulk_delete.assert_called_once_with(mock.ANY, [1, 2])

    def test_bulk_delete_nothing_selected(self):
        bulk_delete = self.patch("catalog.views.products.bulk_delete_products")
        response = self.client.post(reverse("catalog:product-bulk-delete"))
        self.assertRedirects(response, reverse("catalog:product-list"), fetch_redirect_response=False)
        self.assertEqual(_messages(response), ["No products selected"])
        bulk_delete.assert_not_called()

    def test_detail(self):
        self.patch("catalog.views.products.get_product", return_value=_product(
            id=3, purposes=[{"id": 1, "name": "Peace"}],
        ))
        self.patch("catalog.views.products.list_purposes", return_value=[
            Purpose(id=1, name="Peace", slug="peace"), Purpose(id=2, name="Health", slug="health"),
        ])
        response = self.client.get(reverse("catalog:product-detail", args=[3]))
        self.assertContains(response, "Product 3")
        self.assertContains(response, 'enctype="multipart/form-data"')
        self.assertEqual(response.context["purpose_form"].fields["purpose"].choices,
                         [("", "Select a purpose"), ("2", "Health")])

    def test_low_stock_filters(self):
        self.patch("catalog.views.products.low_stock_products", return_value=[
            _product(id=1, name="Brass Diya", stock=0),
            _product(id=2, name="Sandal Incense", stock=4),
            _product(id=3, name="Rudraksha Mala", stock=15),
        ])
        response = self.client.get(reverse("catalog:low-stock"))
        self.assertEqual([p.id for p in response.context["products"]], [1, 2])

        response = self.client.get(reverse("catalog:low-stock"), {"threshold": "20", "search": "incense"})
        self.assertEqual([p.id for p in response.context["products"]], [2])

    def test_stock_update(self):
        update_stock = self.patch("catalog.views.products.update_stock")
        response = self.client.post(reverse("catalog:product-stock", args=[2]),
                                    {"stock": "7", "next": "/products/2/"})
        self.assertRedirects(response, "/products/2/", fetch_redirect_response=False)
        update_stock.assert_called_once_with(mock.ANY, 2, 7)

    def test_stock_update_rejects_negative_and_foreign_next(self):
        update_stock = self.patch("catalog.views.products.update_stock")
        response = self.client.post(reverse("catalog:product-stock", args=[2]),
                                    {"stock": "-1", "next": "https://evil.example/"})
        self.assertRedirects(response, reverse("catalog:low-stock"), fetch_redirect_response=False)
        update_stock.assert_not_called()

    def test_image_add(self):
        upload_image = self.patch("catalog.views.products.upload_image",
                                  return_value={"url": "https://cdn.example/a.png", "key": "a.png"})
        add_image = self.patch("catalog.views.products.add_product_image")
        response = self.client.post(reverse("catalog:product-image-add", args=[5]), {
            "file": _upload(), "alt_text": "Front", "is_primary": "on",
        })
        self.assertRedirects(response, reverse("catalog:product-detail", args=[5]), fetch_redirect_response=False)
        self.assertEqual(upload_image.call_args.kwargs["path"], "products/5")
        add_image.assert_called_once_with(mock.ANY, 5, "https://cdn.example/a.png", alt_text="Front", is_primary=True)

    def test_image_add_rejects_wrong_type(self):
        add_image = self.patch("catalog.views.products.add_product_image")
        upload = _upload(name="photo.bmp", fmt="BMP", content_type="image/bmp")
        response = self.client.post(reverse("catalog:product-image-add", args=[5]), {"file": upload})
        self.assertRedirects(response, reverse("catalog:product-detail", args=[5]), fetch_redirect_response=False)
        self.assertIn("File type not allowed", _messages(response)[0])
        add_image.assert_not_called()


class TaxonomyViewTests(ConsoleViewTestCase):
    def test_category_list_sorted(self):
        self.patch("catalog.views.taxonomy.list_categories", return_value=[
            Category(id=1, name="Lamps", slug="lamps", sort_order=2),
            Category(id=2, name="Idols", slug="idols", sort_order=1),
        ])
        response = self.client.get(reverse("catalog:category-list"))
        self.assertEqual([c.id for c in response.context["categories"]], [2, 1])

    def test_category_create(self):
        self.patch("catalog.views.taxonomy.list_categories", return_value=[])
        create = self.patch("catalog.views.taxonomy.create_category")
        response = self.client.post(reverse("catalog:category-list"), {
            "name": "Puja Thali", "sort_order": "3", "is_active": "on",
        })
        self.assertRedirects(response, reverse("catalog:category-list"), fetch_redirect_response=False)
        create.assert_called_once_with(mock.ANY, {
            "name": "Puja Thali", "slug": "puja-thali", "description": None, "image": None,
            "sortOrder": 3, "isActive": True,
        })

    def test_category_edit_unknown(self):
        self.patch("catalog.views.taxonomy.list_categories", return_value=[])
        self.assertEqual(self.client.get(reverse("catalog:category-edit", args=[9])).status_code, 404)

    def test_purpose_update(self):
        self.patch("catalog.views.taxonomy.list_purposes", return_value=[Purpose(id=4, name="Peace", slug="peace")])
        update = self.patch("catalog.views.taxonomy.update_purpose")
        response = self.client.post(reverse("catalog:purpose-edit", args=[4]), {
            "name": "Inner Peace", "slug": "inner-peace", "color": "#22aa88", "sort_order": "0",
        })
        self.assertRedirects(response, reverse("catalog:purpose-list"), fetch_redirect_response=False)
        self.assertEqual(update.call_args.args[1], 4)
        self.assertEqual(update.call_args.args[2]["color"], "#22aa88")
        self.assertFalse(update.call_args.args[2]["isActive"])

    def test_purpose_delete(self):
        delete = self.patch("catalog.views.taxonomy.delete_purpose")
        response = self.client.post(reverse("catalog:purpose-delete", args=[4]))
        self.assertRedirects(response, reverse("catalog:purpose-list"), fetch_redirect_response=False)
        delete.assert_called_once_with(mock.ANY, 4)
