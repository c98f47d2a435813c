from django import forms
from django.utils.text import slugify

from catalog.images import ImageValidationError, validate_image
from catalog.records import ProductStatus

SORT_BY_CHOICES = [
    ("createdAt", "Newest"),
    ("name", "Name"),
    ("basePrice", "Price"),
    ("stock", "Stock"),
]

SORT_ORDER_CHOICES = [("DESC", "Descending"), ("ASC", "Ascending")]


def _category_choices(categories, empty_label):
    return [("", empty_label)] + [(str(c.id), c.name) for c in categories]


class ProductFilterForm(forms.Form):
    search = forms.CharField(required=False, widget=forms.TextInput(attrs={"placeholder": "Search name or SKU"}))
    category = forms.TypedChoiceField(required=False, choices=(), coerce=int, empty_value=None)
    status = forms.ChoiceField(required=False, choices=[("", "All statuses")] + ProductStatus.choices)
    sort_by = forms.ChoiceField(required=False, choices=SORT_BY_CHOICES)
    sort_order = forms.ChoiceField(required=False, choices=SORT_ORDER_CHOICES)
    page = forms.IntegerField(required=False, min_value=1)

    def __init__(self, *args, categories=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["category"].choices = _category_choices(categories, "All categories")

    def api_filters(self, limit=20) -> dict:
        data = self.cleaned_data if self.is_valid() else {}
        return {
            "page": data.get("page") or 1,
            "limit": limit,
            "search": data.get("search"),
            "category": data.get("category"),
            "status": data.get("status"),
            "sortBy": data.get("sort_by") or "createdAt",
            "sortOrder": data.get("sort_order") or "DESC",
        }


class ProductForm(forms.Form):
    name = forms.CharField(max_length=255)
    slug = forms.SlugField(max_length=255, required=False, help_text="Leave blank to generate from the name.")
    category = forms.TypedChoiceField(choices=(), coerce=int)
    sku = forms.CharField(max_length=100, required=False)
    short_description = forms.CharField(max_length=500, required=False)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 4}))
    base_price = forms.DecimalField(min_value=0, decimal_places=2, max_digits=12)
    compare_price = forms.DecimalField(min_value=0, decimal_places=2, max_digits=12, required=False)
    stock = forms.IntegerField(min_value=0, initial=0)
    low_stock_threshold = forms.IntegerField(min_value=0, initial=5)
    status = forms.ChoiceField(choices=ProductStatus.choices, initial=ProductStatus.DRAFT)
    is_featured = forms.BooleanField(required=False)
    thumbnail_image = forms.URLField(required=False)
    tags = forms.CharField(required=False, help_text="Comma separated.")

    def __init__(self, *args, categories=(), product=None, **kwargs):
        if product is not None and "initial" not in kwargs:
            kwargs["initial"] = {
                "name": product.name,
                "slug": product.slug,
                "category": product.category_id,
                "sku": product.sku,
                "short_description": product.short_description,
                "description": product.description,
                "base_price": product.base_price,
                "compare_price": product.compare_price,
                "stock": product.stock,
                "low_stock_threshold": product.low_stock_threshold,
                "status": product.status,
                "is_featured": product.is_featured,
                "thumbnail_image": product.thumbnail_image,
                "tags": ", ".join(product.tags),
            }
        super().__init__(*args, **kwargs)
        self.fields["category"].choices = _category_choices(categories, "Select a category")

    def clean(self):
        cleaned = super().clean()
        base, compare = cleaned.get("base_price"), cleaned.get("compare_price")
        if base is not None and compare is not None and compare < base:
            self.add_error("compare_price", "Compare price should not be lower than the base price.")
        if not cleaned.get("slug") and cleaned.get("name"):
            cleaned["slug"] = slugify(cleaned["name"])
        return cleaned

    def payload(self) -> dict:
        d = self.cleaned_data
        return {
            "name": d["name"],
            "slug": d["slug"],
            "categoryId": d["category"],
            "sku": d["sku"] or None,
            "shortDescription": d["short_description"] or None,
            "description": d["description"] or None,
            "basePrice": float(d["base_price"]),
            "comparePrice": float(d["compare_price"]) if d["compare_price"] is not None else None,
            "stock": d["stock"],
            "lowStockThreshold": d["low_stock_threshold"],
            "status": d["status"],
            "isFeatured": d["is_featured"],
            "thumbnailImage": d["thumbnail_image"] or None,
            "tags": [t.strip() for t in d["tags"].split(",") if t.strip()],
        }


class StockUpdateForm(forms.Form):
    stock = forms.IntegerField(min_value=0)


class LowStockFilterForm(forms.Form):
    search = forms.CharField(required=False)
    threshold = forms.IntegerField(required=False, min_value=0, initial=10)


class CategoryForm(forms.Form):
    name = forms.CharField(max_length=255)
    slug = forms.SlugField(max_length=255, required=False)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))
    image = forms.URLField(required=False)
    sort_order = forms.IntegerField(initial=0)
    is_active = forms.BooleanField(required=False, initial=True)

    def __init__(self, *args, category=None, **kwargs):
        if category is not None and "initial" not in kwargs:
            kwargs["initial"] = {
                "name": category.name,
                "slug": category.slug,
                "description": category.description,
                "image": category.image,
                "sort_order": category.sort_order,
                "is_active": category.is_active,
            }
        super().__init__(*args, **kwargs)
        self.fields["sort_order"].help_text = "Lower numbers appear first."

    def payload(self) -> dict:
        d = self.cleaned_data
        return {
            "name": d["name"],
            "slug": d["slug"] or slugify(d["name"]),
            "description": d["description"] or None,
            "image": d["image"] or None,
            "sortOrder": d["sort_order"],
            "isActive": d["is_active"],
        }


class PurposeForm(forms.Form):
    name = forms.CharField(max_length=255)
    slug = forms.SlugField(max_length=255, required=False)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))
    color = forms.RegexField(regex=r"^#[0-9a-fA-F]{6}$", initial="#6366f1",
                             widget=forms.TextInput(attrs={"type": "color"}),
                             error_messages={"invalid": "Use a hex color like #6366f1."})
    sort_order = forms.IntegerField(initial=0)
    is_active = forms.BooleanField(required=False, initial=True)

    def __init__(self, *args, purpose=None, **kwargs):
        if purpose is not None and "initial" not in kwargs:
            kwargs["initial"] = {
                "name": purpose.name,
                "slug": purpose.slug,
                "description": purpose.description,
                "color": purpose.color,
                "sort_order": purpose.sort_order,
                "is_active": purpose.is_active,
            }
        super().__init__(*args, **kwargs)

    def payload(self) -> dict:
        d = self.cleaned_data
        return {
            "name": d["name"],
            "slug": d["slug"] or slugify(d["name"]),
            "description": d["description"] or None,
            "color": d["color"],
            "sortOrder": d["sort_order"],
            "isActive": d["is_active"],
        }


class ProductImageForm(forms.Form):
    file = forms.ImageField()
    alt_text = forms.CharField(max_length=255, required=False)
    is_primary = forms.BooleanField(required=False)

    def clean_file(self):
        upload = self.cleaned_data["file"]
        try:
            validate_image(upload)
        except ImageValidationError as exc:
            raise forms.ValidationError(str(exc))
        return upload


class AttachPurposeForm(forms.Form):
    purpose = forms.TypedChoiceField(choices=(), coerce=int)

    def __init__(self, *args, purposes=(), attached=(), **kwargs):
        super().__init__(*args, **kwargs)
        attached_ids = {p.id for p in attached}
        self.fields["purpose"].choices = [("", "Select a purpose")] + [
            (str(p.id), p.name) for p in purposes if p.id not in attached_ids
        ]
