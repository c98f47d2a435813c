from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from catalog.forms import (
    AttachPurposeForm,
    LowStockFilterForm,
    ProductFilterForm,
    ProductForm,
    ProductImageForm,
    StockUpdateForm,
)
from catalog.images import ImageValidationError, upload_image
from catalog.services import (
    add_product_image,
    attach_purpose,
    bulk_delete_products,
    create_product,
    delete_product,
    detach_purpose,
    get_product,
    list_categories,
    list_products,
    list_purposes,
    low_stock_products,
    remove_product_image,
    update_product,
    update_stock,
)
from core.permissions import console_login_required
from core.services.api import ApiError, Page, api_client_for
from core.views.helpers import fetch_or_default, next_url, report_api_error, selected_ids

PAGE_SIZE = 20


def _query_without_page(request):
    query = request.GET.copy()
    query.pop("page", None)
    return query.urlencode()


@console_login_required
def product_list(request):
    client = api_client_for(request)
    categories = fetch_or_default(request, list_categories, client)
    filter_form = ProductFilterForm(request.GET or None, categories=categories)

    page = fetch_or_default(request, list_products, client, filter_form.api_filters(limit=PAGE_SIZE), default=Page())

    names = {c.id: c.name for c in categories}
    rows = [(p, p.category.name if p.category else names.get(p.category_id, "")) for p in page.items]

    return render(request, "catalog/product_list.html", {
        "filter_form": filter_form,
        "page": page,
        "rows": rows,
        "query": _query_without_page(request),
    })


@console_login_required
def product_create(request):
    client = api_client_for(request)
    categories = fetch_or_default(request, list_categories, client)

    if request.method == "POST":
        form = ProductForm(request.POST, categories=categories)
        if form.is_valid():
            try:
                create_product(client, form.payload())
            except ApiError as exc:
                report_api_error(request, exc)
            else:
                messages.success(request, "Product created successfully")
                return redirect("catalog:product-list")
    else:
        form = ProductForm(categories=categories)

    return render(request, "catalog/product_form.html", {"form": form, "product": None})


@console_login_required
def product_edit(request, pk):
    client = api_client_for(request)
    try:
        product = get_product(client, pk)
    except ApiError as exc:
        report_api_error(request, exc)
        return redirect("catalog:product-list")

    categories = fetch_or_default(request, list_categories, client)

    if request.method == "POST":
        form = ProductForm(request.POST, categories=categories, product=product)
        if form.is_valid():
            try:
                update_product(client, pk, form.payload())
            except ApiError as exc:
                report_api_error(request, exc)
            else:
                messages.success(request, "Product updated successfully")
                return redirect("catalog:product-detail", pk=pk)
    else:
        form = ProductForm(categories=categories, product=product)

    return render(request, "catalog/product_form.html", {"form": form, "product": product})


@console_login_required
def product_detail(request, pk):
    client = api_client_for(request)
    try:
        product = get_product(client, pk)
    except ApiError as exc:
        report_api_error(request, exc)
        return redirect("catalog:product-list")

    purposes = fetch_or_default(request, list_purposes, client)

    return render(request, "catalog/product_detail.html", {
        "product": product,
        "image_form": ProductImageForm(),
        "purpose_form": AttachPurposeForm(purposes=purposes, attached=product.purposes),
        "stock_form": StockUpdateForm(initial={"stock": product.stock}),
    })


@console_login_required
@require_POST
def product_delete(request, pk):
    try:
        delete_product(api_client_for(request), pk)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "Product deleted successfully")
    return redirect("catalog:product-list")


@console_login_required
@require_POST
def product_bulk_delete(request):
    ids = selected_ids(request)
    if not ids:
        messages.error(request, "No products selected")
        return redirect("catalog:product-list")

    try:
        bulk_delete_products(api_client_for(request), ids)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, f"{len(ids)} products deleted successfully")
    return redirect("catalog:product-list")


@console_login_required
def low_stock(request):
    client = api_client_for(request)
    filter_form = LowStockFilterForm(request.GET or None)

    search, threshold = "", 10
    if filter_form.is_valid():
        search = (filter_form.cleaned_data["search"] or "").lower()
        if filter_form.cleaned_data["threshold"] is not None:
            threshold = filter_form.cleaned_data["threshold"]

    products = [
        p for p in fetch_or_default(request, low_stock_products, client)
        if p.stock <= threshold and (search in p.name.lower() or search in (p.sku or "").lower())
    ]

    return render(request, "catalog/low_stock.html", {
        "filter_form": filter_form,
        "products": products,
        "threshold": threshold,
    })


@console_login_required
@require_POST
def product_stock_update(request, pk):
    form = StockUpdateForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Stock must be a whole number of 0 or more")
    else:
        try:
            update_stock(api_client_for(request), pk, form.cleaned_data["stock"])
        except ApiError as exc:
            report_api_error(request, exc)
        else:
            messages.success(request, "Stock updated successfully")

    return redirect(next_url(request, "catalog:low-stock"))


@console_login_required
@require_POST
def product_image_add(request, pk):
    form = ProductImageForm(request.POST, request.FILES)
    if not form.is_valid():
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return redirect("catalog:product-detail", pk=pk)

    client = api_client_for(request)
    try:
        uploaded = upload_image(client, form.cleaned_data["file"], path=f"products/{pk}")
        add_product_image(
            client, pk, uploaded["url"],
            alt_text=form.cleaned_data["alt_text"],
            is_primary=form.cleaned_data["is_primary"],
        )
    except ImageValidationError as exc:
        messages.error(request, str(exc))
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "Image added")
    return redirect("catalog:product-detail", pk=pk)


@console_login_required
@require_POST
def product_image_remove(request, pk, image_id):
    try:
        remove_product_image(api_client_for(request), pk, image_id)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "Image removed")
    return redirect("catalog:product-detail", pk=pk)


@console_login_required
@require_POST
def product_purpose_attach(request, pk):
    client = api_client_for(request)
    purposes = fetch_or_default(request, list_purposes, client)
    form = AttachPurposeForm(request.POST, purposes=purposes)
    if not form.is_valid():
        messages.error(request, "Select a purpose to attach")
        return redirect("catalog:product-detail", pk=pk)

    try:
        attach_purpose(client, pk, form.cleaned_data["purpose"])
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "Purpose attached")
    return redirect("catalog:product-detail", pk=pk)


@console_login_required
@require_POST
def product_purpose_detach(request, pk, purpose_id):
    try:
        detach_purpose(api_client_for(request), pk, purpose_id)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "Purpose detached")
    return redirect("catalog:product-detail", pk=pk)
