"""Categories and purposes: one list + form page each, same shape as the menu editor."""

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from catalog.forms import CategoryForm, PurposeForm
from catalog.services import (
    create_category,
    create_purpose,
    delete_category,
    delete_purpose,
    list_categories,
    list_purposes,
    update_category,
    update_purpose,
)
from core.permissions import console_login_required
from core.services.api import ApiError, api_client_for
from core.views.helpers import fetch_or_default, report_api_error


def _find(records, pk):
    if pk is None:
        return None
    record = next((r for r in records if r.id == pk), None)
    if record is None:
        raise Http404("Not found")
    return record


@console_login_required
def category_edit(request, pk=None):
    client = api_client_for(request)
    categories = fetch_or_default(request, list_categories, client)
    editing = _find(categories, pk)

    if request.method == "POST":
        form = CategoryForm(request.POST, category=editing)
        if form.is_valid():
            try:
                if editing:
                    update_category(client, editing.id, form.payload())
                else:
                    create_category(client, form.payload())
            except ApiError as exc:
                report_api_error(request, exc)
            else:
                messages.success(request, f"Category {'updated' if editing else 'created'} successfully")
                return redirect("catalog:category-list")
    else:
        form = CategoryForm(category=editing)

    return render(request, "catalog/category_list.html", {
        "form": form,
        "editing": editing,
        "categories": sorted(categories, key=lambda c: (c.sort_order, c.name.lower())),
    })


@console_login_required
@require_POST
def category_delete(request, pk):
    try:
        delete_category(api_client_for(request), pk)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "Category deleted successfully")
    return redirect("catalog:category-list")


@console_login_required
def purpose_edit(request, pk=None):
    client = api_client_for(request)
    purposes = fetch_or_default(request, list_purposes, client)
    editing = _find(purposes, pk)

    if request.method == "POST":
        form = PurposeForm(request.POST, purpose=editing)
        if form.is_valid():
            try:
                if editing:
                    update_purpose(client, editing.id, form.payload())
                else:
                    create_purpose(client, form.payload())
            except ApiError as exc:
                report_api_error(request, exc)
            else:
                messages.success(request, f"Purpose {'updated' if editing else 'created'} successfully")
                return redirect("catalog:purpose-list")
    else:
        form = PurposeForm(purpose=editing)

    return render(request, "catalog/purpose_list.html", {
        "form": form,
        "editing": editing,
        "purposes": sorted(purposes, key=lambda p: (p.sort_order, p.name.lower())),
    })


@console_login_required
@require_POST
def purpose_delete(request, pk):
    try:
        delete_purpose(api_client_for(request), pk)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "Purpose deleted successfully")
    return redirect("catalog:purpose-list")
