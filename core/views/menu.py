from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render

from catalog.services import list_categories
from core.forms.menu_forms import MenuForm
from core.permissions import console_login_required
from core.services.api import ApiError, api_client_for
from core.services.menu_tree import build_menu_tree, find_node
from core.services.menus import create_menu, delete_menu, list_menus, update_menu
from core.views.helpers import fetch_or_default, report_api_error


def _load_menus(request, client):
    """Menu list, or None after flashing the error when the fetch fails."""
    try:
        return list_menus(client)
    except ApiError as exc:
        report_api_error(request, exc)
        return None


@console_login_required
def menu_edit(request, pk=None):
    client = api_client_for(request)
    menus = _load_menus(request, client)
    if menus is None:
        if pk is not None:
            # The list page shows the flashed error with an empty tree.
            return redirect("core:menu-edit")
        menus = []

    editing = None
    if pk is not None:
        editing = next((m for m in menus if m.id == pk), None)
        if editing is None:
            raise Http404("Menu item not found")

    categories = fetch_or_default(request, list_categories, client)

    if request.method == "POST":
        form = MenuForm(request.POST, menus=menus, categories=categories, editing=editing)
        if form.is_valid():
            try:
                if editing:
                    update_menu(client, editing.id, **form.payload())
                else:
                    create_menu(client, **form.payload())
            except ApiError as exc:
                report_api_error(request, exc)
            else:
                messages.success(request, "Menu item saved")
                return redirect("core:menu-edit")
    else:
        form = MenuForm(menus=menus, categories=categories, editing=editing)

    return render(request, "core/menu_edit.html", {
        "form": form,
        "editing": editing,
        "tree": build_menu_tree(menus),
    })


@console_login_required
def menu_delete(request, pk):
    client = api_client_for(request)

    if request.method == "POST":
        try:
            delete_menu(client, pk)
        except ApiError as exc:
            report_api_error(request, exc)
        else:
            messages.success(request, "Menu item deleted")
        return redirect("core:menu-edit")

    menus = _load_menus(request, client)
    if menus is None:
        return redirect("core:menu-edit")

    node = find_node(build_menu_tree(menus), pk)
    if node is None:
        raise Http404("Menu item not found")

    return render(request, "core/menu_confirm_delete.html", {"node": node})
