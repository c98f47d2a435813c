from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from core.permissions import console_login_required, superadmin_required
from core.services.api import ApiError, Page, api_client_for
from core.views.helpers import fetch_or_default, report_api_error, selected_ids
from customers.forms import UserFilterForm
from customers.services import bulk_delete_users, delete_user, list_users, set_user_active

PAGE_SIZE = 20


@console_login_required
def user_list(request):
    filter_form = UserFilterForm(request.GET or None)
    page = fetch_or_default(
        request, list_users, api_client_for(request), filter_form.api_filters(limit=PAGE_SIZE), default=Page(),
    )

    query = request.GET.copy()
    query.pop("page", None)

    return render(request, "customers/user_list.html", {
        "filter_form": filter_form,
        "page": page,
        "query": query.urlencode(),
    })


@console_login_required
@require_POST
def user_toggle_active(request, pk):
    is_active = request.POST.get("is_active") == "true"
    if request.console.user.id == pk and not is_active:
        messages.error(request, "You cannot deactivate your own account")
        return redirect("customers:user-list")

    try:
        set_user_active(api_client_for(request), pk, is_active)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, f"User {'activated' if is_active else 'deactivated'} successfully")
    return redirect("customers:user-list")


@superadmin_required
@require_POST
def user_delete(request, pk):
    if request.console.user.id == pk:
        messages.error(request, "You cannot delete your own account")
        return redirect("customers:user-list")

    try:
        delete_user(api_client_for(request), pk)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "User deleted successfully")
    return redirect("customers:user-list")


@superadmin_required
@require_POST
def user_bulk_delete(request):
    ids = [i for i in selected_ids(request) if i != request.console.user.id]
    if not ids:
        messages.error(request, "No users selected")
        return redirect("customers:user-list")

    try:
        bulk_delete_users(api_client_for(request), ids)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, f"{len(ids)} users deleted successfully")
    return redirect("customers:user-list")
