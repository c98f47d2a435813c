from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from core.permissions import console_login_required
from core.services.api import ApiError, Page, api_client_for
from core.views.helpers import fetch_or_default, report_api_error
from sales.forms import CancelOrderForm, OrderFilterForm, OrderNotesForm, OrderStatusForm, PaymentStatusForm
from sales.services import (
    cancel_order,
    get_order,
    list_orders,
    update_order_notes,
    update_order_status,
    update_payment_status,
)

PAGE_SIZE = 20


@console_login_required
def order_list(request):
    filter_form = OrderFilterForm(request.GET or None)
    page = fetch_or_default(
        request, list_orders, api_client_for(request), filter_form.api_filters(limit=PAGE_SIZE), default=Page(),
    )

    query = request.GET.copy()
    query.pop("page", None)

    return render(request, "sales/order_list.html", {
        "filter_form": filter_form,
        "page": page,
        "query": query.urlencode(),
    })


@console_login_required
def order_detail(request, pk):
    try:
        order = get_order(api_client_for(request), pk)
    except ApiError as exc:
        report_api_error(request, exc)
        return redirect("sales:order-list")

    return render(request, "sales/order_detail.html", {
        "order": order,
        "status_form": OrderStatusForm(initial={"status": order.status}),
        "payment_form": PaymentStatusForm(initial={"payment_status": order.payment_status}),
        "notes_form": OrderNotesForm(initial={"notes": order.notes}),
        "cancel_form": CancelOrderForm(),
    })


@console_login_required
@require_POST
def order_status(request, pk):
    form = OrderStatusForm(request.POST)
    if form.is_valid():
        try:
            update_order_status(api_client_for(request), pk, form.cleaned_data["status"])
        except ApiError as exc:
            report_api_error(request, exc)
        else:
            messages.success(request, "Order status updated successfully")
    else:
        messages.error(request, "Choose a valid order status")
    return redirect("sales:order-detail", pk=pk)


@console_login_required
@require_POST
def order_payment_status(request, pk):
    form = PaymentStatusForm(request.POST)
    if form.is_valid():
        try:
            update_payment_status(api_client_for(request), pk, form.cleaned_data["payment_status"])
        except ApiError as exc:
            report_api_error(request, exc)
        else:
            messages.success(request, "Payment status updated successfully")
    else:
        messages.error(request, "Choose a valid payment status")
    return redirect("sales:order-detail", pk=pk)


@console_login_required
@require_POST
def order_notes(request, pk):
    form = OrderNotesForm(request.POST)
    if form.is_valid():
        try:
            update_order_notes(api_client_for(request), pk, form.cleaned_data["notes"])
        except ApiError as exc:
            report_api_error(request, exc)
        else:
            messages.success(request, "Notes saved")
    return redirect("sales:order-detail", pk=pk)


@console_login_required
@require_POST
def order_cancel(request, pk):
    form = CancelOrderForm(request.POST)
    reason = form.cleaned_data["reason"] if form.is_valid() else ""
    try:
        cancel_order(api_client_for(request), pk, reason)
    except ApiError as exc:
        report_api_error(request, exc)
    else:
        messages.success(request, "Order cancelled")
    return redirect("sales:order-detail", pk=pk)
