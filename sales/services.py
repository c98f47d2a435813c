from __future__ import annotations

from core.services.api import CommerceApiClient, Page
from sales.records import Order, OrderStatus, PaymentStatus

ORDER_STATUSES = {value for value, _ in OrderStatus.choices}
PAYMENT_STATUSES = {value for value, _ in PaymentStatus.choices}


def list_orders(client: CommerceApiClient, filters: dict | None = None) -> Page:
    data = client.get("/admin/orders", filters, error_message="Failed to load orders")
    return Page.from_api(data, Order.from_api)


def get_order(client: CommerceApiClient, order_id: int) -> Order:
    data = client.get(f"/admin/orders/{order_id}", error_message="Failed to load order")
    return Order.from_api(data or {})


def update_order_status(client: CommerceApiClient, order_id: int, status: str) -> None:
    if status not in ORDER_STATUSES:
        raise ValueError(f"Unknown order status: {status}")
    client.put(f"/admin/orders/{order_id}/status", {"status": status},
               error_message="Failed to update order status")


def update_payment_status(client: CommerceApiClient, order_id: int, payment_status: str) -> None:
    if payment_status not in PAYMENT_STATUSES:
        raise ValueError(f"Unknown payment status: {payment_status}")
    client.put(f"/admin/orders/{order_id}/payment-status", {"paymentStatus": payment_status},
               error_message="Failed to update payment status")


def update_order_notes(client: CommerceApiClient, order_id: int, notes: str) -> None:
    client.put(f"/admin/orders/{order_id}/notes", {"notes": notes}, error_message="Failed to save notes")


def cancel_order(client: CommerceApiClient, order_id: int, reason: str | None = None) -> None:
    client.put(f"/admin/orders/{order_id}/cancel", {"reason": reason or None},
               error_message="Failed to cancel order")
