from django.urls import path

from sales.views.orders import (
    order_cancel,
    order_detail,
    order_list,
    order_notes,
    order_payment_status,
    order_status,
)

app_name = "sales"

urlpatterns = [
    path("orders/", order_list, name="order-list"),
    path("orders/<int:pk>/", order_detail, name="order-detail"),
    path("orders/<int:pk>/status/", order_status, name="order-status"),
    path("orders/<int:pk>/payment-status/", order_payment_status, name="order-payment-status"),
    path("orders/<int:pk>/notes/", order_notes, name="order-notes"),
    path("orders/<int:pk>/cancel/", order_cancel, name="order-cancel"),
]
