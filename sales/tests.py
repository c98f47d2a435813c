"""
Order records, services and screens.
"""
from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.messages import get_messages
from django.test import SimpleTestCase
from django.urls import reverse

from core.services.api import ApiError, Page
from core.test_utils import ApiRecordFactory, ConsoleClient
from sales import services
from sales.forms import OrderFilterForm
from sales.records import Order


def _order(**overrides):
    return Order.from_api(ApiRecordFactory.order_data(**overrides))


class OrderRecordTests(SimpleTestCase):
    def test_from_api(self):
        order = _order()
        self.assertEqual(order.order_number, "ORD-001")
        self.assertEqual(order.total_amount, Decimal("99.50"))
        self.assertEqual(order.customer_name, "Asha Rao")
        self.assertEqual(order.items[0].product_name, "Brass Diya")
        self.assertEqual(order.shipping_address.lines(), ["Asha Rao", "1 Temple Rd", "Pune 411001", "IN"])

    def test_customer_name_falls_back_to_user(self):
        order = _order(shippingAddress=None, user=ApiRecordFactory.user_data(id=4, firstName="Ravi", lastName="K"))
        self.assertEqual(order.customer_name, "Ravi K")

    def test_can_cancel(self):
        self.assertTrue(_order(status="processing").can_cancel)
        self.assertFalse(_order(status="delivered").can_cancel)
        self.assertFalse(_order(status="cancelled").can_cancel)


class OrderServiceTests(SimpleTestCase):
    def setUp(self):
        self.api = mock.Mock()

    def test_list(self):
        self.api.get.return_value = {"items": [ApiRecordFactory.order_data(id=2)], "pagination": {"total": 1}}
        page = services.list_orders(self.api, {"status": "pending"})
        self.assertEqual(page.items[0].id, 2)
        self.api.get.assert_called_once_with("/admin/orders", {"status": "pending"}, error_message="Failed to load orders")

    def test_update_status(self):
        services.update_order_status(self.api, 2, "shipped")
        self.api.put.assert_called_once_with(
            "/admin/orders/2/status", {"status": "shipped"}, error_message="Failed to update order status",
        )

    def test_unknown_status(self):
        with self.assertRaises(ValueError):
            services.update_order_status(self.api, 2, "lost")
        with self.assertRaises(ValueError):
            services.update_payment_status(self.api, 2, "maybe")
        self.api.put.assert_not_called()

    def test_payment_status(self):
        services.update_payment_status(self.api, 2, "paid")
        self.api.put.assert_called_once_with(
            "/admin/orders/2/payment-status", {"paymentStatus": "paid"}, error_message="Failed to update payment status",
        )

    def test_cancel(self):
        services.cancel_order(self.api, 2, "")
        self.api.put.assert_called_once_with(
            "/admin/orders/2/cancel", {"reason": None}, error_message="Failed to cancel order",
        )


class OrderFilterFormTests(SimpleTestCase):
    def test_api_filters(self):
        form = OrderFilterForm({"status": "pending", "start_date": "2024-01-01", "end_date": "2024-01-31"})
        filters = form.api_filters(limit=10)
        self.assertEqual(filters["status"], "pending")
        self.assertEqual(filters["startDate"], date(2024, 1, 1).isoformat())
        self.assertEqual(filters["limit"], 10)
        self.assertEqual(filters["page"], 1)

    def test_end_before_start(self):
        form = OrderFilterForm({"start_date": "2024-02-01", "end_date": "2024-01-01"})
        self.assertFalse(form.is_valid())
        self.assertIn("end_date", form.errors)
        self.assertIsNone(form.api_filters()["startDate"])


class OrderViewTests(SimpleTestCase):
    client_class = ConsoleClient

    def setUp(self):
        self.client.login_as()

    def test_list(self):
        with mock.patch("sales.views.orders.list_orders", return_value=Page(items=[_order()])) as list_orders:
            response = self.client.get(reverse("sales:order-list"), {"status": "pending"})
        self.assertContains(response, "ORD-001")
        self.assertContains(response, "Asha Rao")
        self.assertEqual(list_orders.call_args.args[1]["status"], "pending")

    def test_detail(self):
        with mock.patch("sales.views.orders.get_order", return_value=_order(status="pending")):
            response = self.client.get(reverse("sales:order-detail", args=[1]))
        self.assertContains(response, "Brass Diya")
        self.assertContains(response, "Cancel order")

    def test_detail_hides_cancel_for_final_orders(self):
        with mock.patch("sales.views.orders.get_order", return_value=_order(status="delivered")):
            response = self.client.get(reverse("sales:order-detail", args=[1]))
        self.assertNotContains(response, "Cancel order")

    def test_detail_failure_redirects(self):
        with mock.patch("sales.views.orders.get_order", side_effect=ApiError("Order not found", 404)):
            response = self.client.get(reverse("sales:order-detail", args=[1]))
        self.assertRedirects(response, reverse("sales:order-list"), fetch_redirect_response=False)

    def test_status_update(self):
        with mock.patch("sales.views.orders.update_order_status") as update:
            response = self.client.post(reverse("sales:order-status", args=[1]), {"status": "shipped"})
        self.assertRedirects(response, reverse("sales:order-detail", args=[1]), fetch_redirect_response=False)
        update.assert_called_once_with(mock.ANY, 1, "shipped")

    def test_invalid_status(self):
        with mock.patch("sales.views.orders.update_order_status") as update:
            response = self.client.post(reverse("sales:order-status", args=[1]), {"status": "lost"})
        update.assert_not_called()
        self.assertEqual([str(m) for m in get_messages(response.wsgi_request)], ["Choose a valid order status"])

    def test_cancel(self):
        with mock.patch("sales.views.orders.cancel_order") as cancel:
            self.client.post(reverse("sales:order-cancel", args=[1]), {"reason": "Customer request"})
        cancel.assert_called_once_with(mock.ANY, 1, "Customer request")
