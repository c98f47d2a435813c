"""
User management: services and screens, including the superadmin-only deletes.
"""
from unittest import mock

from django.contrib.messages import get_messages
from django.test import SimpleTestCase
from django.urls import reverse

from core.services.api import Page
from core.test_utils import ApiRecordFactory, ConsoleClient
from customers import services
from customers.forms import UserFilterForm


def _messages(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


class UserServiceTests(SimpleTestCase):
    def setUp(self):
        self.api = mock.Mock()

    def test_list(self):
        self.api.get.return_value = {
            "items": [ApiRecordFactory.user_data(id=5, role="customer")],
            "pagination": {"page": 1, "limit": 20, "total": 1, "totalPages": 1},
        }
        page = services.list_users(self.api, {"search": "asha"})
        self.assertEqual(page.items[0].role_name, "customer")
        self.api.get.assert_called_once_with("/admin/users", {"search": "asha"}, error_message="Failed to load users")

    def test_status(self):
        services.set_user_active(self.api, 5, False)
        self.api.put.assert_called_once_with(
            "/admin/users/5/status", {"isActive": False}, error_message="Failed to update user status",
        )

    def test_bulk_delete(self):
        services.bulk_delete_users(self.api, [5, 6])
        self.api.delete.assert_called_once_with(
            "/admin/users/bulk-delete", {"ids": [5, 6]}, error_message="Failed to delete users",
        )


class UserFilterFormTests(SimpleTestCase):
    def test_api_filters(self):
        filters = UserFilterForm({"search": "ravi", "role": "2", "active": "false", "page": "3"}).api_filters()
        self.assertEqual(filters["roleId"], "2")
        self.assertEqual(filters["isActive"], "false")
        self.assertEqual(filters["page"], 3)


class UserViewTests(SimpleTestCase):
    client_class = ConsoleClient

    def login(self, role="admin"):
        return self.client.login_as(ApiRecordFactory.user(id=1, role=role))

    def test_list(self):
        self.login()
        users = [ApiRecordFactory.user(id=1), ApiRecordFactory.user(id=2, role="customer", firstName="Ravi")]
        with mock.patch("customers.views.users.list_users", return_value=Page(items=users)):
            response = self.client.get(reverse("customers:user-list"))
        self.assertContains(response, "Ravi")
        self.assertContains(response, "Deactivate")
        self.assertNotContains(response, reverse("customers:user-delete", args=[2]))

    def test_superadmin_sees_delete(self):
        self.login("superadmin")
        users = [ApiRecordFactory.user(id=2, role="customer")]
        with mock.patch("customers.views.users.list_users", return_value=Page(items=users)):
            response = self.client.get(reverse("customers:user-list"))
        self.assertContains(response, reverse("customers:user-delete", args=[2]))

    def test_toggle_active(self):
        self.login()
        with mock.patch("customers.views.users.set_user_active") as set_active:
            response = self.client.post(reverse("customers:user-status", args=[2]), {"is_active": "false"})
        self.assertRedirects(response, reverse("customers:user-list"), fetch_redirect_response=False)
        set_active.assert_called_once_with(mock.ANY, 2, False)

    def test_cannot_deactivate_self(self):
        self.login()
        with mock.patch("customers.views.users.set_user_active") as set_active:
            response = self.client.post(reverse("customers:user-status", args=[1]), {"is_active": "false"})
        set_active.assert_not_called()
        self.assertEqual(_messages(response), ["You cannot deactivate your own account"])

    def test_delete_needs_superadmin(self):
        self.login("admin")
        with mock.patch("customers.views.users.delete_user") as delete_user:
            response = self.client.post(reverse("customers:user-delete", args=[2]))
        self.assertRedirects(response, reverse("core:dashboard"), fetch_redirect_response=False)
        delete_user.assert_not_called()
        self.assertEqual(_messages(response), ["Only superadmins can do that."])

    def test_delete(self):
        self.login("superadmin")
        with mock.patch("customers.views.users.delete_user") as delete_user:
            response = self.client.post(reverse("customers:user-delete", args=[2]))
        self.assertRedirects(response, reverse("customers:user-list"), fetch_redirect_response=False)
        delete_user.assert_called_once_with(mock.ANY, 2)

    def test_bulk_delete_skips_self(self):
        self.login("superadmin")
        with mock.patch("customers.views.users.bulk_delete_users") as bulk_delete:
            self.client.post(reverse("customers:user-bulk-delete"), {"ids": ["1", "2", "3"]})
        bulk_delete.assert_called_once_with(mock.ANY, [2, 3])

    def test_anonymous_redirected_to_login(self):
        response = self.client.post(reverse("customers:user-delete", args=[2]))
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.url.startswith(reverse("core:login")))
