"""
Tests for the console core: menu tree assembly, API client, session and menu screens.
"""
import json
from importlib import import_module
from unittest import mock

import requests
from django.conf import settings
from django.contrib.messages import get_messages
from django.test import SimpleTestCase, override_settings
from django.urls import reverse

from catalog.records import Category, Product
from core.forms.menu_forms import MenuForm
from core.records.menu import MenuItem, menu_payload
from core.services import auth as auth_service
from core.services import menus as menu_service
from core.services.api import ApiAuthError, ApiError, CommerceApiClient, Page
from core.services.menu_tree import (
    TOP_LEVEL_CHOICE,
    build_menu_tree,
    find_node,
    flatten,
    parent_choices,
)
from core.services.session import TOKEN_KEY, USER_KEY, ConsoleSession
from core.test_utils import ApiRecordFactory, ConsoleClient

menu = ApiRecordFactory.menu


def _messages(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


def _ids(nodes):
    return [node.id for node in nodes]


def _chain():
    return [menu(1, "A"), menu(2, "B", parent_id=1), menu(3, "C", parent_id=2)]


class MenuTreeTests(SimpleTestCase):
    """Flat list -> forest"""

    def test_empty_input(self):
        self.assertEqual(build_menu_tree([]), [])

    def test_chain_builds_single_root(self):
        tree = build_menu_tree(_chain())
        self.assertEqual(_ids(tree), [1])
        self.assertEqual(_ids(tree[0].children), [2])
        self.assertEqual(_ids(tree[0].children[0].children), [3])
        self.assertEqual(tree[0].children[0].children[0].children, [])
        self.assertEqual([n.depth for n in flatten(tree)], [0, 1, 2])

    def test_flatten_contains_every_id_once(self):
        items = [
            menu(5, parent_id=None), menu(1, parent_id=5), menu(2, parent_id=5),
            menu(3, parent_id=1), menu(4, parent_id=None), menu(6, parent_id=4),
        ]
        ids = _ids(flatten(build_menu_tree(items)))
        self.assertEqual(sorted(ids), [1, 2, 3, 4, 5, 6])
        self.assertEqual(len(ids), len(set(ids)))

    def test_children_sit_under_their_parent(self):
        items = [menu(1), menu(2, parent_id=1), menu(3, parent_id=1), menu(4, parent_id=3)]
        for node in flatten(build_menu_tree(items)):
            for child in node.children:
                self.assertEqual(child.parent_id, node.id)

    def test_dangling_parent_becomes_root(self):
        tree = build_menu_tree([menu(1), menu(2, parent_id=99)])
        self.assertEqual(_ids(tree), [1, 2])
        self.assertEqual(tree[1].depth, 0)

    def test_siblings_sorted_by_order_ties_keep_input_order(self):
        items = [menu(3, order=1), menu(1, order=0), menu(2, order=1), menu(4, order=-1)]
        self.assertEqual(_ids(build_menu_tree(items)), [4, 1, 3, 2])

    def test_duplicate_id_keeps_first(self):
        with self.assertLogs("core.services.menu_tree", "WARNING"):
            tree = build_menu_tree([menu(1, "First"), menu(1, "Second"), menu(2, parent_id=1)])
        self.assertEqual(_ids(flatten(tree)), [1, 2])
        self.assertEqual(tree[0].title, "First")

    def test_parent_cycle_is_surfaced_once(self):
        items = [menu(1, parent_id=2), menu(2, parent_id=1), menu(3)]
        with self.assertLogs("core.services.menu_tree", "WARNING"):
            tree = build_menu_tree(items)
        ids = _ids(flatten(tree))
        self.assertEqual(sorted(ids), [1, 2, 3])
        self.assertEqual(len(ids), 3)
        self.assertEqual(_ids(tree), [3, 1])

    def test_self_parent_does_not_recurse(self):
        with self.assertLogs("core.services.menu_tree", "WARNING"):
            tree = build_menu_tree([menu(1, parent_id=1)])
        self.assertEqual(_ids(tree), [1])
        self.assertEqual(tree[0].children, [])

    def test_find_node_and_walk(self):
        items = _chain() + [menu(4, parent_id=1)]
        tree = build_menu_tree(items)
        self.assertEqual(find_node(tree, 2).title, "B")
        self.assertIsNone(find_node(tree, 42))
        self.assertEqual(find_node(tree, 1).descendant_count, 3)
        self.assertEqual({n.id for n in find_node(tree, 1).walk()}, {1, 2, 3, 4})


class ParentChoicesTests(SimpleTestCase):
    """Indented parent <select> options"""

    def test_empty_input_only_has_top_level(self):
        self.assertEqual(parent_choices([]), [TOP_LEVEL_CHOICE])
        self.assertEqual(TOP_LEVEL_CHOICE, ("", "None (Top Level)"))

    def test_depth_prefix(self):
        self.assertEqual(parent_choices(_chain()), [
            TOP_LEVEL_CHOICE, ("1", "A"), ("2", "--B"), ("3", "----C"),
        ])

    def test_excluding_drops_whole_subtree_by_default(self):
        self.assertEqual(parent_choices(_chain(), exclude_id=2), [TOP_LEVEL_CHOICE, ("1", "A")])

    def test_excluding_only_the_node(self):
        self.assertEqual(parent_choices(_chain(), exclude_id=2, exclude_subtree=False), [
            TOP_LEVEL_CHOICE, ("1", "A"), ("3", "--C"),
        ])

    def test_excluded_id_never_offered(self):
        items = [menu(1), menu(2, parent_id=1), menu(3), menu(4, parent_id=3), menu(5, parent_id=99)]
        for exclude_id in (1, 2, 3, 4, 5):
            for subtree in (True, False):
                values = [value for value, _ in parent_choices(items, exclude_id, subtree)]
                self.assertEqual(values[0], "")
                self.assertNotIn(str(exclude_id), values)

    def test_follows_sibling_order(self):
        items = [menu(1, "Shop", order=2), menu(2, "Home", order=1), menu(3, "Idols", parent_id=1)]
        self.assertEqual(parent_choices(items), [
            TOP_LEVEL_CHOICE, ("2", "Home"), ("1", "Shop"), ("3", "--Idols"),
        ])


class MenuRecordTests(SimpleTestCase):
    def test_from_api_snake_case(self):
        item = MenuItem.from_api({"id": "4", "title": "Idols", "url": "", "parent_id": 1, "order_no": 3})
        self.assertEqual(item, MenuItem(id=4, title="Idols", url=None, parent_id=1, order=3))

    def test_from_api_camel_case(self):
        item = MenuItem.from_api({"id": 4, "title": "Idols", "url": "/idols", "parentId": None, "order": 2})
        self.assertIsNone(item.parent_id)
        self.assertEqual(item.order, 2)
        self.assertEqual(item.url, "/idols")

    def test_payload(self):
        self.assertEqual(menu_payload("Idols", "", 1, 3), {
            "title": "Idols", "url": None, "parent_id": 1, "order_no": 3,
        })


def _response(status=200, body=None, raw=None):
    response = requests.Response()
    response.status_code = status
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body).encode() if body is not None else b""
    return response


@override_settings(COMMERCE_API_BASE_URL="https://api.test/api", COMMERCE_API_TIMEOUT=5)
class CommerceApiClientTests(SimpleTestCase):
    def setUp(self):
        patcher = mock.patch.object(requests.Session, "request")
        self.request = patcher.start()
        self.addCleanup(patcher.stop)

    def test_unwraps_envelope(self):
        self.request.return_value = _response(body={"success": True, "message": "ok", "data": [{"id": 1}]})
        self.assertEqual(CommerceApiClient().get("/menus"), [{"id": 1}])
        args, kwargs = self.request.call_args
        self.assertEqual(args, ("GET", "https://api.test/api/menus"))
        self.assertEqual(kwargs["timeout"], 5)

    def test_bare_body_passes_through(self):
        self.request.return_value = _response(body={"token": "t", "user": {}})
        self.assertEqual(CommerceApiClient().post("/auth/login", {}), {"token": "t", "user": {}})

    def test_drops_empty_params(self):
        self.request.return_value = _response(body=[])
        CommerceApiClient().get("/admin/products", params={"page": 1, "search": "", "status": None})
        self.assertEqual(self.request.call_args.kwargs["params"], {"page": 1})

    def test_bearer_token(self):
        client = CommerceApiClient(token="abc")
        self.assertEqual(client.session.headers["Authorization"], "Bearer abc")
        self.assertNotIn("Authorization", CommerceApiClient().session.headers)

    def test_401_raises_auth_error(self):
        self.request.return_value = _response(401, {"success": False, "message": "Invalid token"})
        with self.assertRaises(ApiAuthError) as ctx:
            CommerceApiClient(token="old").get("/menus")
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.message, "Invalid token")

    def test_error_uses_api_message(self):
        self.request.return_value = _response(500, {"success": False, "message": "Boom"})
        with self.assertRaises(ApiError) as ctx:
            CommerceApiClient().delete("/menus/1", error_message="Failed to delete menu")
        self.assertNotIsInstance(ctx.exception, ApiAuthError)
        self.assertEqual(ctx.exception.message, "Boom")
        self.assertEqual(ctx.exception.status_code, 500)

    def test_error_falls_back_to_default_message(self):
        self.request.return_value = _response(502, raw=b"<html>Bad gateway</html>")
        with self.assertRaises(ApiError) as ctx:
            CommerceApiClient().get("/menus", error_message="Failed to fetch menus")
        self.assertEqual(ctx.exception.message, "Failed to fetch menus")

    def test_transport_error(self):
        self.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(ApiError) as ctx:
            CommerceApiClient().get("/menus", error_message="Failed to fetch menus")
        self.assertEqual(ctx.exception.message, "Failed to fetch menus: could not reach the API")

    def test_no_content(self):
        self.request.return_value = _response(204)
        self.assertIsNone(CommerceApiClient().delete("/menus/1"))

    def test_invalid_json(self):
        self.request.return_value = _response(200, raw=b"not json")
        with self.assertRaises(ApiError):
            CommerceApiClient().get("/menus")

    def test_context_manager_closes_session(self):
        with mock.patch.object(requests.Session, "close") as close:
            with CommerceApiClient(token="abc") as client:
                self.assertIsInstance(client, CommerceApiClient)
            close.assert_called_once_with()


class PageTests(SimpleTestCase):
    def test_paginated(self):
        page = Page.from_api(
            {"items": [{"id": 1}, {"id": 2}], "pagination": {"page": 2, "limit": 2, "total": 5, "totalPages": 3}},
            parse=lambda row: row["id"],
        )
        self.assertEqual(page.items, [1, 2])
        self.assertEqual((page.page, page.total, page.total_pages), (2, 5, 3))
        self.assertTrue(page.has_previous)
        self.assertTrue(page.has_next)

    def test_bare_list(self):
        page = Page.from_api([{"id": 1}])
        self.assertEqual(page.total, 1)
        self.assertFalse(page.has_next)
        self.assertFalse(page.has_previous)


class MenuServiceTests(SimpleTestCase):
    def setUp(self):
        self.api = mock.Mock()

    def test_list(self):
        self.api.get.return_value = [{"id": 1, "title": "Home", "parent_id": None, "order_no": 0}]
        self.assertEqual(menu_service.list_menus(self.api), [MenuItem(id=1, title="Home")])
        self.api.get.assert_called_once_with("/menus", error_message="Failed to fetch menus")

    def test_list_handles_empty_body(self):
        self.api.get.return_value = None
        self.assertEqual(menu_service.list_menus(self.api), [])

    def test_create(self):
        self.api.post.return_value = {"id": 9, "title": "Idols", "parent_id": 1, "order_no": 2}
        created = menu_service.create_menu(self.api, title="Idols", url="/categories/idols", parent_id=1, order=2)
        self.api.post.assert_called_once_with(
            "/menus",
            {"title": "Idols", "url": "/categories/idols", "parent_id": 1, "order_no": 2},
            error_message="Failed to save menu",
        )
        self.assertEqual(created.id, 9)

    def test_update(self):
        self.api.put.return_value = None
        self.assertIsNone(menu_service.update_menu(self.api, 4, title="Home"))
        self.api.put.assert_called_once_with(
            "/menus/4", {"title": "Home", "url": None, "parent_id": None, "order_no": 0},
            error_message="Failed to save menu",
        )

    def test_delete(self):
        menu_service.delete_menu(self.api, 4)
        self.api.delete.assert_called_once_with("/menus/4", error_message="Failed to delete menu")


class AuthServiceTests(SimpleTestCase):
    def test_login(self):
        client = mock.Mock()
        client.post.return_value = {"token": "tok", "user": ApiRecordFactory.user_data(id=7)}
        token, user = auth_service.login("a@example.com", "pw", client=client)
        self.assertEqual(token, "tok")
        self.assertEqual(user.id, 7)
        client.post.assert_called_once_with(
            "/auth/login", {"email": "a@example.com", "password": "pw"}, error_message="Login failed",
        )

    def test_login_without_token(self):
        client = mock.Mock()
        client.post.return_value = {"message": "Account disabled"}
        with self.assertRaisesMessage(ApiError, "Account disabled"):
            auth_service.login("a@example.com", "pw", client=client)

    def test_login_closes_its_own_client(self):
        with mock.patch("core.services.auth.CommerceApiClient") as client_class:
            client = client_class.return_value.__enter__.return_value
            client.post.return_value = {"token": "tok", "user": ApiRecordFactory.user_data(id=7)}
            token, _ = auth_service.login("a@example.com", "pw")
        self.assertEqual(token, "tok")
        client_class.return_value.__exit__.assert_called_once()


class ConsoleSessionTests(SimpleTestCase):
    def _store(self):
        return import_module(settings.SESSION_ENGINE).SessionStore()

    def test_load_ready(self):
        user = ApiRecordFactory.user(role="superadmin")
        console = ConsoleSession.load({TOKEN_KEY: "tok", USER_KEY: user.to_session()})
        self.assertTrue(console.is_authenticated)
        self.assertTrue(console.is_admin)
        self.assertTrue(console.is_superadmin)
        self.assertEqual((console.user.id, console.user.email), (user.id, user.email))

    def test_load_without_user_is_anonymous(self):
        console = ConsoleSession.load({TOKEN_KEY: "tok"})
        self.assertFalse(console.is_authenticated)
        self.assertIsNone(console.token)
        self.assertFalse(console.is_admin)

    def test_start_and_end(self):
        session = self._store()
        console = ConsoleSession.load(session)
        self.assertFalse(console.is_authenticated)

        user = ApiRecordFactory.user()
        console.start(session, "tok", user)
        self.assertTrue(console.is_authenticated)
        self.assertEqual(session[TOKEN_KEY], "tok")
        self.assertEqual(session[USER_KEY]["email"], user.email)

        console.end(session)
        self.assertFalse(console.is_authenticated)
        self.assertNotIn(TOKEN_KEY, session)


def _categories():
    return [Category(id=1, name="Idols", slug="idols"), Category(id=2, name="Incense", slug="incense")]


class MenuFormTests(SimpleTestCase):
    def _data(self, **overrides):
        data = {"title": "Home", "category": "", "url": "/", "parent": "", "order": "0"}
        data.update(overrides)
        return data

    def test_create_payload(self):
        form = MenuForm(self._data(title="  Home  "), menus=_chain(), categories=_categories())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload(), {"title": "Home", "url": "/", "parent_id": None, "order": 0})

    def test_parent_is_coerced(self):
        form = MenuForm(self._data(parent="2", order="3"), menus=_chain())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload()["parent_id"], 2)
        self.assertEqual(form.payload()["order"], 3)

    def test_category_overrides_url(self):
        form = MenuForm(self._data(category="incense", url="/ignored"), categories=_categories())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload()["url"], "/categories/incense")

    def test_blank_url_becomes_none(self):
        form = MenuForm(self._data(url="   "))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertIsNone(form.payload()["url"])

    def test_title_required(self):
        form = MenuForm(self._data(title="   "))
        self.assertFalse(form.is_valid())
        self.assertIn("title", form.errors)

    def test_cannot_pick_itself_or_descendant(self):
        items = _chain()
        for parent in ("2", "3"):
            form = MenuForm(self._data(parent=parent), menus=items, editing=items[1])
            self.assertFalse(form.is_valid())
            self.assertIn("parent", form.errors)

    def test_editing_initial(self):
        items = _chain() + [menu(4, "Lamps", parent_id=99, url="/categories/idols", order=5)]
        form = MenuForm(menus=items, categories=_categories(), editing=items[3])
        self.assertEqual(form.initial, {
            "title": "Lamps", "url": "/categories/idols", "parent": "", "order": 5, "category": "idols",
        })
        self.assertEqual(form.fields["parent"].choices, parent_choices(items, exclude_id=4))

    def test_parent_below_itself_shows_top_level(self):
        # 2 and 3 point at each other; 2 comes first so it is surfaced as the root.
        items = [menu(1, "A"), menu(2, "B", parent_id=3), menu(3, "C", parent_id=2)]
        with self.assertLogs("core.services.menu_tree", "WARNING"):
            form = MenuForm(menus=items, editing=items[1])
        self.assertEqual(form.fields["parent"].choices, [TOP_LEVEL_CHOICE, ("1", "A")])
        self.assertEqual(form.initial["parent"], "")


class ConsoleViewTestCase(SimpleTestCase):
    client_class = ConsoleClient


class MenuViewTests(ConsoleViewTestCase):
    def setUp(self):
        self.client.login_as()
        for name, value in (("list_menus", _chain()), ("list_categories", _categories())):
            patcher = mock.patch(f"core.views.menu.{name}", return_value=value)
            setattr(self, name, patcher.start())
            self.addCleanup(patcher.stop)

    def test_requires_login(self):
        self.client.cookies.clear()
        response = self.client.get(reverse("core:menu-edit"))
        self.assertRedirects(response, "/login/?next=%2Fmenus%2F", fetch_redirect_response=False)

    def test_renders_tree(self):
        response = self.client.get(reverse("core:menu-edit"))
        self.assertContains(response, "Menu Management")
        self.assertContains(response, "Order: 0", count=3)
        self.assertContains(response, reverse("core:menu-delete", args=[3]))
        self.assertEqual(_ids(response.context["tree"]), [1])
        self.assertEqual(response.context["form"].fields["parent"].choices[0], TOP_LEVEL_CHOICE)

    def test_empty_placeholder(self):
        self.list_menus.return_value = []
        response = self.client.get(reverse("core:menu-edit"))
        self.assertContains(response, "No menu items found. Start by adding a new one!")

    def test_fetch_failure_shows_error_and_empty_tree(self):
        self.list_menus.side_effect = ApiError("Failed to fetch menus")
        response = self.client.get(reverse("core:menu-edit"))
        self.assertContains(response, "Failed to fetch menus")
        self.assertContains(response, "No menu items found.")

    def test_create(self):
        with mock.patch("core.views.menu.create_menu") as create_menu:
            response = self.client.post(reverse("core:menu-edit"), {
                "title": "Incense", "category": "incense", "url": "", "parent": "1", "order": "2",
            })
        self.assertRedirects(response, reverse("core:menu-edit"), fetch_redirect_response=False)
        create_menu.assert_called_once_with(
            mock.ANY, title="Incense", url="/categories/incense", parent_id=1, order=2,
        )

    def test_update(self):
        with mock.patch("core.views.menu.update_menu") as update_menu:
            response = self.client.post(reverse("core:menu-edit", args=[3]), {
                "title": "C2", "url": "/c", "parent": "", "order": "1",
            })
        self.assertRedirects(response, reverse("core:menu-edit"), fetch_redirect_response=False)
        update_menu.assert_called_once_with(mock.ANY, 3, title="C2", url="/c", parent_id=None, order=1)

    def test_save_failure_keeps_form(self):
        with mock.patch("core.views.menu.create_menu", side_effect=ApiError("Title already exists")):
            response = self.client.post(reverse("core:menu-edit"), {"title": "A", "url": "", "parent": "", "order": "0"})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Title already exists")

    def test_edit_unknown_menu(self):
        response = self.client.get(reverse("core:menu-edit", args=[42]))
        self.assertEqual(response.status_code, 404)

    def test_edit_fetch_failure_redirects_to_menu_page(self):
        self.list_menus.side_effect = ApiError("Failed to fetch menus")
        response = self.client.get(reverse("core:menu-edit", args=[3]))
        self.assertRedirects(response, reverse("core:menu-edit"), fetch_redirect_response=False)
        self.assertEqual(_messages(response), ["Failed to fetch menus"])

    def test_confirm_delete_fetch_failure_redirects_to_menu_page(self):
        self.list_menus.side_effect = ApiError("Failed to fetch menus")
        response = self.client.get(reverse("core:menu-delete", args=[3]))
        self.assertRedirects(response, reverse("core:menu-edit"), fetch_redirect_response=False)
        self.assertEqual(_messages(response), ["Failed to fetch menus"])

    def test_confirm_delete_unknown_menu(self):
        response = self.client.get(reverse("core:menu-delete", args=[42]))
        self.assertEqual(response.status_code, 404)

    def test_confirm_delete_warns_about_children(self):
        response = self.client.get(reverse("core:menu-delete", args=[1]))
        self.assertContains(response, "and all its children")
        self.assertContains(response, "2 child items")

    def test_delete(self):
        with mock.patch("core.views.menu.delete_menu") as delete_menu:
            response = self.client.post(reverse("core:menu-delete", args=[2]))
        self.assertRedirects(response, reverse("core:menu-edit"), fetch_redirect_response=False)
        delete_menu.assert_called_once_with(mock.ANY, 2)

    def test_expired_token_ends_session(self):
        self.list_menus.side_effect = ApiAuthError("Invalid token", 401)
        response = self.client.get(reverse("core:menu-edit"), follow=True)
        self.assertRedirects(response, "/login/?next=%2Fmenus%2F")
        self.assertContains(response, "Your session has expired. Please log in again.")
        self.assertNotIn(TOKEN_KEY, self.client.session)

    def test_one_client_per_request_closed_after_response(self):
        with mock.patch.object(CommerceApiClient, "close", autospec=True) as close:
            response = self.client.get(reverse("core:menu-edit"))
        client = response.wsgi_request.api_client
        self.list_menus.assert_called_once_with(client)
        self.list_categories.assert_called_once_with(client)
        close.assert_called_once_with(client)


class AuthViewTests(ConsoleViewTestCase):
    def test_login_page(self):
        response = self.client.get(reverse("core:login"))
        self.assertContains(response, "Sign in")

    def test_login_success(self):
        user = ApiRecordFactory.user(id=3)
        with mock.patch("core.views.auth.login", return_value=("tok", user)) as login:
            response = self.client.post(reverse("core:login"), {"email": "a@example.com", "password": "pw"})
        login.assert_called_once_with("a@example.com", "pw")
        self.assertRedirects(response, reverse("core:dashboard"), fetch_redirect_response=False)
        self.assertEqual(self.client.session[TOKEN_KEY], "tok")
        self.assertEqual(self.client.session[USER_KEY]["id"], 3)

    def test_login_follows_local_next_only(self):
        user = ApiRecordFactory.user()
        with mock.patch("core.views.auth.login", return_value=("tok", user)):
            response = self.client.post(
                reverse("core:login"), {"email": "a@example.com", "password": "pw", "next": "/menus/"},
            )
            self.assertRedirects(response, "/menus/", fetch_redirect_response=False)

            self.client.cookies.clear()
            response = self.client.post(
                reverse("core:login"), {"email": "a@example.com", "password": "pw", "next": "https://evil.example"},
            )
            self.assertRedirects(response, reverse("core:dashboard"), fetch_redirect_response=False)

    def test_login_failure(self):
        with mock.patch("core.views.auth.login", side_effect=ApiAuthError("Invalid credentials", 401)):
            response = self.client.post(reverse("core:login"), {"email": "a@example.com", "password": "bad"})
        self.assertContains(response, "Invalid credentials")
        self.assertNotIn(TOKEN_KEY, self.client.session)

    def test_logged_in_user_skips_login(self):
        self.client.login_as()
        response = self.client.get(reverse("core:login"))
        self.assertRedirects(response, reverse("core:dashboard"), fetch_redirect_response=False)

    def test_logout(self):
        self.client.login_as()
        self.assertEqual(self.client.get(reverse("core:logout")).status_code, 405)
        response = self.client.post(reverse("core:logout"))
        self.assertRedirects(response, reverse("core:login"), fetch_redirect_response=False)
        self.assertNotIn(TOKEN_KEY, self.client.session)


class DashboardViewTests(ConsoleViewTestCase):
    def setUp(self):
        self.client.login_as()

    def test_dashboard(self):
        products = [
            Product.from_api(ApiRecordFactory.product_data(id=1, stock=0)),
            Product.from_api(ApiRecordFactory.product_data(id=2, stock=3)),
            Product.from_api(ApiRecordFactory.product_data(id=3, status="inactive")),
        ]
        with mock.patch("core.views.dashboard.list_products", return_value=Page(items=products)):
            response = self.client.get(reverse("core:dashboard"))
        self.assertContains(response, "Product Monitor")
        self.assertContains(response, "ORD-001")
        self.assertEqual(response.context["monitor"], {
            "total": 3, "active": 2, "inactive": 1, "low_stock": 1, "out_of_stock": 1,
        })
        self.assertTrue(response.context["monitor_ok"])

    def test_chart_data_is_embedded_as_json_script(self):
        with mock.patch("core.views.dashboard.list_products", return_value=Page()):
            response = self.client.get(reverse("core:dashboard"))
        self.assertContains(response, '<script id="sales-data" type="application/json">')
        self.assertContains(response, '<script id="growth-data" type="application/json">')
        self.assertNotIn("sales_json", response.context)

    def test_monitor_failure_is_not_fatal(self):
        with mock.patch("core.views.dashboard.list_products", side_effect=ApiError("down")):
            with self.assertLogs("core.views.dashboard", "ERROR"):
                response = self.client.get(reverse("core:dashboard"))
        self.assertContains(response, "Product data could not be loaded right now.")
        self.assertFalse(response.context["monitor_ok"])
