"""
Test utilities: factories for API-shaped records and a logged-in test client.
"""
from importlib import import_module

from django.conf import settings
from django.test import Client

from core.records.menu import MenuItem
from core.records.user import User
from core.services.session import TOKEN_KEY, USER_KEY


class ApiRecordFactory:
    """Builds records the way the commerce API would send them."""

    @staticmethod
    def user_data(id=1, role="admin", **overrides):
        data = {
            "id": id,
            "username": f"user{id}",
            "email": f"user{id}@example.com",
            "firstName": "Test",
            "lastName": f"User{id}",
            "isActive": True,
            "roleId": {"customer": 1, "admin": 2, "superadmin": 3}.get(role),
            "role": {"id": 2, "name": role, "description": ""} if role else None,
            "createdAt": "2024-01-10T09:00:00Z",
        }
        data.update(overrides)
        return data

    @staticmethod
    def user(id=1, role="admin", **overrides):
        return User.from_api(ApiRecordFactory.user_data(id=id, role=role, **overrides))

    @staticmethod
    def menu(id, title=None, parent_id=None, order=0, url=None):
        return MenuItem(id=id, title=title or f"Menu {id}", url=url, parent_id=parent_id, order=order)

    @staticmethod
    def product_data(id=1, **overrides):
        data = {
            "id": id,
            "name": f"Product {id}",
            "slug": f"product-{id}",
            "categoryId": 1,
            "sku": f"SKU-{id}",
            "basePrice": "19.99",
            "stock": 20,
            "lowStockThreshold": 5,
            "status": "active",
            "isFeatured": False,
            "images": [],
            "purposes": [],
            "tags": [],
            "createdAt": "2024-01-15T10:30:00Z",
        }
        data.update(overrides)
        return data

    @staticmethod
    def category_data(id=1, **overrides):
        data = {"id": id, "name": f"Category {id}", "slug": f"category-{id}", "sortOrder": 0, "isActive": True}
        data.update(overrides)
        return data

    @staticmethod
    def order_data(id=1, **overrides):
        data = {
            "id": id,
            "orderNumber": f"ORD-{id:03d}",
            "status": "pending",
            "paymentStatus": "pending",
            "totalAmount": "99.50",
            "shippingAmount": "10.00",
            "taxAmount": "5.00",
            "shippingAddress": {"firstName": "Asha", "lastName": "Rao", "address1": "1 Temple Rd",
                                "city": "Pune", "postalCode": "411001", "country": "IN"},
            "items": [{"id": 1, "productId": 3, "quantity": 2, "unitPrice": "42.25", "totalPrice": "84.50",
                       "product": {"name": "Brass Diya"}}],
            "createdAt": "2024-01-15T10:30:00Z",
        }
        data.update(overrides)
        return data


class ConsoleClient(Client):
    """Test client that can carry a console session without calling the API."""

    def login_as(self, user=None, token="test-token"):
        user = user or ApiRecordFactory.user()
        engine = import_module(settings.SESSION_ENGINE)
        session = engine.SessionStore()
        session[TOKEN_KEY] = token
        session[USER_KEY] = user.to_session()
        session.save()
        self.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
        return user
