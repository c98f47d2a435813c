from __future__ import annotations

from core.records.menu import MenuItem, menu_payload
from core.services.api import CommerceApiClient


def list_menus(client: CommerceApiClient) -> list[MenuItem]:
    data = client.get("/menus", error_message="Failed to fetch menus")
    return [MenuItem.from_api(row) for row in data or []]


def create_menu(client: CommerceApiClient, *, title, url=None, parent_id=None, order=0) -> MenuItem | None:
    data = client.post("/menus", menu_payload(title, url, parent_id, order), error_message="Failed to save menu")
    return MenuItem.from_api(data) if isinstance(data, dict) else None


def update_menu(client: CommerceApiClient, menu_id: int, *, title, url=None, parent_id=None, order=0) -> MenuItem | None:
    data = client.put(f"/menus/{menu_id}", menu_payload(title, url, parent_id, order), error_message="Failed to save menu")
    return MenuItem.from_api(data) if isinstance(data, dict) else None


def delete_menu(client: CommerceApiClient, menu_id: int) -> None:
    """Deletes the menu; the API removes its children too."""
    client.delete(f"/menus/{menu_id}", error_message="Failed to delete menu")
