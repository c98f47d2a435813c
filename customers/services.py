from __future__ import annotations

from core.records.user import User
from core.services.api import CommerceApiClient, Page


def list_users(client: CommerceApiClient, filters: dict | None = None) -> Page:
    data = client.get("/admin/users", filters, error_message="Failed to load users")
    return Page.from_api(data, User.from_api)


def set_user_active(client: CommerceApiClient, user_id: int, is_active: bool) -> None:
    client.put(f"/admin/users/{user_id}/status", {"isActive": is_active},
               error_message="Failed to update user status")


def delete_user(client: CommerceApiClient, user_id: int) -> None:
    client.delete(f"/admin/users/{user_id}", error_message="Failed to delete user")


def bulk_delete_users(client: CommerceApiClient, ids: list[int]) -> None:
    client.delete("/admin/users/bulk-delete", {"ids": ids}, error_message="Failed to delete users")
