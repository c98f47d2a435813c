from __future__ import annotations

from core.records.user import User
from core.services.api import ApiError, CommerceApiClient


def login(email: str, password: str, client: CommerceApiClient | None = None) -> tuple[str, User]:
    """POST /auth/login. Returns (token, user) or raises ApiError."""
    if client is None:
        with CommerceApiClient() as client:
            return login(email, password, client)

    data = client.post(
        "/auth/login",
        {"email": email, "password": password},
        error_message="Login failed",
    ) or {}

    token = data.get("token")
    user = data.get("user")
    if not token or not user:
        raise ApiError(data.get("message") or "Login failed")
    return token, User.from_api(user)
