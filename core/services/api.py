"""Thin client for the commerce REST API.

Every screen in this console reads and writes through here. The backend wraps
most payloads in ``{"success", "message", "data"}``; ``_unwrap`` strips that
envelope so callers only see ``data``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import certifi
import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request to the commerce API failed (transport or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ApiAuthError(ApiError):
    """The API rejected our token (HTTP 401)."""


def _unwrap(body: Any) -> Any:
    if isinstance(body, dict) and "data" in body and ("success" in body or "message" in body):
        return body["data"]
    return body


def _error_message(response: requests.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return body.get("message") or body.get("detail") or default
    return default


@dataclass
class Page:
    """One page of a paginated list endpoint."""

    items: list = field(default_factory=list)
    page: int = 1
    limit: int = 0
    total: int = 0
    total_pages: int = 1

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @classmethod
    def from_api(cls, data, parse=lambda row: row) -> "Page":
        # Some endpoints skip pagination and return a bare list.
        if isinstance(data, list):
            items = [parse(row) for row in data]
            return cls(items=items, page=1, limit=len(items), total=len(items), total_pages=1)

        data = data or {}
        items = [parse(row) for row in data.get("items") or []]
        meta = data.get("pagination") or {}
        return cls(
            items=items,
            page=int(meta.get("page") or 1),
            limit=int(meta.get("limit") or len(items)),
            total=int(meta.get("total") or len(items)),
            total_pages=max(int(meta.get("totalPages") or 1), 1),
        )


class CommerceApiClient:
    def __init__(self, token: str | None = None, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.COMMERCE_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.COMMERCE_API_TIMEOUT
        self.token = token

        self.session = requests.Session()
        self.session.verify = certifi.where()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": settings.COMMERCE_API_USER_AGENT,
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, *, params=None, json=None, files=None, data=None,
                error_message: str = "Request failed") -> Any:
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}

        try:
            response = self.session.request(
                method,
                self.url(path),
                params=params or None,
                json=json,
                files=files,
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("API %s %s failed: %s", method, path, exc)
            raise ApiError(f"{error_message}: could not reach the API") from exc

        if response.status_code == 401:
            logger.info("API %s %s rejected token", method, path)
            raise ApiAuthError(_error_message(response, error_message), 401)

        if not response.ok:
            message = _error_message(response, error_message)
            logger.warning("API %s %s -> %s: %s", method, path, response.status_code, message)
            raise ApiError(message, response.status_code, response.text)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return _unwrap(response.json())
        except ValueError as exc:
            raise ApiError(f"{error_message}: invalid JSON from API", response.status_code) from exc

    def get(self, path: str, params=None, **kwargs):
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, data=None, **kwargs):
        return self.request("POST", path, json=data, **kwargs)

    def put(self, path: str, data=None, **kwargs):
        return self.request("PUT", path, json=data, **kwargs)

    def delete(self, path: str, data=None, **kwargs):
        return self.request("DELETE", path, json=data, **kwargs)

    def upload(self, path: str, filename: str, content: bytes, content_type: str, extra=None, **kwargs):
        files = {"file": (filename, content, content_type)}
        return self.request("POST", path, files=files, data=extra or {}, **kwargs)


def api_client_for(request) -> CommerceApiClient:
    """Client authenticated as whoever owns this request's console session.

    One client per request; ConsoleSessionMiddleware closes it once the
    response is built.
    """
    client = getattr(request, "api_client", None)
    if client is None:
        console = getattr(request, "console", None)
        client = CommerceApiClient(token=console.token if console else None)
        request.api_client = client
    return client
