from __future__ import annotations

from dataclasses import dataclass

from core.records.base import pick, to_int


@dataclass(frozen=True)
class MenuItem:
    id: int
    title: str
    url: str | None = None
    parent_id: int | None = None
    # order within the same parent (top-level uses parent_id=None)
    order: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "MenuItem":
        return cls(
            id=to_int(pick(data, "id")),
            title=pick(data, "title", default=""),
            url=pick(data, "url") or None,
            parent_id=to_int(pick(data, "parent_id", "parentId")),
            order=to_int(pick(data, "order_no", "order", "orderNo"), 0),
        )

    def __str__(self):
        return self.title


def menu_payload(title: str, url: str | None, parent_id: int | None, order: int) -> dict:
    """Body for POST /menus and PUT /menus/{id}."""
    return {
        "title": title,
        "url": url or None,
        "parent_id": parent_id,
        "order_no": order,
    }
