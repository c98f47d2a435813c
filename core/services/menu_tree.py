"""Menu tree assembly.

The API hands us menus as a flat list with ``parent_id`` references. These
helpers turn that list into a forest for the tree view and into indented
``(value, label)`` choices for the parent ``<select>``.

Items are kept in an arena (``id -> MenuItem``) and every traversal carries a
visited set, so duplicate ids and ``parent_id`` cycles coming from upstream can
never make us recurse forever or show a node twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from core.records.menu import MenuItem

logger = logging.getLogger(__name__)

TOP_LEVEL_CHOICE = ("", "None (Top Level)")
DEPTH_MARKER = "--"


@dataclass
class MenuNode:
    item: MenuItem
    children: list["MenuNode"] = field(default_factory=list)
    depth: int = 0

    @property
    def id(self) -> int:
        return self.item.id

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def url(self) -> str | None:
        return self.item.url

    @property
    def order(self) -> int:
        return self.item.order

    @property
    def parent_id(self) -> int | None:
        return self.item.parent_id

    def walk(self) -> Iterator["MenuNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    @property
    def descendant_count(self) -> int:
        return sum(1 for _ in self.walk()) - 1


def _index(items: Iterable[MenuItem]) -> tuple[dict[int, MenuItem], list[MenuItem]]:
    arena: dict[int, MenuItem] = {}
    ordered: list[MenuItem] = []
    for item in items:
        if item.id in arena:
            logger.warning("Duplicate menu id %s (%r) ignored", item.id, item.title)
            continue
        arena[item.id] = item
        ordered.append(item)
    return arena, ordered


def _group_by_parent(ordered: list[MenuItem], arena: dict[int, MenuItem]) -> dict[int | None, list[MenuItem]]:
    groups: dict[int | None, list[MenuItem]] = {}
    for item in ordered:
        # dangling parent -> top level
        parent_id = item.parent_id if item.parent_id in arena else None
        groups.setdefault(parent_id, []).append(item)

    # sorted() is stable, so equal order values keep input order
    return {key: sorted(siblings, key=lambda m: m.order) for key, siblings in groups.items()}


def build_menu_tree(items: Iterable[MenuItem]) -> list[MenuNode]:
    """Flat menu list -> ordered list of root nodes with children filled in."""
    arena, ordered = _index(items)
    groups = _group_by_parent(ordered, arena)
    visited: set[int] = set()

    def attach(item: MenuItem, depth: int) -> MenuNode:
        visited.add(item.id)
        node = MenuNode(item=item, depth=depth)
        for child in groups.get(item.id, []):
            if child.id in visited:
                continue
            node.children.append(attach(child, depth + 1))
        return node

    roots = [attach(item, 0) for item in groups.get(None, [])]

    # Anything not reached hangs off a parent cycle; surface it at top level.
    for item in ordered:
        if item.id not in visited:
            logger.warning("Menu %s (%r) is part of a parent cycle, showing it at top level", item.id, item.title)
            roots.append(attach(item, 0))

    return roots


def flatten(tree: list[MenuNode]) -> list[MenuNode]:
    return [node for root in tree for node in root.walk()]


def find_node(tree: list[MenuNode], menu_id: int) -> MenuNode | None:
    return next((node for node in flatten(tree) if node.id == menu_id), None)


def parent_choices(items: Iterable[MenuItem], exclude_id: int | None = None,
                   exclude_subtree: bool = True) -> list[tuple[str, str]]:
    """
    Choices for the "Parent Menu" select, depth-first, labels prefixed with
    ``--`` per level.

    The menu being edited (``exclude_id``) is never offered. With
    ``exclude_subtree`` its descendants are dropped as well, otherwise they stay
    and are indented by the number of ancestors still shown.
    """
    choices = [TOP_LEVEL_CHOICE]

    def add(nodes: list[MenuNode], level: int):
        for node in nodes:
            if exclude_id is not None and node.id == exclude_id:
                if not exclude_subtree:
                    add(node.children, level)
                continue
            choices.append((str(node.id), DEPTH_MARKER * level + node.title))
            add(node.children, level + 1)

    add(build_menu_tree(items), 0)
    return choices
