"""
Hierarchy intersection helpers.

Two item collections "intersect" when an item of one equals, is a descendant
of, or is an ancestor of an item of the other. Items are matched by id only,
never by object identity.

All functions are pure: they read the item tree and return new lists.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from coursescore.core.items import ContentItem


def unique_by_id(items: Iterable[ContentItem]) -> list[ContentItem]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def expand_with_descendants(items: Iterable[ContentItem]) -> list[ContentItem]:
    """
    Return the items together with all of their descendants.

    Each item is followed by its own descendants; ids already seen are skipped.

    Args:
        items: Items to expand

    Returns:
        Deduplicated list of items and descendants
    """
    expanded = []
    for item in items:
        expanded.append(item)
        expanded.extend(item.get_all_descendant_models())
    return unique_by_id(expanded)


def _hierarchy_ids(items: Iterable[ContentItem]) -> set[str]:
    return {item.id for item in expand_with_descendants(items)}


def _intersects(item: ContentItem, hierarchy_ids: set[str]) -> bool:
    # item is in, or below, the other hierarchy
    if item.id in hierarchy_ids:
        return True
    # the other hierarchy is below item
    return any(descendant.id in hierarchy_ids for descendant in item.get_all_descendant_models())


def has_intersecting_hierarchy(list_a: Iterable[ContentItem], list_b: Iterable[ContentItem]) -> bool:
    """
    Check whether any item of list_a intersects the hierarchy of list_b.

    Args:
        list_a: Candidate items
        list_b: Items spanning the reference hierarchy

    Returns:
        True if some item of list_a is equal to, a descendant of, or an
        ancestor of an item of list_b
    """
    hierarchy_ids = _hierarchy_ids(list_b)
    if not hierarchy_ids:
        return False
    return any(_intersects(item, hierarchy_ids) for item in list_a)


def filter_intersecting_hierarchy(
    list_a: Iterable[ContentItem], list_b: Iterable[ContentItem]
) -> list[ContentItem]:
    """
    Return the items of list_a that intersect the hierarchy of list_b.

    Order of list_a is preserved. An empty list_b filters everything out.
    """
    hierarchy_ids = _hierarchy_ids(list_b)
    if not hierarchy_ids:
        return []
    return [item for item in list_a if _intersects(item, hierarchy_ids)]
