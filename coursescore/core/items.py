"""
In-memory content item tree.

Provides the host side of the scoring engine:
- ContentItem: a node with an id, a parent, children and a free-form
  attribute dict (Adapt-style keys such as _isAvailable, _isComplete)
- ItemStore: id lookup, filtering and completion change notification

Any change to an item's _isInteractionComplete flag is broadcast to store
subscribers. The scoring registry subscribes once and recomputes its sets.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any

from loguru import logger

INTERACTION_COMPLETE = "_isInteractionComplete"

CompletionCallback = Callable[["ContentItem"], None]


class ContentItem:
    """A single node in the content tree."""

    def __init__(self, item_id: str, attributes: dict[str, Any] | None = None):
        self._id = item_id
        self._attributes = dict(attributes or {})
        self._attributes["_id"] = item_id
        self._parent: ContentItem | None = None
        self._children: list[ContentItem] = []
        self._store: ItemStore | None = None

    def __repr__(self) -> str:
        return f"ContentItem({self._id!r})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def parent(self) -> ContentItem | None:
        return self._parent

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """
        Set an attribute.

        Changing _isInteractionComplete notifies the owning store's subscribers.
        """
        previous = self._attributes.get(name)
        self._attributes[name] = value
        if name == INTERACTION_COMPLETE and previous != value and self._store is not None:
            self._store.notify_completion_changed(self)

    def get_children(self) -> list[ContentItem]:
        return list(self._children)

    def get_all_descendant_models(self) -> list[ContentItem]:
        """Return all descendants, depth-first in child order."""
        descendants = []
        for child in self._children:
            descendants.append(child)
            descendants.extend(child.get_all_descendant_models())
        return descendants

    def get_ancestor_models(self) -> list[ContentItem]:
        """Return ancestors, nearest first."""
        ancestors = []
        parent = self._parent
        while parent is not None:
            ancestors.append(parent)
            parent = parent.parent
        return ancestors

    @property
    def is_available(self) -> bool:
        return bool(self._attributes.get("_isAvailable", True))

    @property
    def is_complete(self) -> bool:
        return bool(self._attributes.get("_isComplete", False))

    @property
    def is_interaction_complete(self) -> bool:
        return bool(self._attributes.get(INTERACTION_COMPLETE, False))


class ItemStore:
    """
    Ordered id -> item mapping with completion change notification.

    Items keep insertion order, which is the order filter() and iteration
    return them in.
    """

    def __init__(self, items: Iterable[ContentItem] = ()):
        self._items: dict[str, ContentItem] = {}
        self._subscribers: list[CompletionCallback] = []
        for item in items:
            self.add(item)

    def __iter__(self) -> Iterator[ContentItem]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: ContentItem, parent_id: str | None = None) -> ContentItem:
        """
        Add an item, optionally attaching it under an existing parent.

        Raises:
            ValueError: If the id is already present
            KeyError: If parent_id is not in the store
        """
        if item.id in self._items:
            raise ValueError(f"Duplicate item id: {item.id}")
        if parent_id is not None:
            parent = self._items.get(parent_id)
            if parent is None:
                raise KeyError(parent_id)
            self.attach(item, parent)
        item._store = self
        self._items[item.id] = item
        return item

    @staticmethod
    def attach(item: ContentItem, parent: ContentItem) -> None:
        """Link item as the last child of parent."""
        if item.parent is not None:
            item.parent._children.remove(item)
        item._parent = parent
        parent._children.append(item)

    def find_by_id(self, item_id: str) -> ContentItem | None:
        return self._items.get(item_id)

    def filter(self, predicate: Callable[[ContentItem], bool]) -> list[ContentItem]:
        return [item for item in self._items.values() if predicate(item)]

    # ========================================
    # Change notification
    # ========================================

    def subscribe(self, callback: CompletionCallback) -> Callable[[], None]:
        """
        Register a callback for interaction completion changes.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def notify_completion_changed(self, item: ContentItem) -> None:
        logger.debug(f"Interaction completion changed on {item.id}: {item.is_interaction_complete}")
        for callback in list(self._subscribers):
            callback(item)

    def set_complete(self, item_id: str, value: bool = True) -> ContentItem:
        """
        Mark an item complete (or incomplete) and roll the state up the tree.

        Completing an item completes each ancestor whose available children
        are all complete; ancestors already complete stay complete. Marking an
        item incomplete makes every ancestor incomplete. Subscribers are
        notified once, after the tree is consistent.

        Raises:
            KeyError: If item_id is not in the store
        """
        item = self._items.get(item_id)
        if item is None:
            raise KeyError(item_id)

        changed = item.is_complete != value
        item.set("_isComplete", value)
        for ancestor in item.get_ancestor_models():
            if not value:
                ancestor.set("_isComplete", False)
                continue
            if ancestor.is_complete:
                continue
            children = [child for child in ancestor.get_children() if child.is_available]
            if not all(child.is_complete for child in children):
                continue
            ancestor.set("_isComplete", True)

        if item.is_interaction_complete != value:
            item.set(INTERACTION_COMPLETE, value)
        elif changed:
            self.notify_completion_changed(item)
        return item
