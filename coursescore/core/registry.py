"""
Scoring registry.

Holds every root scoring set for a session and answers course-wide questions:
- which sets exist, by id, type, item or path
- is everything that must be completed complete
- what is the summed score of the sets included in scoring

The registry subscribes to the item store once and asks every root set to
update whenever an item's interaction completion changes. Derived sets are
never registered and never updated.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from loguru import logger

from coursescore.core import composer
from coursescore.core.hierarchy import unique_by_id
from coursescore.core.scores import get_scaled_score_from_min_max

if TYPE_CHECKING:
    from coursescore.core.items import ContentItem, ItemStore
    from coursescore.sets.base import ScoringSet


class DuplicateRegistrationError(ValueError):
    """Raised when a root set id is registered twice."""

    pass


class ScoringRegistry:
    """API for creating and querying completion and scoring sets."""

    def __init__(self, store: ItemStore, strict_paths: bool = False):
        """
        Initialize the registry and subscribe to item completion changes.

        Args:
            store: Content item store the sets read from
            strict_paths: Raise on unknown ids in path lookups instead of skipping them
        """
        self._store = store
        self._strict_paths = strict_paths
        self._raw_sets: list[ScoringSet] = []
        self._listeners: dict[str, list[Callable[..., Any]]] = defaultdict(list)
        self._unsubscribe = store.subscribe(self.on_item_completion_changed)

    @property
    def store(self) -> ItemStore:
        return self._store

    @property
    def strict_paths(self) -> bool:
        return self._strict_paths

    # ========================================
    # Registration & updates
    # ========================================

    def register(self, new_set: ScoringSet) -> None:
        """
        Register a root set.

        Usually called by the set itself on construction.

        Raises:
            DuplicateRegistrationError: If a root set with the same id exists
        """
        if any(set_.id == new_set.id for set_ in self._raw_sets):
            raise DuplicateRegistrationError(f"Cannot register two sets with the same id: {new_set.id}")
        self._raw_sets.append(new_set)
        logger.debug(f"Registered {new_set.type} set '{new_set.id}'")

    def on_item_completion_changed(self, item: ContentItem) -> None:
        self.update()

    def update(self) -> None:
        """Force all registered sets to recalculate their states."""
        for set_ in list(self._raw_sets):
            set_.update()

    def close(self) -> None:
        """Stop listening to the item store."""
        self._unsubscribe()

    # ========================================
    # Events
    # ========================================

    def on(self, event: str, callback: Callable[..., Any]) -> None:
        self._listeners[event].append(callback)

    def off(self, event: str, callback: Callable[..., Any]) -> None:
        if callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def trigger(self, event: str, *args: Any) -> None:
        """Call every listener of event, in subscription order."""
        logger.debug(f"Event {event}")
        for callback in list(self._listeners[event]):
            callback(*args)

    # ========================================
    # Aggregates
    # ========================================

    @property
    def completion_sets(self) -> list[ScoringSet]:
        """Root sets marked with is_completion_required."""
        return [set_ for set_ in self._raw_sets if set_.is_completion_required]

    @property
    def is_complete(self) -> bool:
        """True when no completion-required root set is incomplete."""
        return all(set_.is_complete for set_ in self.completion_sets)

    @property
    def scoring_sets(self) -> list[ScoringSet]:
        """Root sets marked with is_score_included."""
        return [set_ for set_ in self._raw_sets if set_.is_score_included]

    @property
    def min_score(self) -> float:
        return sum(set_.min_score for set_ in self.scoring_sets)

    @property
    def max_score(self) -> float:
        return sum(set_.max_score for set_ in self.scoring_sets)

    @property
    def score(self) -> float:
        return sum(set_.score for set_ in self.scoring_sets)

    @property
    def scaled_score(self) -> float:
        return get_scaled_score_from_min_max(self.score, self.min_score, self.max_score)

    @property
    def models(self) -> list[ContentItem]:
        """All unique models of all root sets."""
        models = []
        for set_ in self.subsets:
            models.extend(set_.models or [])
        return unique_by_id(models)

    # ========================================
    # Lookups
    # ========================================

    @property
    def subsets(self) -> list[ScoringSet]:
        """All registered root sets, in registration order."""
        return list(self._raw_sets)

    def get_subsets_by_type(self, set_type: str) -> list[ScoringSet]:
        return composer.get_subsets_by_type(self, set_type)

    def get_subsets_by_model_id(self, model_id: str) -> list[ScoringSet]:
        return composer.get_subsets_by_model_id(self, model_id)

    def get_subset_by_id(self, set_id: str) -> ScoringSet | None:
        return composer.get_subset_by_id(self, set_id)

    def get_subset_by_path(self, path: str | Sequence[str]) -> ScoringSet | None:
        """Return a root set or intersection set from an id path."""
        return composer.get_subset_by_path(self, path, strict=self._strict_paths)
