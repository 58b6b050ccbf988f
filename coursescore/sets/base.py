"""
Base class for completion and scoring sets.

A scoring set describes a collection of content items with its own scoring
and completion behaviour. Every concrete set works both as a root set
(assessment blocks) and as an intersected set (retention question
components within assessment blocks).

Intersections compare overlapping hierarchies: an item belongs to both sets
when it is equal to, a descendant of, or an ancestor of an item in the other
set. An assessment block may contain a retention question component, a
retention question component may sit inside an assessment block, and an
assessment block may equal an assessment block.

The last set in an intersection always decides the class of the result, and
an intersected set only ever returns items from its own set.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from loguru import logger

from coursescore.core import composer
from coursescore.core.hierarchy import filter_intersecting_hierarchy, unique_by_id
from coursescore.core.scores import get_scaled_score_from_min_max, get_scored_items, sum_item_field

if TYPE_CHECKING:
    from coursescore.core.items import ContentItem
    from coursescore.core.registry import ScoringRegistry


class ScoringSet(ABC):
    """
    Abstract scoring set.

    Subclasses must provide models, min_score, max_score, score, is_complete
    and is_passed, and are registered with @register_set_type.

    Options:
        id: Set id, unique among root sets
        title: Display title
        is_score_included: Include in the registry's summed score
        is_completion_required: Include in the registry's completion check
    """

    set_type: ClassVar[str | None] = None

    def __init__(
        self,
        registry: ScoringRegistry,
        options: dict[str, Any] | None = None,
        subset_parent: ScoringSet | None = None,
    ):
        """
        Initialize the set.

        Root sets (no subset_parent) register themselves with the registry.
        Sets created with a subset_parent are transient intersections.

        Raises:
            DuplicateRegistrationError: If a root set with this id is registered
        """
        options = dict(options or {})
        self._registry = registry
        self._options = options
        self._subset_parent = subset_parent
        self._id = options.get("id")
        self._title = options.get("title") or ""
        self._is_score_included = bool(options.get("is_score_included", False))
        self._is_completion_required = bool(options.get("is_completion_required", False))
        if self._subset_parent is None:
            # Only root sets are registered, subsets are created on demand
            self.register()
        self._was_complete = self.is_complete
        self._was_passed = self.is_passed

    def __repr__(self) -> str:
        parent = f", parent={self._subset_parent!r}" if self._subset_parent is not None else ""
        return f"{type(self).__name__}({self._id!r}{parent})"

    def register(self) -> None:
        self._registry.register(self)

    @property
    def registry(self) -> ScoringRegistry:
        return self._registry

    @property
    def options(self) -> dict[str, Any]:
        """Options this set was configured with, used to re-create it in intersections."""
        return dict(self._options)

    @property
    def subset_parent(self) -> ScoringSet | None:
        return self._subset_parent

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def type(self) -> str | None:
        return self.set_type

    @property
    def title(self) -> str:
        return self._title

    @property
    def is_score_included(self) -> bool:
        return self._is_score_included

    @property
    def is_completion_required(self) -> bool:
        return self._is_completion_required

    # ========================================
    # Policy
    # ========================================

    @property
    @abstractmethod
    def models(self) -> list[ContentItem] | None:
        """
        Unique available models of this set.

        Implementations always finish with `return self.filter_models(models)`.
        """

    @property
    @abstractmethod
    def min_score(self) -> float:
        ...

    @property
    @abstractmethod
    def max_score(self) -> float:
        ...

    @property
    @abstractmethod
    def score(self) -> float:
        ...

    @property
    @abstractmethod
    def is_complete(self) -> bool:
        ...

    @property
    @abstractmethod
    def is_passed(self) -> bool:
        ...

    @property
    def scaled_score(self) -> float:
        """Percentage of score between min_score and max_score (NaN if they are equal)."""
        return get_scaled_score_from_min_max(self.score, self.min_score, self.max_score)

    def on_completed(self) -> None:
        """Override to perform set specific completion tasks."""
        logger.info(f"{self.type} set '{self.id}' completed")

    def on_passed(self) -> None:
        """Override to perform set specific passing tasks."""
        logger.info(f"{self.type} set '{self.id}' passed")

    def update(self) -> None:
        """
        Re-evaluate completion and pass state.

        Hooks fire only when the state changed to True since the last
        observation, so repeated updates without change fire nothing.
        """
        is_complete = self.is_complete
        if is_complete and is_complete != self._was_complete:
            self.on_completed()
        self._was_complete = is_complete

        is_passed = self.is_passed
        if is_passed and is_passed != self._was_passed:
            self.on_passed()
        self._was_passed = is_passed

    def filter_models(self, models: Sequence[ContentItem] | None) -> list[ContentItem] | None:
        """
        Finish a raw model list.

        Applies uniqueness, narrows to the subset parent's hierarchy and drops
        unavailable items. None means the set does not apply and is returned
        as is.
        """
        if models is None:
            return None
        models = unique_by_id(models)
        if self._subset_parent is not None:
            parent_models = self._subset_parent.models
            if parent_models is not None:
                models = filter_intersecting_hierarchy(models, parent_models)
        return [model for model in models if model.is_available]

    # ========================================
    # Subsets
    # ========================================

    @property
    def subsets(self) -> list[ScoringSet]:
        """All prospective subsets: every other root set intersected with this one."""
        return composer.get_subsets(self._registry, self)

    def get_subset_by_id(self, set_id: str) -> ScoringSet | None:
        return composer.get_subset_by_id(self._registry, set_id, self)

    def get_subsets_by_type(self, set_type: str) -> list[ScoringSet]:
        return composer.get_subsets_by_type(self._registry, set_type, self)

    def get_subsets_by_model_id(self, model_id: str) -> list[ScoringSet]:
        return composer.get_subsets_by_model_id(self._registry, model_id, self)

    def get_subset_by_path(self, path: str | Sequence[str]) -> ScoringSet | None:
        return composer.get_subset_by_path(self._registry, path, self, strict=self._registry.strict_paths)


class ItemScoredSet(ScoringSet):
    """
    Set scored from the items it holds.

    Scored items are the models and their descendants carrying _maxScore;
    _minScore and _score default to 0. The set is complete when every model
    is complete.
    """

    @property
    def scored_items(self) -> list[ContentItem]:
        return get_scored_items(self.models)

    @property
    def min_score(self) -> float:
        return sum_item_field(self.scored_items, "_minScore")

    @property
    def max_score(self) -> float:
        return sum_item_field(self.scored_items, "_maxScore")

    @property
    def score(self) -> float:
        return sum_item_field(self.scored_items, "_score")

    @property
    def is_complete(self) -> bool:
        return all(model.is_complete for model in self.models or [])
