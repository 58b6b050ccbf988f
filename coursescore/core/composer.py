"""
Subset composition.

Builds derived "intersection" sets by piping sets left to right: each set in
the chain is re-created with the previous result as its subset parent, so it
only keeps its own models that intersect the parent's hierarchy. The class of
the last set decides the class of the result:

    retention-question-components -> assessment-blocks  gives assessment-blocks
    assessment-blocks -> retention-question-components  gives retention-question-components

Set classes are looked up by type tag. Concrete sets announce themselves with
the @register_set_type decorator.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from loguru import logger

from coursescore.core.hierarchy import has_intersecting_hierarchy

if TYPE_CHECKING:
    from coursescore.core.registry import ScoringRegistry
    from coursescore.sets.base import ScoringSet

PATH_SEPARATOR = "."


class UnknownSetTypeError(KeyError):
    """Raised when no set class is registered for a type tag."""

    pass


class UnresolvedPathError(LookupError):
    """Raised in strict mode when a path id matches no root set."""

    pass


# Set class registry - populated by @register_set_type decorator
SET_CLASSES: dict[str, type[ScoringSet]] = {}


def register_set_type(set_type: str):
    """Decorator to register a concrete set class under a type tag."""
    def decorator(cls):
        cls.set_type = set_type
        SET_CLASSES[set_type] = cls
        return cls
    return decorator


def get_set_class(set_type: str | None) -> type[ScoringSet] | None:
    """Get the set class for a type tag."""
    if set_type is None:
        return None
    return SET_CLASSES.get(set_type)


# ============================================================================
# Composition
# ============================================================================


def create_intersection_subset(sets: Sequence[ScoringSet | None]) -> ScoringSet | None:
    """
    Fold a sequence of sets into one intersection set.

    Absent entries are passed over. The first present set starts the chain
    unchanged; each following set is re-created from its own options with the
    chain so far as subset parent.

    Args:
        sets: Ordered sets, may contain None

    Returns:
        The derived set, or None if no set is present

    Raises:
        UnknownSetTypeError: If a set's type has no registered class
    """
    subset_parent = None
    for set_ in sets:
        if set_ is None:
            continue
        if subset_parent is None:
            subset_parent = set_
            continue
        set_class = get_set_class(set_.type)
        if set_class is None:
            raise UnknownSetTypeError(set_.type)
        subset_parent = set_class(set_.registry, set_.options, subset_parent=subset_parent)
    return subset_parent


def _intersect_all(sets: list[ScoringSet], subset_parent: ScoringSet | None) -> list[ScoringSet]:
    if subset_parent is None:
        return sets
    return [create_intersection_subset([subset_parent, set_]) for set_ in sets]


# ============================================================================
# Lookups
# ============================================================================


def get_raw_sets(registry: ScoringRegistry, exclude_parent: ScoringSet | None = None) -> list[ScoringSet]:
    """Return all root sets, leaving out the one matching exclude_parent's id and type."""
    if exclude_parent is None:
        return registry.subsets
    return [
        set_
        for set_ in registry.subsets
        if not (set_.id == exclude_parent.id and set_.type == exclude_parent.type)
    ]


def get_subsets(registry: ScoringRegistry, subset_parent: ScoringSet | None = None) -> list[ScoringSet]:
    """Return all root sets, or their intersections with subset_parent."""
    return _intersect_all(get_raw_sets(registry, subset_parent), subset_parent)


def get_subsets_by_type(
    registry: ScoringRegistry, set_type: str, subset_parent: ScoringSet | None = None
) -> list[ScoringSet]:
    """Return root sets of a type, or their intersections with subset_parent."""
    sets = [set_ for set_ in get_raw_sets(registry, subset_parent) if set_.type == set_type]
    return _intersect_all(sets, subset_parent)


def get_subsets_by_model_id(
    registry: ScoringRegistry, model_id: str, subset_parent: ScoringSet | None = None
) -> list[ScoringSet]:
    """
    Return root sets whose models intersect the hierarchy of one item.

    An unknown item id yields no sets.
    """
    model = registry.store.find_by_id(model_id)
    if model is None:
        logger.warning(f"No item found with id '{model_id}'")
        return []
    sets = []
    for set_ in get_raw_sets(registry, subset_parent):
        models = set_.models
        if models is not None and has_intersecting_hierarchy(models, [model]):
            sets.append(set_)
    return _intersect_all(sets, subset_parent)


def get_subset_by_id(
    registry: ScoringRegistry, set_id: str, subset_parent: ScoringSet | None = None
) -> ScoringSet | None:
    """Return the root set with set_id, intersected with subset_parent if given."""
    set_ = next((set_ for set_ in get_raw_sets(registry, subset_parent) if set_.id == set_id), None)
    if set_ is None:
        return None
    if subset_parent is not None:
        return create_intersection_subset([subset_parent, set_])
    return set_


def split_path(path: str | Sequence[str]) -> list[str]:
    """Turn 'id.id.id' into a list of ids; lists pass through."""
    if isinstance(path, str):
        return path.split(PATH_SEPARATOR)
    return list(path)


def get_subset_by_path(
    registry: ScoringRegistry,
    path: str | Sequence[str],
    subset_parent: ScoringSet | None = None,
    strict: bool = False,
) -> ScoringSet | None:
    """
    Create an intersection set from a path of root set ids.

    Every id is looked up among the root sets on its own. When subset_parent
    is given it starts the chain.

    Args:
        registry: Registry holding the root sets
        path: 'id1.id2.id3' or ['id1', 'id2', 'id3']
        subset_parent: Optional set to start the chain with
        strict: Raise instead of skipping ids that match no root set

    Returns:
        The intersection set, or None if nothing resolved

    Raises:
        UnresolvedPathError: In strict mode, for an unknown id
    """
    sets: list[ScoringSet | None] = []
    for set_id in split_path(path):
        set_ = get_subset_by_id(registry, set_id)
        if set_ is None:
            if strict:
                raise UnresolvedPathError(f"No set with id '{set_id}' in path {path!r}")
            logger.warning(f"Skipping unknown set id '{set_id}' in path {path!r}")
        sets.append(set_)
    if subset_parent is not None:
        sets.insert(0, subset_parent)
    return create_intersection_subset(sets)
