"""
Core Module - Set intersection and registry engine.

Components:
- items: Content item tree and store (host side)
- hierarchy: Ancestor/descendant intersection of item collections
- scores: Scaled score and score summing helpers
- composer: Intersection subset construction and set lookups
- registry: Root set registry with aggregate completion and score

Design Principle:
Concrete set policies (scores and completion rules) live in
coursescore.sets and only reach the engine through the ScoringSet
interface and the type tag registry.
"""

from coursescore.core.composer import (
    SET_CLASSES,
    UnknownSetTypeError,
    UnresolvedPathError,
    create_intersection_subset,
    get_set_class,
    get_subset_by_path,
    register_set_type,
)
from coursescore.core.hierarchy import (
    expand_with_descendants,
    filter_intersecting_hierarchy,
    has_intersecting_hierarchy,
)
from coursescore.core.items import ContentItem, ItemStore
from coursescore.core.registry import DuplicateRegistrationError, ScoringRegistry
from coursescore.core.scores import get_scaled_score_from_min_max

__all__ = [
    # Items
    "ContentItem",
    "ItemStore",
    # Hierarchy
    "expand_with_descendants",
    "filter_intersecting_hierarchy",
    "has_intersecting_hierarchy",
    "get_scaled_score_from_min_max",
    # Composition
    "SET_CLASSES",
    "create_intersection_subset",
    "get_set_class",
    "get_subset_by_path",
    "register_set_type",
    # Registry
    "ScoringRegistry",
    # Errors
    "DuplicateRegistrationError",
    "UnknownSetTypeError",
    "UnresolvedPathError",
]
