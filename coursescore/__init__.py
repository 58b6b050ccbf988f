"""
coursescore - completion and scoring sets over hierarchical course content.

Root sets (assessments, buckets, ...) register with a ScoringRegistry and can
be intersected with each other through their ancestor/descendant hierarchy:

    registry = build_registry(load_course("course.json"))
    registry.get_subset_by_path("bucket1.a-05").score
"""

from coursescore.core import (
    ContentItem,
    DuplicateRegistrationError,
    ItemStore,
    ScoringRegistry,
    UnknownSetTypeError,
    UnresolvedPathError,
    create_intersection_subset,
    filter_intersecting_hierarchy,
    has_intersecting_hierarchy,
)
from coursescore.loader import ContentLoadError, build_item_store, build_registry, load_course
from coursescore.sets import (
    AssessmentSet,
    AssessmentsSet,
    BucketSet,
    BucketsSet,
    ScoringSet,
)

__version__ = "0.1.0"

__all__ = [
    "AssessmentSet",
    "AssessmentsSet",
    "BucketSet",
    "BucketsSet",
    "ContentItem",
    "ContentLoadError",
    "DuplicateRegistrationError",
    "ItemStore",
    "ScoringRegistry",
    "ScoringSet",
    "UnknownSetTypeError",
    "UnresolvedPathError",
    "build_item_store",
    "build_registry",
    "create_intersection_subset",
    "filter_intersecting_hierarchy",
    "has_intersecting_hierarchy",
    "load_course",
]
