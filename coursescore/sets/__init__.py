"""
Concrete scoring sets.

Each set type has its own module providing the set classes and a setup
function that creates the root sets once content data is ready. Importing
this package registers every type with the composer's type registry.
"""

from coursescore.sets.aggregate import AggregateSet
from coursescore.sets.assessment import AssessmentSet, AssessmentsSet, setup_assessments
from coursescore.sets.base import ItemScoredSet, ScoringSet
from coursescore.sets.bucket import BucketSet, BucketsSet, setup_buckets

SETUP_FUNCTIONS = [setup_assessments, setup_buckets]

__all__ = [
    "AggregateSet",
    "AssessmentSet",
    "AssessmentsSet",
    "BucketSet",
    "BucketsSet",
    "ItemScoredSet",
    "ScoringSet",
    "SETUP_FUNCTIONS",
    "setup_assessments",
    "setup_buckets",
]
