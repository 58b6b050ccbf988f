"""
Aggregate sets.

An aggregate set gathers every root set of one member type (all assessments,
all buckets) and reports their combined models, score and completion. When
used as an intersection, the members are intersected with the aggregate's own
subset parent first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from coursescore.core import composer
from coursescore.sets.base import ScoringSet

if TYPE_CHECKING:
    from coursescore.core.items import ContentItem


class AggregateSet(ScoringSet):
    """Set made of all root sets of member_type."""

    member_type: ClassVar[str]

    @property
    def subsets(self) -> list[ScoringSet]:
        """All member root sets."""
        return composer.get_subsets_by_type(self.registry, self.member_type)

    @property
    def member_sets(self) -> list[ScoringSet]:
        """Member sets, intersected with this set's subset parent when it has one."""
        members = composer.get_subsets_by_type(self.registry, self.member_type)
        if self.subset_parent is None:
            return members
        return [composer.create_intersection_subset([self.subset_parent, set_]) for set_ in members]

    @property
    def models(self) -> list[ContentItem] | None:
        models = []
        for set_ in self.subsets:
            items = set_.models
            if not items:
                continue
            models.extend(items)
        return self.filter_models(models)

    @property
    def min_score(self) -> float:
        return sum(set_.min_score for set_ in self.member_sets)

    @property
    def max_score(self) -> float:
        return sum(set_.max_score for set_ in self.member_sets)

    @property
    def score(self) -> float:
        return sum(set_.score for set_ in self.member_sets)

    @property
    def is_complete(self) -> bool:
        members = self.member_sets
        return bool(members) and all(set_.is_complete for set_ in members)

    @property
    def is_passed(self) -> bool:
        members = self.member_sets
        return bool(members) and all(set_.is_passed for set_ in members)
