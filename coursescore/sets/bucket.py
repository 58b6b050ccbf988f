"""
Bucket sets.

Buckets are configured on the course item under `_buckets._items`. Any
content item listing a bucket id in its own `_buckets` array belongs to that
bucket, wherever it sits in the tree.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from coursescore.core.composer import register_set_type
from coursescore.sets.aggregate import AggregateSet
from coursescore.sets.base import ItemScoredSet

if TYPE_CHECKING:
    from coursescore.core.items import ContentItem
    from coursescore.core.registry import ScoringRegistry
    from coursescore.sets.base import ScoringSet


@register_set_type("bucket")
class BucketSet(ItemScoredSet):
    """Items tagged with one bucket id."""

    def __init__(
        self,
        registry: ScoringRegistry,
        options: dict[str, Any] | None = None,
        subset_parent: ScoringSet | None = None,
    ):
        options = dict(options or {})
        options["id"] = options.get("id") or ""
        super().__init__(registry, options, subset_parent)

    @property
    def models(self) -> list[ContentItem] | None:
        models = self.registry.store.filter(self._is_member)
        return self.filter_models(models)

    def _is_member(self, item: ContentItem) -> bool:
        buckets = item.get("_buckets")
        return isinstance(buckets, list) and self.id in buckets

    @property
    def is_passed(self) -> bool:
        return False

    def on_completed(self) -> None:
        super().on_completed()
        self.registry.trigger("bucket:complete", self)


@register_set_type("buckets")
class BucketsSet(AggregateSet):
    """All bucket models, for all buckets or an intersecting subset of buckets."""

    member_type = "bucket"

    def __init__(
        self,
        registry: ScoringRegistry,
        options: dict[str, Any] | None = None,
        subset_parent: ScoringSet | None = None,
    ):
        options = dict(options or {})
        options["id"] = "buckets"
        super().__init__(registry, options, subset_parent)


def setup_buckets(registry: ScoringRegistry) -> list[BucketSet]:
    """
    Create the bucket root sets once content data is ready.

    Bucket options come from the course item's `_buckets._items` entries.
    """
    BucketsSet(registry)
    course = next(iter(registry.store.filter(lambda item: item.get("_type") == "course")), None)
    config = course.get("_buckets") if course is not None else None
    if not isinstance(config, dict) or not config.get("_isEnabled"):
        logger.debug("Buckets not enabled on course")
        return []

    buckets = []
    for bucket_config in config.get("_items") or []:
        buckets.append(
            BucketSet(
                registry,
                {
                    "id": bucket_config.get("_id"),
                    "title": bucket_config.get("title", ""),
                    "is_score_included": bucket_config.get("_isScoreIncluded", False),
                    "is_completion_required": bucket_config.get("_isCompletionRequired", False),
                },
            )
        )
    logger.info(f"Created {len(buckets)} bucket set(s)")
    return buckets
