"""
Assessment sets.

Every content item with an enabled `_assessment` config becomes an
AssessmentSet holding the item's children (the assessment blocks). A single
AssessmentsSet aggregates them all.
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


@register_set_type("assessment")
class AssessmentSet(ItemScoredSet):
    """Blocks of one assessment item."""

    def __init__(
        self,
        registry: ScoringRegistry,
        options: dict[str, Any] | None = None,
        subset_parent: ScoringSet | None = None,
    ):
        options = dict(options or {})
        self._model: ContentItem = options["model"]
        options["id"] = self._model.id
        options.setdefault("title", self._model.get("title") or self._model.get("displayTitle") or "")
        super().__init__(registry, options, subset_parent)

    @property
    def model(self) -> ContentItem:
        return self._model

    @property
    def models(self) -> list[ContentItem] | None:
        return self.filter_models(self._model.get_children())

    @property
    def is_passed(self) -> bool:
        # pass state is kept on the assessment item by the host
        return bool(self._model.get("_isPassed", False))

    def on_completed(self) -> None:
        super().on_completed()
        self.registry.trigger("assessments:complete", self)

    def on_passed(self) -> None:
        super().on_passed()
        self.registry.trigger("assessments:passed", self)


@register_set_type("assessments")
class AssessmentsSet(AggregateSet):
    """All assessment models, for all or an intersecting subset of assessments."""

    member_type = "assessment"

    def __init__(
        self,
        registry: ScoringRegistry,
        options: dict[str, Any] | None = None,
        subset_parent: ScoringSet | None = None,
    ):
        options = dict(options or {})
        options["id"] = "assessments"
        super().__init__(registry, options, subset_parent)


def get_assessment_config(item: ContentItem) -> dict[str, Any] | None:
    config = item.get("_assessment")
    if not isinstance(config, dict) or not config.get("_isEnabled"):
        return None
    return config


def setup_assessments(registry: ScoringRegistry) -> list[AssessmentSet]:
    """
    Create the assessment root sets once content data is ready.

    Returns:
        The AssessmentSet created for each enabled assessment item
    """
    AssessmentsSet(registry)
    assessments = []
    for item in registry.store.filter(lambda item: get_assessment_config(item) is not None):
        config = get_assessment_config(item)
        assessments.append(
            AssessmentSet(
                registry,
                {
                    "model": item,
                    "is_score_included": config.get("_isScoreIncluded", False),
                    "is_completion_required": config.get("_isCompletionRequired", False),
                },
            )
        )
    logger.info(f"Created {len(assessments)} assessment set(s)")
    return assessments
