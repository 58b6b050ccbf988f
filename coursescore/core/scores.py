"""Score arithmetic shared by sets and the registry."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING

from coursescore.core.hierarchy import expand_with_descendants

if TYPE_CHECKING:
    from coursescore.core.items import ContentItem


def get_scaled_score_from_min_max(score: float, min_score: float, max_score: float) -> float:
    """
    Return the percentage position of score between min_score and max_score.

    Formula: 100 * (score - min) / (max - min)

    Returns:
        Scaled score, or NaN when min_score equals max_score
    """
    distance = max_score - min_score
    if distance == 0:
        return math.nan
    return 100 * (score - min_score) / distance


def get_scored_items(models: Iterable[ContentItem] | None) -> list[ContentItem]:
    """Return models and their descendants which carry a _maxScore."""
    if not models:
        return []
    return [item for item in expand_with_descendants(models) if item.get("_maxScore") is not None]


def sum_item_field(items: Iterable[ContentItem], field: str) -> float:
    """Sum a numeric item attribute, treating missing values as 0."""
    return sum(item.get(field) or 0 for item in items)
