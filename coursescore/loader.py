"""
Course content loading.

Reads an Adapt-style course JSON file into an ItemStore and builds the
scoring registry on top of it.

Accepted layouts:
    [ {"_id": "course", "_type": "course", ...}, {"_id": "a-05", "_parentId": "course", ...} ]
    {"items": [ ... ]}

Records may appear in any order; parents are linked after all records are read.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from coursescore.core.items import ContentItem, ItemStore
from coursescore.core.registry import ScoringRegistry
from coursescore.sets import SETUP_FUNCTIONS


class ContentLoadError(ValueError):
    """Raised when a content file cannot be turned into an item store."""

    pass


class ItemRecord(BaseModel):
    """
    Validated view of one content item record.

    Only the fields the engine reads are checked; the item keeps every key
    of the raw record as an attribute.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(alias="_id", min_length=1)
    parent_id: str | None = Field(default=None, alias="_parentId")
    type: str | None = Field(default=None, alias="_type")
    is_available: bool = Field(default=True, alias="_isAvailable")
    is_complete: bool = Field(default=False, alias="_isComplete")
    is_interaction_complete: bool = Field(default=False, alias="_isInteractionComplete")
    min_score: float | None = Field(default=None, alias="_minScore")
    max_score: float | None = Field(default=None, alias="_maxScore")
    score: float | None = Field(default=None, alias="_score")


def _validate(raw: dict[str, Any]) -> tuple[ItemRecord, dict[str, Any]]:
    if not isinstance(raw, dict):
        raise ContentLoadError(f"Content item must be an object, got {type(raw).__name__}")
    try:
        record = ItemRecord.model_validate(raw)
    except ValidationError as e:
        raise ContentLoadError(f"Invalid content item {raw.get('_id')!r}: {e}") from e
    attributes = dict(raw)
    attributes.update(record.model_dump(by_alias=True, exclude_unset=True))
    return record, attributes


def build_item_store(raw_items: Iterable[dict[str, Any]]) -> ItemStore:
    """
    Build an item store from raw item records, linking children to parents.

    A record whose parent is missing stays a root item.

    Raises:
        ContentLoadError: On invalid records or duplicate ids
    """
    validated = [_validate(raw) for raw in raw_items]

    store = ItemStore()
    for record, attributes in validated:
        try:
            store.add(ContentItem(record.id, attributes))
        except ValueError as e:
            raise ContentLoadError(str(e)) from e

    for record, _ in validated:
        if record.parent_id is None:
            continue
        parent = store.find_by_id(record.parent_id)
        if parent is None:
            logger.warning(f"Item {record.id} has unknown parent {record.parent_id}")
            continue
        if record.id in {parent.id, *(a.id for a in parent.get_ancestor_models())}:
            raise ContentLoadError(f"Item {record.id} is its own ancestor")
        store.attach(store.find_by_id(record.id), parent)

    logger.debug(f"Built item store with {len(store)} items")
    return store


def load_course(path: Path | str) -> ItemStore:
    """
    Load a course content file.

    Raises:
        ContentLoadError: If the file is missing, not JSON, or invalid
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentLoadError(f"Content file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentLoadError(f"Content file is not valid JSON: {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("items")
    if not isinstance(raw, list):
        raise ContentLoadError("Content must be a list of items or an object with an 'items' list")

    logger.info(f"Loading {len(raw)} content items from {path}")
    return build_item_store(raw)


def build_registry(store: ItemStore, strict_paths: bool = False) -> ScoringRegistry:
    """Create the registry for a store and set up all root sets."""
    registry = ScoringRegistry(store, strict_paths=strict_paths)
    for setup in SETUP_FUNCTIONS:
        setup(registry)
    return registry
