"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.

Sample course (tests/fixtures/course.json):

    course                      buckets b1 (score included), b2 (completion required)
    ├── a-05  assessment        score included, completion required
    │   ├── b-05  [b1]
    │   │   └── c-05            max 1
    │   └── b-10
    │       ├── c-10  [b1]      max 2
    │       └── c-15  [b2]      max 1
    └── a-10
        ├── b-15  [b2]
        │   └── c-20            max 1
        └── b-20  [b1]          unavailable
            └── c-25
"""
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from coursescore.core.items import ContentItem, ItemStore  # noqa: E402
from coursescore.loader import build_item_store, build_registry  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def course_file():
    """Path to the sample course content file."""
    return FIXTURES_DIR / "course.json"


@pytest.fixture
def course_items(course_file):
    """Raw item records of the sample course."""
    return json.loads(course_file.read_text(encoding="utf-8"))["items"]


@pytest.fixture
def store(course_items):
    """Item store built from the sample course."""
    return build_item_store(course_items)


@pytest.fixture
def registry(store):
    """Registry with the assessment and bucket sets of the sample course."""
    return build_registry(store)


def make_tree(parents: dict[str, str | None], **attributes: dict) -> ItemStore:
    """
    Build a small store from {item_id: parent_id} in insertion order.

    Keyword arguments give extra attributes per item id.
    """
    store = ItemStore()
    for item_id, parent_id in parents.items():
        store.add(ContentItem(item_id, attributes.get(item_id)), parent_id=parent_id)
    return store


@pytest.fixture
def chain_store():
    """Root -> A -> B, plus an unrelated root X."""
    return make_tree({"root": None, "A": "root", "B": "A", "X": None})


@pytest.fixture
def tree_factory():
    """Return make_tree for tests that need their own item tree."""
    return make_tree
