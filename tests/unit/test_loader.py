"""
Unit tests for course content loading.
"""

import json

import pytest

from coursescore.loader import ContentLoadError, build_item_store, build_registry, load_course


class TestBuildItemStore:
    def test_links_parents_regardless_of_order(self):
        store = build_item_store([
            {"_id": "c", "_parentId": "b"},
            {"_id": "b", "_parentId": "a"},
            {"_id": "a"},
        ])
        assert [d.id for d in store.find_by_id("a").get_all_descendant_models()] == ["b", "c"]

    def test_keeps_all_record_fields(self):
        store = build_item_store([{"_id": "a", "_buckets": ["b1"], "title": "A", "_maxScore": 3}])
        item = store.find_by_id("a")
        assert item.get("_buckets") == ["b1"]
        assert item.get("title") == "A"
        assert item.get("_maxScore") == 3

    def test_unknown_parent_leaves_root(self):
        store = build_item_store([{"_id": "a", "_parentId": "ghost"}])
        assert store.find_by_id("a").parent is None

    def test_parent_cycle(self):
        with pytest.raises(ContentLoadError, match="own ancestor"):
            build_item_store([{"_id": "a", "_parentId": "b"}, {"_id": "b", "_parentId": "a"}])

    def test_missing_id(self):
        with pytest.raises(ContentLoadError, match="Invalid content item"):
            build_item_store([{"title": "no id"}])

    def test_invalid_flag_type(self):
        with pytest.raises(ContentLoadError):
            build_item_store([{"_id": "a", "_isAvailable": "sometimes"}])

    def test_duplicate_id(self):
        with pytest.raises(ContentLoadError, match="Duplicate item id"):
            build_item_store([{"_id": "a"}, {"_id": "a"}])

    def test_non_object_record(self):
        with pytest.raises(ContentLoadError, match="must be an object"):
            build_item_store(["a"])


class TestLoadCourse:
    def test_loads_sample_course(self, course_file):
        store = load_course(course_file)
        assert len(store) == 12
        assert store.find_by_id("c-10").parent.id == "b-10"

    def test_accepts_plain_list(self, tmp_path):
        path = tmp_path / "course.json"
        path.write_text(json.dumps([{"_id": "course", "_type": "course"}]))
        assert [item.id for item in load_course(path)] == ["course"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ContentLoadError, match="not found"):
            load_course(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "course.json"
        path.write_text("{not json")
        with pytest.raises(ContentLoadError, match="not valid JSON"):
            load_course(path)

    def test_wrong_layout(self, tmp_path):
        path = tmp_path / "course.json"
        path.write_text(json.dumps({"things": []}))
        with pytest.raises(ContentLoadError, match="'items' list"):
            load_course(path)


def test_build_registry_runs_every_setup(store):
    registry = build_registry(store)
    assert {s.type for s in registry.subsets} == {"assessments", "assessment", "buckets", "bucket"}
    assert registry.strict_paths is False
