"""
Unit tests for ScoringRegistry.

Tests:
- Registration uniqueness and order
- Aggregate completion and score
- Global lookups
- Update fan-out on item completion changes
- Event hooks
"""

import math

import pytest

from coursescore.core.composer import register_set_type
from coursescore.core.items import ItemStore
from coursescore.core.registry import DuplicateRegistrationError, ScoringRegistry
from coursescore.sets import AssessmentSet, BucketSet
from coursescore.sets.base import ScoringSet


@register_set_type("stub")
class StubSet(ScoringSet):
    """Set with scores and completion taken from options."""

    def __init__(self, registry, options=None, subset_parent=None):
        self.update_calls = 0
        super().__init__(registry, options, subset_parent)

    @property
    def models(self):
        return self.filter_models([])

    @property
    def min_score(self):
        return self.options.get("min_score", 0)

    @property
    def max_score(self):
        return self.options.get("max_score", 0)

    @property
    def score(self):
        return self.options.get("score", 0)

    @property
    def is_complete(self):
        return self.options.get("complete", False)

    @property
    def is_passed(self):
        return False

    def update(self):
        self.update_calls += 1
        super().update()


@pytest.fixture
def empty_registry():
    return ScoringRegistry(ItemStore())


class TestRegistration:
    def test_sets_kept_in_registration_order(self, empty_registry):
        first = StubSet(empty_registry, {"id": "x"})
        second = StubSet(empty_registry, {"id": "y"})
        assert empty_registry.subsets == [first, second]

    def test_duplicate_id_raises_before_mutation(self, empty_registry):
        StubSet(empty_registry, {"id": "x"})
        with pytest.raises(DuplicateRegistrationError, match="same id: x"):
            StubSet(empty_registry, {"id": "x"})
        assert [s.id for s in empty_registry.subsets] == ["x"]

    def test_subsets_returns_a_copy(self, empty_registry):
        StubSet(empty_registry, {"id": "x"})
        empty_registry.subsets.clear()
        assert len(empty_registry.subsets) == 1


class TestAggregates:
    def test_summed_scores(self, empty_registry):
        StubSet(empty_registry, {"id": "x", "is_score_included": True, "min_score": 0, "max_score": 10, "score": 5})
        StubSet(empty_registry, {"id": "y", "is_score_included": True, "min_score": 0, "max_score": 20, "score": 10})
        StubSet(empty_registry, {"id": "z", "min_score": 0, "max_score": 100, "score": 100})

        assert [s.id for s in empty_registry.scoring_sets] == ["x", "y"]
        assert empty_registry.min_score == 0
        assert empty_registry.max_score == 30
        assert empty_registry.score == 15
        assert empty_registry.scaled_score == pytest.approx(50)

    def test_no_scoring_sets(self, empty_registry):
        assert empty_registry.score == 0
        assert empty_registry.max_score == 0
        assert math.isnan(empty_registry.scaled_score)

    def test_completion_is_vacuously_true(self, empty_registry):
        StubSet(empty_registry, {"id": "x"})
        assert empty_registry.completion_sets == []
        assert empty_registry.is_complete is True

    def test_completion_requires_every_required_set(self, empty_registry):
        StubSet(empty_registry, {"id": "x", "is_completion_required": True, "complete": True})
        StubSet(empty_registry, {"id": "y", "is_completion_required": True, "complete": False})
        StubSet(empty_registry, {"id": "z", "complete": False})
        assert empty_registry.is_complete is False

    def test_sample_course_scores(self, registry):
        # a-05 (max 4) and b1 (max 3) are score included
        assert [s.id for s in registry.scoring_sets] == ["a-05", "b1"]
        assert registry.max_score == 7
        assert registry.score == 0
        assert [s.id for s in registry.completion_sets] == ["a-05", "b2"]

    def test_models_union(self, registry):
        assert [m.id for m in registry.models] == ["b-05", "b-10", "c-10", "c-15", "b-15"]


class TestLookups:
    def test_get_subset_by_id(self, registry):
        assert isinstance(registry.get_subset_by_id("a-05"), AssessmentSet)
        assert registry.get_subset_by_id("missing") is None

    def test_get_subsets_by_type(self, registry):
        assert [s.id for s in registry.get_subsets_by_type("bucket")] == ["b1", "b2"]
        assert all(isinstance(s, BucketSet) for s in registry.get_subsets_by_type("bucket"))

    def test_get_subsets_by_model_id(self, registry):
        assert [s.id for s in registry.get_subsets_by_model_id("c-10")] == ["assessments", "a-05", "buckets", "b1"]

    def test_get_subsets_by_unknown_model_id(self, registry):
        assert registry.get_subsets_by_model_id("missing") == []

    def test_strict_registry_raises_on_unknown_path(self, store):
        from coursescore.core.composer import UnresolvedPathError
        from coursescore.loader import build_registry

        strict = build_registry(store, strict_paths=True)
        with pytest.raises(UnresolvedPathError):
            strict.get_subset_by_path("b1.nope")


class TestUpdate:
    def test_update_runs_every_root_set_once(self, empty_registry):
        sets = [StubSet(empty_registry, {"id": i}) for i in ("x", "y", "z")]
        empty_registry.update()
        assert [s.update_calls for s in sets] == [1, 1, 1]

    def test_item_completion_change_triggers_update(self, chain_store):
        registry = ScoringRegistry(chain_store)
        set_ = StubSet(registry, {"id": "x"})

        chain_store.find_by_id("B").set("_isInteractionComplete", True)

        assert set_.update_calls == 1

    def test_derived_sets_are_not_updated(self, empty_registry):
        root = StubSet(empty_registry, {"id": "x"})
        derived = StubSet(empty_registry, {"id": "y"}, subset_parent=root)
        empty_registry.update()
        assert derived.update_calls == 0

    def test_close_stops_listening(self, chain_store):
        registry = ScoringRegistry(chain_store)
        set_ = StubSet(registry, {"id": "x"})
        registry.close()

        chain_store.find_by_id("B").set("_isInteractionComplete", True)

        assert set_.update_calls == 0


class TestEvents:
    def test_trigger_calls_listeners_in_order(self, empty_registry):
        calls = []
        empty_registry.on("done", lambda value: calls.append(("first", value)))
        empty_registry.on("done", lambda value: calls.append(("second", value)))

        empty_registry.trigger("done", 1)

        assert calls == [("first", 1), ("second", 1)]

    def test_off_removes_listener(self, empty_registry):
        calls = []
        empty_registry.on("done", calls.append)
        empty_registry.off("done", calls.append)

        empty_registry.trigger("done", 1)

        assert calls == []
