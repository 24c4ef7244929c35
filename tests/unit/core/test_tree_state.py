"""Tests for the visible-tree state manager."""

import pytest
from rich.tree import Tree

from lazy_radial.core.tree_state import TreeStateManager


@pytest.fixture
def state():
    manager = TreeStateManager()
    manager.initialize_roots(["r1", "r2"])
    return manager


class TestInitializeRoots:
    def test_roots_are_unloaded_level_zero(self, state):
        assert state.get_root_ids() == ["r1", "r2"]
        assert state.get_level("r1") == 0
        assert state.get_parent_id("r1") is None
        assert not state.is_loaded("r1")


class TestExpand:
    """Attaching children."""

    def test_expand_marks_parent_loaded(self, state):
        assert state.expand("r1", ["a", "b"])
        assert state.is_loaded("r1")
        assert state.get_children("r1") == ["a", "b"]
        assert state.get_level("a") == 1
        assert state.get_parent_id("b") == "r1"

    def test_expand_unknown_parent_is_noop(self, state):
        before = state.snapshot()
        assert state.expand("ghost", ["x"]) is False
        assert state.snapshot() == before

    def test_loaded_iff_children_present(self, state):
        state.expand("r1", ["a"])
        for node_id in state.get_visible_node_ids():
            assert state.is_loaded(node_id) == bool(state.get_children(node_id))

    def test_visible_node_keeps_its_parent(self, state):
        state.expand("r1", ["a", "b"])
        state.expand("a", ["c"])
        state.expand("b", ["c", "d"])

        assert state.get_parent_id("c") == "a"
        assert state.get_children("b") == ["d"]
        assert state.get_children("a") == ["c"]

    def test_root_is_never_attached_as_child(self, state):
        state.expand("r1", ["a"])
        state.expand("a", ["r1", "r2"])

        assert state.get_children("a") == []
        assert state.get_parent_id("r1") is None
        assert state.get_ancestor_chain("a") == ["r1"]
        assert state.collapse("r1") == ["a"]


class TestCollapse:
    """Detaching descendants."""

    def test_collapse_returns_six_removed_ids(self, state):
        state.expand("r1", ["a", "b"])
        state.expand("a", ["a1", "a2"])
        state.expand("b", ["b1", "b2"])

        removed = state.collapse("r1")

        assert len(removed) == 6
        assert removed == ["a", "a1", "a2", "b", "b1", "b2"]
        assert not state.is_loaded("r1")
        assert state.get_children("r1") == []
        assert not any(state.has_node(node_id) for node_id in removed)

    def test_collapse_unloaded_is_noop(self, state):
        assert state.collapse("r2") == []

    def test_collapse_unknown_is_noop(self, state):
        assert state.collapse("ghost") == []

    def test_collapse_terminates_on_looped_links(self, state):
        state.expand("r1", ["a"])
        state.expand("a", ["b"])
        # Corrupt the arena so b links back to a
        state._nodes["b"].children = ["a"]

        assert state.get_descendant_ids("r1") == ["a", "b"]
        assert state.collapse("r1") == ["a", "b"]
        assert state.get_visible_node_ids() == ["r1", "r2"]

    def test_expand_collapse_round_trip(self, state):
        before = state.snapshot()
        state.expand("r1", ["a", "b"])
        state.expand("a", ["a1"])
        state.collapse("r1")
        assert state.snapshot() == before


class TestQueries:
    """Pure queries over the arena."""

    @pytest.fixture
    def deep(self, state):
        state.expand("r1", ["a", "b"])
        state.expand("a", ["a1"])
        state.expand("a1", ["a1x"])
        return state

    def test_ancestor_chain_root_first(self, deep):
        assert deep.get_ancestor_chain("a1x") == ["r1", "a", "a1"]
        assert deep.get_ancestor_chain("r1") == []

    def test_descendants_breadth_first(self, deep):
        assert deep.get_descendant_ids("r1") == ["a", "b", "a1", "a1x"]

    def test_stats(self, deep):
        stats = deep.get_stats()
        assert stats.total_nodes == 6
        assert stats.root_nodes == 2
        assert stats.loaded_nodes == 3
        assert stats.max_level == 3

    def test_unknown_ids_have_defaults(self, deep):
        assert deep.get_level("ghost") == 0
        assert deep.get_parent_id("ghost") is None
        assert deep.get_children("ghost") == []

    def test_clear(self, deep):
        deep.clear()
        assert deep.get_visible_node_ids() == []
        assert deep.get_root_ids() == []

    def test_render_tree(self, deep):
        tree = deep.render_tree()
        assert isinstance(tree, Tree)
        assert len(tree.children) == 2
