"""Tests for the read-only data catalog."""

import pytest

from lazy_radial.core.catalog import DataCatalog
from lazy_radial.core.exceptions import NotFoundError


@pytest.fixture
def catalog():
    """Two roots; r1 has a two-level subtree, r2 is a leaf root."""
    return DataCatalog.from_dataset(
        {
            "nodes": [
                {"id": "r1", "data": {"label": "Root 1"}},
                {"id": "r2"},
                {"id": "a"},
                {"id": "b"},
                {"id": "a1"},
                {"id": "a2"},
            ],
            "edges": [
                {"source": "r1", "target": "a"},
                {"source": "r1", "target": "b"},
                {"source": "a", "target": "a1"},
                {"source": "a", "target": "a2"},
            ],
            "rootIds": ["r1", "r2"],
        }
    )


class TestLookups:
    """Basic id-indexed access."""

    def test_root_ids_and_size(self, catalog):
        assert catalog.root_ids == ["r1", "r2"]
        assert len(catalog) == 6
        assert "a1" in catalog
        assert catalog.has_node("b")
        assert not catalog.has_node("zz")

    def test_get_node(self, catalog):
        node = catalog.get_node("a")
        assert node.hierarchy == 1
        assert node.group_id == 0
        assert node.children_ids == ("a1", "a2")
        assert node.has_children

    def test_unknown_id_raises(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.get_node("ghost")

    def test_is_root(self, catalog):
        assert catalog.is_root("r2")
        assert not catalog.is_root("a")


class TestChildren:
    """Children queries used on expand."""

    def test_children_exactly_match_edges(self, catalog):
        children = catalog.get_children("r1")
        assert [c.id for c in children] == ["a", "b"]

    def test_children_reset_to_unloaded(self, catalog):
        child = catalog.get_children("r1")[0]
        assert child.data["collapsed"] is True
        assert child.data["_lazyLoaded"] is False
        assert child.data["hasChildren"] is True
        assert child.data["childrenIds"] == ["a1", "a2"]

    def test_leaf_has_no_children(self, catalog):
        assert catalog.get_children("b") == []
        assert catalog.get_child_edges("b") == []

    def test_unknown_parent_raises(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.get_children("ghost")

    def test_only_root_edges_are_direct_lines(self, catalog):
        root_edges = catalog.get_child_edges("r1")
        deep_edges = catalog.get_child_edges("a")

        assert all(edge.is_direct_line for edge in root_edges)
        assert not any(edge.is_direct_line for edge in deep_edges)
        assert deep_edges[0].data == {"sourceHierarchy": 1, "targetHierarchy": 2}


class TestTraversal:
    """Descendants and subtrees."""

    def test_descendants_breadth_first(self, catalog):
        assert catalog.get_descendant_ids("r1") == ["a", "b", "a1", "a2"]
        assert catalog.get_descendant_ids("r2") == []

    def test_subtree_is_nested(self, catalog):
        subtree = catalog.get_subtree("a")
        assert subtree["id"] == "a"
        assert [c["id"] for c in subtree["children"]] == ["a1", "a2"]
        assert subtree["children"][0]["children"] == []

    def test_subtree_round_trips_through_catalog(self, catalog):
        rebuilt = DataCatalog.from_dataset(catalog.get_subtree("r1"))
        assert len(rebuilt) == 5
        assert rebuilt.get_descendant_ids("r1") == catalog.get_descendant_ids("r1")


class TestInitialDataAndStats:
    """First-load view and dataset statistics."""

    def test_initial_data_is_roots_only(self, catalog):
        initial = catalog.get_initial_data()
        assert [n.id for n in initial] == ["r1", "r2"]
        assert initial[0].data["label"] == "Root 1"

    def test_stats(self, catalog):
        stats = catalog.get_stats()
        assert stats.total_nodes == 6
        assert stats.total_edges == 4
        assert stats.root_nodes == 2
        assert stats.max_hierarchy == 2
        assert stats.avg_children_per_parent == 2.0
