"""Tests for root, eager and lazy placement."""

import math
import random

import pytest

from lazy_radial.config.settings import LayoutOptions
from lazy_radial.core.adapter import adapt_dataset
from lazy_radial.core.catalog import DataCatalog
from lazy_radial.core.exceptions import LayoutError
from lazy_radial.core.models import GraphData, LayoutEdge, LayoutNode
from lazy_radial.visualization.layout_engine import (
    IncrementalLayoutEngine,
    calculate_child_layout,
    calculate_radial_layout,
    classify_edges,
    is_direct_line,
    layout_node_batch,
    place_roots,
)

BASE_RADIUS = 35 * 5
MIN_ARC = 35 * 3
MAX_ARC = 35 * 5


def forest():
    return adapt_dataset(
        {
            "trees": [
                {"id": "r0", "children": [{"id": "a", "children": [{"id": "a1"}]}]},
                {"id": "r1", "children": [{"id": "b"}]},
                {"id": "r2"},
            ]
        }
    )


class TestPlaceRoots:
    """Root ring placement."""

    def test_three_roots_on_ring(self):
        options = LayoutOptions()
        positions = place_roots(["a", "b", "c"], options, random.Random(5))

        assert list(positions) == ["a", "b", "c"]
        for position in positions.values():
            distance = math.hypot(position.x - 400, position.y - 300)
            assert distance == pytest.approx(BASE_RADIUS)

    @pytest.mark.parametrize("seed", range(10))
    def test_consecutive_roots_respect_arc_bounds(self, seed):
        ids = [f"r{i}" for i in range(6)]
        positions = place_roots(ids, LayoutOptions(), random.Random(seed))

        for first, second in zip(ids, ids[1:]):
            arc = (positions[second].angle - positions[first].angle) * BASE_RADIUS
            assert MIN_ARC - 1e-9 <= arc <= MAX_ARC + 1e-9

    def test_start_angle_in_range(self):
        positions = place_roots(["only"], LayoutOptions(), random.Random(1))
        assert 0 <= positions["only"].angle < 2 * math.pi

    def test_no_roots(self):
        assert place_roots([], LayoutOptions(), random.Random(1)) == {}

    def test_canvas_size_moves_center(self):
        positions = place_roots(["a"], LayoutOptions(width=200, height=100), random.Random(2))
        assert math.hypot(positions["a"].x - 100, positions["a"].y - 50) == pytest.approx(
            BASE_RADIUS
        )


class TestEagerLayout:
    """Full layout of a graph."""

    def test_every_node_positioned(self):
        result = calculate_radial_layout(forest(), LayoutOptions(seed=4))
        assert [n.id for n in result.nodes] == ["r0", "a", "a1", "r1", "b", "r2"]
        assert set(result.root_positions) == {"r0", "r1", "r2"}

    def test_node_distance_and_angle_from_group_root(self):
        options = LayoutOptions(seed=4)
        result = calculate_radial_layout(forest(), options)
        by_id = {n.id: n for n in result.nodes}
        root = result.root_positions["r0"]

        for node_id, hierarchy in (("a", 1), ("a1", 2)):
            node = by_id[node_id]
            distance = math.hypot(node.x - root.x, node.y - root.y)
            expected = options.base_distance + hierarchy * options.hierarchy_step
            assert abs(distance - expected) <= options.random_offset / 2 + 1e-9

            angle = math.atan2(node.y - root.y, node.x - root.x)
            delta = (angle - root.angle + math.pi) % (2 * math.pi) - math.pi
            assert abs(delta) <= options.angle_spread / 2 + 1e-9

    def test_seed_makes_layout_reproducible(self):
        first = calculate_radial_layout(forest(), LayoutOptions(seed=11))
        second = calculate_radial_layout(forest(), LayoutOptions(seed=11))
        assert [(n.x, n.y) for n in first.nodes] == [(n.x, n.y) for n in second.nodes]

    def test_batch_order_does_not_change_positions(self):
        graph = forest()
        options = LayoutOptions(seed=8)
        positions = place_roots(graph.root_ids, options, random.Random(8))

        forward = layout_node_batch(graph.nodes, graph.root_ids, positions, options, 8)
        backward = layout_node_batch(
            list(reversed(graph.nodes)), graph.root_ids, positions, options, 8
        )
        assert {n.id: (n.x, n.y) for n in forward} == {n.id: (n.x, n.y) for n in backward}

    def test_unresolvable_group_raises(self):
        graph = GraphData(
            nodes=[{"id": "r", "data": {}}, {"id": "x", "data": {"groupId": 7}}],
            edges=[],
            root_ids=["r"],
        )
        with pytest.raises(LayoutError) as exc_info:
            calculate_radial_layout(graph, LayoutOptions(seed=1))
        assert exc_info.value.context["node_id"] == "x"

    def test_missing_group_raises(self):
        graph = GraphData(nodes=[{"id": "r"}, {"id": "orphan"}], edges=[], root_ids=["r"])
        with pytest.raises(LayoutError):
            calculate_radial_layout(graph, LayoutOptions(seed=1))

    def test_missing_hierarchy_defaults_to_one(self):
        options = LayoutOptions(seed=2, random_offset=0)
        graph = GraphData(
            nodes=[{"id": "r", "data": {}}, {"id": "x", "data": {"groupId": 0}}],
            edges=[],
            root_ids=["r"],
        )
        result = calculate_radial_layout(graph, options)
        root = result.root_positions["r"]
        x = result.nodes[1]
        assert math.hypot(x.x - root.x, x.y - root.y) == pytest.approx(400)


class TestEdgeClassification:
    def test_direct_line_only_from_root_to_first_level(self):
        assert is_direct_line(0, 1)
        assert not is_direct_line(1, 2)
        assert not is_direct_line(0, 2)

    def test_classify_edges(self):
        edges = classify_edges(
            [{"source": "r", "target": "a"}, {"source": "a", "target": "b"}],
            {"r": 0, "a": 1, "b": 2},
        )
        assert [e.edge_type for e in edges] == ["line", "cubic-radial"]
        assert edges[1].data == {"sourceHierarchy": 1, "targetHierarchy": 2}


class TestChildLayout:
    """Lazy fan around an expanded node."""

    def test_four_children_at_level_two(self):
        children = [LayoutNode(id=f"c{i}", data={}) for i in range(4)]
        nodes, _ = calculate_child_layout((0, 0), 2, 0, children, [], LayoutOptions())

        expected = [(300, 0), (0, 300), (-300, 0), (0, -300)]
        for node, (x, y) in zip(nodes, expected):
            assert node.x == pytest.approx(x, abs=1e-9)
            assert node.y == pytest.approx(y, abs=1e-9)
            assert node.data["hierarchy"] == 3
            assert node.data["groupId"] == 0
            assert node.data["collapsed"] is True

    def test_no_children(self):
        assert calculate_child_layout((0, 0), 0, 0, [], [], LayoutOptions()) == ([], [])

    def test_edges_reclassified(self):
        child = LayoutNode(id="c", data={})
        _, edges = calculate_child_layout(
            (0, 0), 0, 0, [child], [LayoutEdge(source="p", target="c")], LayoutOptions()
        )
        assert edges[0].is_direct_line

    def test_no_randomness(self):
        children = [LayoutNode(id=f"c{i}", data={}) for i in range(3)]
        first, _ = calculate_child_layout((5, 5), 1, 0, children, [], LayoutOptions())
        second, _ = calculate_child_layout((5, 5), 1, 0, children, [], LayoutOptions())
        assert [(n.x, n.y) for n in first] == [(n.x, n.y) for n in second]


class TestIncrementalLayoutEngine:
    @pytest.fixture
    def engine(self):
        return IncrementalLayoutEngine(DataCatalog(forest()), LayoutOptions(seed=6))

    def test_initial_roots_reuse_given_positions(self, engine):
        positions = place_roots(["r0", "r1", "r2"], LayoutOptions(), random.Random(3))
        result = engine.layout_initial_roots(positions)

        assert [n.id for n in result.nodes] == ["r0", "r1", "r2"]
        assert result.nodes[0].x == positions["r0"].x
        assert result.edges == []

    def test_layout_children_reads_style_position(self, engine):
        parent = {"id": "r0", "data": {"hierarchy": 0, "groupId": 0}, "style": {"x": 10, "y": 20}}
        nodes, edges = engine.layout_children("r0", parent)

        assert [n.id for n in nodes] == ["a"]
        assert nodes[0].x == pytest.approx(110)
        assert nodes[0].y == pytest.approx(20)
        assert edges[0].is_direct_line

    def test_layout_children_of_leaf(self, engine):
        assert engine.layout_children("r2", {"x": 0, "y": 0}) == ([], [])
