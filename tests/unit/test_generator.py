"""Unit tests for the generator module."""

import pytest

from daglayer import DagLayoutGenerator, layout_dag
from daglayer.generator import to_input_edge, to_input_node
from daglayer.geometry import distance
from daglayer.graph import UnknownNodeError
from daglayer.layout import CyclicGraphError
from daglayer.models import InputEdge, InputNode, LabelBox


class FixedMeasurer:
    """Reports every label as the same size and records what it was asked."""

    def __init__(self, width, height):
        self.box = LabelBox(width, height)
        self.calls = []

    def measure(self, text, font_size):
        self.calls.append((text, font_size))
        return self.box


class TestDagLayoutGeneratorInit:
    """Tests for generator configuration."""

    def test_defaults(self, generator):
        assert generator.canvas_width == 500
        assert generator.canvas_height == 500
        assert generator.node_width == 40
        assert generator.node_height == 20
        assert generator.clearance == 3
        assert generator.strict is True

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"canvas_width": 0},
            {"canvas_height": -10},
            {"node_width": 0},
            {"node_height": 0},
            {"clearance": -1},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            DagLayoutGenerator(**kwargs)


class TestLayout:
    """Tests for the full layout pipeline."""

    def test_layers(self, fan_out_layout):
        layers = {i: [n.id for n in m] for i, m in fan_out_layout.layers.items()}
        assert layers == {0: ["10"], 1: ["20", "30"]}

    def test_node_positions(self, fan_out_layout):
        assert fan_out_layout.get_node("10").incoming_anchor.x == pytest.approx(166.667, abs=0.001)
        assert fan_out_layout.get_node("20").incoming_anchor == pytest.approx((1000 / 3, 500 / 3))
        assert fan_out_layout.get_node("30").incoming_anchor == pytest.approx((1000 / 3, 1000 / 3))

    def test_result_parameters(self, fan_out_layout):
        assert fan_out_layout.canvas_width == 500
        assert fan_out_layout.node_height == 20
        assert fan_out_layout.clearance == 3

    def test_edges_have_trimmed_end_points(self, fan_out_layout):
        assert [e.edge_id for e in fan_out_layout.edges] == ["edge_10_20", "edge_10_30"]
        for edge in fan_out_layout.edges:
            target = edge.target_node.incoming_anchor
            assert edge.start_point == edge.source_node.outgoing_anchor
            assert distance(edge.end_point, target) == pytest.approx(3)

    def test_custom_clearance(self, fan_out_nodes, fan_out_edges):
        layout = DagLayoutGenerator(clearance=10).layout(fan_out_nodes, fan_out_edges)
        edge = layout.edges[0]
        assert distance(edge.end_point, edge.target_node.incoming_anchor) == pytest.approx(10)

    def test_mapping_input(self):
        layout = DagLayoutGenerator().layout(
            [{"id": 10, "displayName": "ten"}, {"id": 20, "displayName": "twenty"}],
            [{"sourceId": 10, "targetId": 20}],
        )
        assert layout.get_node("20").display_name == "twenty"
        assert layout.edges[0].edge_id == "edge_10_20"

    def test_tuple_input(self):
        layout = layout_dag([("a", "A"), ("b", "B")], [("a", "b")], canvas_width=300)
        assert layout.get_node("b").layer_number == 1
        assert layout.canvas_width == 300

    def test_unknown_node_in_edge(self, fan_out_nodes):
        with pytest.raises(UnknownNodeError):
            DagLayoutGenerator().layout(fan_out_nodes, [InputEdge("10", "99")])

    def test_cycle_raises(self, generator, cyclic_nodes, cyclic_edges):
        with pytest.raises(CyclicGraphError):
            generator.layout(cyclic_nodes, cyclic_edges)

    def test_cycle_not_strict_drops_nodes_and_edges(self):
        nodes = [InputNode(n, n) for n in "SAB"]
        edges = [InputEdge("S", "A"), InputEdge("A", "B"), InputEdge("B", "A")]
        layout = DagLayoutGenerator(strict=False).layout(nodes, edges)
        assert [n.id for n in layout.nodes] == ["S"]
        assert layout.edges == []

    def test_empty(self, generator):
        layout = generator.layout([], [])
        assert layout.nodes == []
        assert layout.edges == []
        assert layout.layers == {}

    def test_repeatable(self, generator, diamond_nodes, diamond_edges):
        first = generator.layout(diamond_nodes, diamond_edges)
        second = generator.layout(diamond_nodes, diamond_edges)
        assert first.nodes == second.nodes
        assert first.edges == second.edges

    def test_reused_for_different_graphs(
        self, generator, fan_out_nodes, fan_out_edges, diamond_nodes, diamond_edges
    ):
        first = generator.layout(fan_out_nodes, fan_out_edges)
        second = generator.layout(diamond_nodes, diamond_edges)
        assert [n.id for n in first.nodes] == ["10", "20", "30"]
        assert {n.id for n in second.nodes} == {n.id for n in diamond_nodes}
        for layout in (first, second):
            ids = {n.id for n in layout.nodes}
            for edge in layout.edges:
                assert edge.source_node is layout.get_node(edge.source_node.id)
                assert edge.target_node.id in ids


class TestLabelMeasurements:
    """Tests for attaching measured label scales."""

    def test_apply_measurements(self, generator, fan_out_layout):
        generator.apply_label_measurements(fan_out_layout, {"10": LabelBox(80, 10)})
        assert fan_out_layout.get_node("10").scale == pytest.approx(0.5)
        assert fan_out_layout.get_node("20").scale is None

    def test_measurements_do_not_move_nodes(self, generator, fan_out_layout):
        before = [(n.incoming_anchor, n.outgoing_anchor) for n in fan_out_layout.nodes]
        generator.apply_label_measurements(
            fan_out_layout, {"20": LabelBox(10, 10), "30": LabelBox(100, 50)}
        )
        after = [(n.incoming_anchor, n.outgoing_anchor) for n in fan_out_layout.nodes]
        assert before == after

    def test_unknown_node_measurement(self, generator, fan_out_layout):
        with pytest.raises(UnknownNodeError):
            generator.apply_label_measurements(fan_out_layout, {"nope": LabelBox(1, 1)})

    def test_measure_labels(self, generator, fan_out_layout):
        measurer = FixedMeasurer(20, 10)
        generator.measure_labels(fan_out_layout, measurer)
        assert [text for text, _ in measurer.calls] == ["ten", "twenty", "thirty"]
        assert all(size == 13 for _, size in measurer.calls)
        assert all(n.scale == pytest.approx(2) for n in fan_out_layout.nodes)


class TestTrace:
    """Tests for debug tracing through the generator."""

    def test_no_trace_by_default(self, generator, fan_out_nodes, fan_out_edges):
        generator.layout(fan_out_nodes, fan_out_edges)
        assert generator.get_trace() is None

    def test_trace_stages(self, generator, fan_out_nodes, fan_out_edges):
        generator.layout(fan_out_nodes, fan_out_edges, debug=True)
        trace = generator.get_trace()
        assert [s.name for s in trace.stages] == ["index", "layers", "positions", "edges"]
        assert trace.node_count == 3
        assert trace.edge_count == 2
        assert trace.get_stage("index").data["10"] == ["20", "30"]
        assert trace.get_stage("layers").data == {0: ["10"], 1: ["20", "30"]}
        assert "edge_10_20" in trace.get_stage("edges").data


class TestInputCoercion:
    def test_node_passthrough(self):
        node = InputNode("a", "A")
        assert to_input_node(node) is node

    def test_node_mapping_without_name(self):
        assert to_input_node({"id": "a"}) == InputNode("a", "a")

    def test_node_snake_case_mapping(self):
        assert to_input_node({"id": "a", "display_name": "A"}) == InputNode("a", "A")

    def test_edge_snake_case_mapping(self):
        assert to_input_edge({"source_id": "a", "target_id": "b"}) == InputEdge("a", "b")

    def test_edge_mapping_missing_key(self):
        with pytest.raises(TypeError):
            to_input_edge({"sourceId": "a"})

    def test_unrecognised_input(self):
        with pytest.raises(TypeError):
            to_input_node(42)
        with pytest.raises(TypeError):
            to_input_edge("a->b")
